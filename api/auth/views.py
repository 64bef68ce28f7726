# api/auth/views.py
"""
Registration, login and current-user endpoints.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession

from db import get_session
from core.deps import CurrentIdentity
from api.users import db_manager as users_db
from .models import (
    AuthenticationRequest,
    AuthenticationResponse,
    RegisterRequest,
    Token,
    UserResponse,
)
from . import db_manager


router = APIRouter(prefix="/auth", tags=["authentication"])


def _bad_credentials() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=db_manager.BAD_CREDENTIALS_MESSAGE,
        headers={"WWW-Authenticate": "Bearer"},
    )


@router.post(
    "/register",
    response_model=AuthenticationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
)
async def register(
    payload: RegisterRequest,
    db: AsyncSession = Depends(get_session),
) -> AuthenticationResponse:
    """Create a USER account and return a token for it."""
    try:
        user = await users_db.create_user(
            db,
            username=payload.username,
            email=payload.email,
            password=payload.password,
            firstname=payload.firstname,
            lastname=payload.lastname,
        )
    except users_db.DuplicateUserError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(exc),
        ) from exc

    return AuthenticationResponse(token=db_manager.issue_token(user))


@router.post("/authenticate", response_model=AuthenticationResponse, summary="Login with JSON body")
async def authenticate(
    credentials: AuthenticationRequest,
    db: AsyncSession = Depends(get_session),
) -> AuthenticationResponse:
    try:
        user = await db_manager.authenticate_user(db, credentials.username, credentials.password)
    except db_manager.InvalidCredentialsError as exc:
        raise _bad_credentials() from exc

    return AuthenticationResponse(token=db_manager.issue_token(user))


@router.post("/login", response_model=Token, summary="Login and get a token")
async def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_session),
) -> Token:
    """
    OAuth2 compatible login endpoint, used by the interactive docs.
    """
    try:
        user = await db_manager.authenticate_user(db, form_data.username, form_data.password)
    except db_manager.InvalidCredentialsError as exc:
        raise _bad_credentials() from exc

    return Token(access_token=db_manager.issue_token(user))


@router.get("/me", response_model=UserResponse, summary="Get current user")
async def get_me(
    identity: CurrentIdentity,
    db: AsyncSession = Depends(get_session),
) -> UserResponse:
    """Get the current authenticated user's profile."""
    user = await users_db.get_user_or_raise(db, identity.user_id)
    return UserResponse.model_validate(user)
