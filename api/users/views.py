"""
User directory and admin user-management endpoints.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from db import get_session
from core.deps import AdminIdentity, CurrentIdentity
from .models import RoleUpdate, UserDetail, UserSummary
from . import db_manager

router = APIRouter(prefix="/users", tags=["users"])
admin_router = APIRouter(prefix="/admin/users", tags=["admin"])


@router.get("", response_model=list[UserSummary], summary="List users")
async def list_users_endpoint(
    identity: CurrentIdentity,
    db: AsyncSession = Depends(get_session),
) -> list[UserSummary]:
    """List users for pickers such as asset assignment."""
    users = await db_manager.list_users(db)
    return [UserSummary.model_validate(u) for u in users]


# --- Admin endpoints ---

@admin_router.get("", response_model=list[UserDetail], summary="List all users (admin)")
async def admin_list_users_endpoint(
    admin: AdminIdentity,
    db: AsyncSession = Depends(get_session),
) -> list[UserDetail]:
    users = await db_manager.list_users(db)
    return [UserDetail.model_validate(u) for u in users]


@admin_router.put("/{user_id}/role", response_model=UserDetail, summary="Change a user's role (admin)")
async def update_user_role_endpoint(
    user_id: int,
    payload: RoleUpdate,
    admin: AdminIdentity,
    db: AsyncSession = Depends(get_session),
) -> UserDetail:
    try:
        user = await db_manager.update_user_role(db, user_id, payload.role)
    except db_manager.UserNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    return UserDetail.model_validate(user)


@admin_router.put("/{user_id}/status", response_model=UserSummary, summary="Enable or disable a user (admin)")
async def update_user_status_endpoint(
    user_id: int,
    admin: AdminIdentity,
    db: AsyncSession = Depends(get_session),
    enabled: bool = Query(...),
) -> UserSummary:
    """
    Enable or disable an account. Admins cannot disable themselves.
    A disabled user is rejected on their next request.
    """
    if user_id == admin.user_id and not enabled:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="You cannot disable your own account.",
        )

    try:
        user = await db_manager.update_user_status(db, user_id, enabled)
    except db_manager.UserNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    return UserSummary.model_validate(user)
