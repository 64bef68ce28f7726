# core/deps.py
"""
FastAPI dependencies for authentication and authorization.

``authenticate_request`` is the per-request gate. It never rejects a
request for a bad or missing token; it simply establishes no identity and
leaves the decision to ``get_current_identity`` / ``require_admin``. The one
exception is a valid token whose account has since been disabled, which
ends the request with 403 immediately.
"""
import logging
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from db import get_session
from db_models.user import User, UserRole
from core.security import TokenError, extract_subject, is_token_valid
from api.users import db_manager as users_db

logger = logging.getLogger(__name__)

# OAuth2 scheme for token extraction from Authorization header
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login", auto_error=False)

ACCOUNT_DISABLED_MESSAGE = "User account is disabled"


class AuthenticationError(HTTPException):
    """Raised when a protected endpoint is reached without an identity."""
    def __init__(self, detail: str = "Not authenticated"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class AuthorizationError(HTTPException):
    """Raised when user lacks required permissions."""
    def __init__(self, detail: str = "Not enough permissions"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
        )


class AccountDisabledError(Exception):
    """
    Raised when a validly authenticated account is disabled.

    Rendered by the handler registered in ``main.py`` as
    ``403 {"error": "User account is disabled"}``.
    """
    def __init__(self, username: str):
        super().__init__(ACCOUNT_DISABLED_MESSAGE)
        self.username = username


@dataclass(frozen=True)
class RequestIdentity:
    """The principal resolved for one request, passed explicitly to handlers."""
    user_id: int
    username: str
    role: str

    @classmethod
    def from_user(cls, user: User) -> "RequestIdentity":
        return cls(user_id=user.id, username=user.username, role=user.role)

    @property
    def authorities(self) -> tuple[str, ...]:
        return (f"ROLE_{self.role}",)

    def has_authority(self, authority: str) -> bool:
        return authority in self.authorities


async def authenticate_request(
    token: Annotated[str | None, Depends(oauth2_scheme)],
    db: AsyncSession = Depends(get_session),
) -> RequestIdentity | None:
    """
    Resolve the request identity from a bearer token.

    Returns None when there is no token, the token does not verify, the user
    no longer exists or the token has expired.

    Raises:
        AccountDisabledError: token is valid but the account is disabled
    """
    if token is None:
        return None

    try:
        username = extract_subject(token)
    except TokenError as exc:
        logger.debug("Ignoring untrusted bearer token: %s", exc)
        return None

    # Always the live row, so role changes and disablement apply immediately
    user = await users_db.get_user_by_username(db, username)
    if user is None or not is_token_valid(token, user.username):
        return None

    if not user.enabled:
        logger.info("Rejected request from disabled account %s", user.username)
        raise AccountDisabledError(user.username)

    return RequestIdentity.from_user(user)


async def get_current_identity(
    identity: Annotated[RequestIdentity | None, Depends(authenticate_request)],
) -> RequestIdentity:
    """Dependency that requires an established identity of any role."""
    if identity is None:
        raise AuthenticationError()
    return identity


# Role-based access dependencies

async def require_admin(
    identity: Annotated[RequestIdentity, Depends(get_current_identity)],
) -> RequestIdentity:
    """Dependency that requires the ADMIN authority."""
    if not identity.has_authority(f"ROLE_{UserRole.ADMIN.value}"):
        raise AuthorizationError("Admin access required")
    return identity


# Type aliases for cleaner endpoint signatures
CurrentIdentity = Annotated[RequestIdentity, Depends(get_current_identity)]
AdminIdentity = Annotated[RequestIdentity, Depends(require_admin)]
