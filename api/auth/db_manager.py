"""
Credential checks and token issuance.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from core.deps import AccountDisabledError
from core.security import create_access_token, verify_password
from db_models.user import User
from api.users import db_manager as users_db

logger = logging.getLogger(__name__)

BAD_CREDENTIALS_MESSAGE = "Bad credentials"


class InvalidCredentialsError(Exception):
    """Raised for an unknown username or a wrong password, indistinguishably."""
    def __init__(self):
        super().__init__(BAD_CREDENTIALS_MESSAGE)


def issue_token(user: User) -> str:
    """Sign an access token for ``user`` carrying its role."""
    return create_access_token(user.username, claims={"role": user.role})


async def authenticate_user(db: AsyncSession, username: str, password: str) -> User:
    """
    Check a username/password pair.

    Raises:
        InvalidCredentialsError: unknown user or wrong password
        AccountDisabledError: credentials are right but the account is disabled
    """
    user = await users_db.get_user_by_username(db, username)
    if user is None or not verify_password(password, user.hashed_password):
        logger.info("Failed login for username %r", username)
        raise InvalidCredentialsError()

    if not user.enabled:
        raise AccountDisabledError(user.username)

    return user
