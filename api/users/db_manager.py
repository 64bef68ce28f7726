"""
Business logic for user accounts: lookups, registration, role and status
changes, and the first-run admin bootstrap.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from core.security import get_password_hash
from db_models.user import User, UserRole
from . import queries

logger = logging.getLogger(__name__)


class UserNotFoundError(Exception):
    """Raised when a user doesn't exist."""
    pass


class DuplicateUserError(Exception):
    """Raised when a username or email is already taken."""
    pass


async def get_user_by_id(db: AsyncSession, user_id: int) -> User | None:
    result = await db.execute(queries.select_user_by_id(user_id))
    return result.scalar_one_or_none()


async def get_user_or_raise(db: AsyncSession, user_id: int) -> User:
    """Get a user by ID. Raises UserNotFoundError if not found."""
    user = await get_user_by_id(db, user_id)
    if user is None:
        raise UserNotFoundError(f"User not found with id: {user_id}")
    return user


async def get_user_by_username(db: AsyncSession, username: str) -> User | None:
    result = await db.execute(queries.select_user_by_username(username))
    return result.scalar_one_or_none()


async def list_users(db: AsyncSession) -> list[User]:
    result = await db.execute(queries.select_all_users())
    return list(result.scalars().all())


async def create_user(
    db: AsyncSession,
    *,
    username: str,
    email: str,
    password: str,
    firstname: str,
    lastname: str,
    role: UserRole = UserRole.USER,
) -> User:
    """
    Create an enabled user with a bcrypt-hashed password.

    Raises:
        DuplicateUserError: If the username or email is already registered
    """
    result = await db.execute(queries.select_user_by_username_or_email(username, email))
    if result.scalars().first() is not None:
        raise DuplicateUserError("Username or email already registered")

    user = User(
        username=username,
        email=email,
        hashed_password=get_password_hash(password),
        firstname=firstname,
        lastname=lastname,
        role=role.value,
        enabled=True,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    logger.info("Registered user %s (id=%s, role=%s)", user.username, user.id, user.role)
    return user


async def update_user_role(db: AsyncSession, user_id: int, role: UserRole) -> User:
    user = await get_user_or_raise(db, user_id)
    user.role = role.value
    await db.commit()
    await db.refresh(user)
    logger.info("User %s role changed to %s", user_id, user.role)
    return user


async def update_user_status(db: AsyncSession, user_id: int, enabled: bool) -> User:
    """
    Enable or disable a user account.

    Takes effect on the user's very next request; existing tokens are not
    reissued but the gate re-reads this flag every time.
    """
    user = await get_user_or_raise(db, user_id)
    user.enabled = enabled
    await db.commit()
    await db.refresh(user)
    logger.info("User %s %s", user_id, "enabled" if enabled else "disabled")
    return user


async def seed_default_admin(db: AsyncSession) -> User | None:
    """
    Create the default admin account when no ADMIN user exists.

    Returns the created user, or None when an admin is already present.
    """
    result = await db.execute(queries.count_admins())
    if (result.scalar() or 0) > 0:
        return None

    if await get_user_by_username(db, settings.DEFAULT_ADMIN_USERNAME) is not None:
        logger.warning(
            "No ADMIN user exists but username '%s' is taken; skipping admin bootstrap",
            settings.DEFAULT_ADMIN_USERNAME,
        )
        return None

    admin = User(
        username=settings.DEFAULT_ADMIN_USERNAME,
        email=settings.DEFAULT_ADMIN_EMAIL,
        hashed_password=get_password_hash(settings.DEFAULT_ADMIN_PASSWORD),
        firstname="Admin",
        lastname="User",
        role=UserRole.ADMIN.value,
        enabled=True,
    )
    db.add(admin)
    await db.commit()
    await db.refresh(admin)
    logger.warning(
        "Default admin '%s' created; change its password before going to production",
        admin.username,
    )
    return admin
