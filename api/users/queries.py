"""
SQLAlchemy query builders for user lookups.
"""
from sqlalchemy import select, func

from db_models.user import User, UserRole


def select_user_by_id(user_id: int):
    """Select a user by primary key."""
    return select(User).where(User.id == user_id)


def select_user_by_username(username: str):
    """Select a user by unique username."""
    return select(User).where(User.username == username)


def select_user_by_username_or_email(username: str, email: str):
    return select(User).where((User.username == username) | (User.email == email))


def select_all_users():
    """Select all users, oldest account first."""
    return select(User).order_by(User.id.asc())


def count_admins():
    """Count users holding the ADMIN role."""
    return select(func.count(User.id)).where(User.role == UserRole.ADMIN.value)
