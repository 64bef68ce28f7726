"""
Pydantic models for user endpoints.
"""
from datetime import datetime

from pydantic import BaseModel, ConfigDict

from db_models.user import UserRole


class UserSummary(BaseModel):
    """Public view of a user; never includes the password hash."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    firstname: str
    lastname: str
    email: str
    role: UserRole
    enabled: bool


class UserDetail(UserSummary):
    """Admin view of a user."""
    created_at: datetime


class RoleUpdate(BaseModel):
    role: UserRole
