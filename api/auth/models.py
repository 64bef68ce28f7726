# api/auth/models.py
"""
Pydantic models for authentication endpoints.
"""
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field, ConfigDict


class RegisterRequest(BaseModel):
    """Self-registration; new accounts always get the USER role."""
    firstname: str = Field(..., min_length=1, max_length=100)
    lastname: str = Field(..., min_length=1, max_length=100)
    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=8)


class AuthenticationRequest(BaseModel):
    """Login credentials."""
    username: str
    password: str


class AuthenticationResponse(BaseModel):
    token: str


class Token(BaseModel):
    """OAuth2 token response."""
    access_token: str
    token_type: str = "bearer"


class UserResponse(BaseModel):
    """User data response."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    firstname: str
    lastname: str
    role: str
    enabled: bool
    created_at: datetime
