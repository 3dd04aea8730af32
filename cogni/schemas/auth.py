"""
Authentication schemas.
"""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from cogni.domain.user import User, UserRole


class RegisterRequest(BaseModel):
    """User registration request."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    role: UserRole = UserRole.CITIZEN


class LoginRequest(BaseModel):
    """User login request."""

    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    """Authentication token response."""

    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    user: User
