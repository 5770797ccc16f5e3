"""
Authentication schemas.
"""

from pydantic import BaseModel, EmailStr

from tracker.schemas.user import UserResponse


class LoginRequest(BaseModel):
    """Schema for user login."""

    email: EmailStr
    password: str


class AuthResponse(BaseModel):
    """Token plus the authenticated user, returned by register and login."""

    access_token: str
    token_type: str = "bearer"
    user: UserResponse
