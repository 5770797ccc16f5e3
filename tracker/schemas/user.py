"""
User schemas for API request/response validation.
Separates internal models from API contracts using Pydantic.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field

from tracker.models.user import UserRole
from tracker.schemas.pagination import PaginationMeta


class UserBase(BaseModel):
    """Base user schema with common fields."""

    email: EmailStr
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=50)


class RegisterRequest(UserBase):
    """Schema for self-registration. Role defaults to CUSTOMER when omitted."""

    password: str = Field(min_length=1, max_length=72)
    role: Optional[UserRole] = None


class UserCreate(RegisterRequest):
    """Schema for administrative user creation."""

    is_active: bool = True


class UserUpdate(BaseModel):
    """Partial update; only fields that are present are applied."""

    email: Optional[EmailStr] = None
    first_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    role: Optional[UserRole] = None
    phone: Optional[str] = Field(default=None, max_length=50)
    is_active: Optional[bool] = None


class UserFilter(BaseModel):
    """Equality filters plus a free-text search over email and names."""

    role: Optional[UserRole] = None
    is_active: Optional[bool] = None
    search: Optional[str] = None


class UserResponse(BaseModel):
    """
    Schema for user data in API responses.
    Has no password field at all, so a hash can never be serialized.
    """

    id: str
    email: str
    first_name: str
    last_name: str
    role: UserRole
    phone: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class PaginatedUsers(BaseModel):
    """A page of users with pagination metadata."""

    data: List[UserResponse]
    meta: PaginationMeta
