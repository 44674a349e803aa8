"""User schemas."""
from typing import Optional
from pydantic import BaseModel, EmailStr, Field
from datetime import datetime

from taskmanager.models.user import UserRole


class UserBase(BaseModel):
    """Base user schema."""

    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    full_name: Optional[str] = Field(default=None, max_length=255)


class UserCreate(UserBase):
    """User creation (signup) schema."""

    password: str = Field(..., min_length=6, max_length=128)


class UserResponse(UserBase):
    """User response schema."""

    id: int
    role: UserRole
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
