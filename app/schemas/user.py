"""User-related Pydantic schemas for request/response validation.

Input schemas list only the fields a caller may supply. ``is_admin`` is
deliberately absent from ``UserCreateRequest`` and ``UserUpdateRequest``;
extra keys in a request body are ignored.
"""

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field, field_validator

from .base import BaseModelSchema, BaseSchema


class UserCreateRequest(BaseSchema):
    """Schema for creating a user account."""

    name: str = Field(..., min_length=1, max_length=255, description="Display name")
    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., min_length=8, max_length=72, description="Plaintext password")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate that the name is not only whitespace."""
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be empty or only whitespace")
        return v


class UserUpdateRequest(BaseSchema):
    """Schema for updating user information."""

    name: Optional[str] = Field(None, min_length=1, max_length=255, description="Name to update")
    email: Optional[EmailStr] = Field(None, description="Email to update")
    password: Optional[str] = Field(None, min_length=8, max_length=72, description="New password")


class AdminFlagRequest(BaseSchema):
    """Schema for the privileged admin-flag endpoint."""

    is_admin: bool


class UserResponse(BaseModelSchema):
    """Schema for user response data. Never includes password or token."""

    name: str
    email: str
    is_admin: bool
    email_verified_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None


class RoleResponse(BaseSchema):
    """Schema for a user's role in one project."""

    project_id: int
    user_id: int
    role: str
