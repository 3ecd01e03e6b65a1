"""Membership (project_user) schemas."""

from datetime import datetime

from pydantic import Field

from models.enums import ProjectRole

from .base import BaseModelSchema, BaseSchema


class MembershipCreate(BaseSchema):
    """Schema for adding a user to a project."""

    user_id: int = Field(..., ge=1)
    role: ProjectRole
    contribution_hours: int = Field(default=0, ge=0)


class MembershipUpdate(BaseSchema):
    """Schema for changing a membership's role or metrics."""

    role: ProjectRole | None = None
    contribution_hours: int | None = Field(None, ge=0)


class MembershipResponse(BaseModelSchema):
    """Schema for a membership row."""

    project_id: int
    user_id: int
    role: ProjectRole
    contribution_hours: int
    last_activity: datetime | None = None


class UserProjectResponse(BaseSchema):
    """A project seen from one member, with that member's pivot data."""

    project_id: int
    name: str
    description: str
    role: ProjectRole
    contribution_hours: int
    last_activity: datetime | None = None


class MemberResponse(BaseSchema):
    """A project member together with the pivot data."""

    user_id: int
    name: str
    email: str
    role: ProjectRole
    contribution_hours: int
    last_activity: datetime | None = None
