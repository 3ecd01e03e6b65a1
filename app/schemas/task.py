"""Task schemas for request/response serialization."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import Field, field_validator

from models.enums import TaskPriority, TaskStatus

from .base import BaseModelSchema, BaseSchema


class TaskBase(BaseSchema):
    """Base task schema with common fields."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    status: TaskStatus = TaskStatus.new
    priority: TaskPriority
    due_date: date
    notes: str | None = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Task title cannot be empty or only whitespace")
        return v


class TaskCreate(TaskBase):
    """Schema for creating a new task. The creator comes from the caller."""

    project_id: int = Field(..., ge=1)
    assigned_to: int = Field(..., ge=1)


class TaskUpdate(BaseSchema):
    """Schema for updating a task."""

    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, min_length=1)
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    due_date: date | None = None
    notes: str | None = None
    assigned_to: int | None = Field(None, ge=1)


class TaskStatusUpdate(BaseSchema):
    """Schema for the status-only update available to the assignee."""

    status: TaskStatus
    notes: str | None = None


class TaskResponse(BaseModelSchema):
    """Schema for task response."""

    project_id: int
    created_by: int
    assigned_to: int
    title: str
    description: str
    status: TaskStatus
    priority: TaskPriority
    due_date: date
    notes: str | None = None
    deleted_at: datetime | None = None


class TaskFilter(BaseSchema):
    """Optional filters for assigned tasks. Empty values mean no filter.

    Values stay raw strings here; the task service checks them against the
    enumerations so an unknown value is reported as a validation error.
    """

    status: str | None = None
    priority: str | None = None

    @field_validator("status", "priority", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class TaskListResponse(BaseSchema):
    """Schema for task list response."""

    tasks: list[TaskResponse]
    total: int
    page: int
    size: int
    has_next: bool
    has_prev: bool
