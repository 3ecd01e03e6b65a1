"""
A module defining the ``Task`` ORM model.

A task belongs to a project, is created by one user and assigned to another
(possibly the same) user. ``status`` and ``priority`` are closed enumerations;
values outside them are rejected when the attribute is set, before anything
reaches the database.
"""

from sqlalchemy import Column, Date, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship, validates

from .base import BaseModel, SoftDeleteMixin
from .enums import TaskPriority, TaskStatus, coerce_enum, enum_values


class Task(SoftDeleteMixin, BaseModel):
    __tablename__ = "tasks"

    fillable = (
        "project_id",
        "created_by",
        "assigned_to",
        "title",
        "description",
        "status",
        "priority",
        "due_date",
        "notes",
    )

    project_id = Column(
        Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_by = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    assigned_to = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    status = Column(
        Enum(TaskStatus, name="task_status", values_callable=enum_values),
        nullable=False,
        default=TaskStatus.new,
        server_default=TaskStatus.new.value,
    )
    priority = Column(
        Enum(TaskPriority, name="task_priority", values_callable=enum_values),
        nullable=False,
    )
    due_date = Column(Date, nullable=False)
    notes = Column(Text, nullable=True)

    project = relationship("Project", back_populates="tasks")
    creator = relationship("User", foreign_keys=[created_by], back_populates="created_tasks")
    assignee = relationship("User", foreign_keys=[assigned_to], back_populates="assigned_tasks")

    @validates("status")
    def _validate_status(self, _key, value):
        return coerce_enum(TaskStatus, value, "status")

    @validates("priority")
    def _validate_priority(self, _key, value):
        return coerce_enum(TaskPriority, value, "priority")

    def __repr__(self) -> str:
        return f"<Task(id={self.id}, title='{(self.title or '')[:30]}', status='{self.status}')>"
