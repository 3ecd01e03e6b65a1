"""
Project model, the container for tasks and member users.
"""

from sqlalchemy import Column, String, Text
from sqlalchemy.orm import relationship

from .base import BaseModel, SoftDeleteMixin


class Project(SoftDeleteMixin, BaseModel):
    """
    Represents a project entity in the application.

    Soft-deleting a project hides it but leaves its tasks and memberships
    untouched. Only a hard delete removes them, through the foreign key
    cascades on ``tasks`` and ``project_user``.
    """

    __tablename__ = "projects"

    fillable = ("name", "description")

    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")

    tasks = relationship(
        "Task",
        back_populates="project",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    memberships = relationship(
        "ProjectUser",
        back_populates="project",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    users = relationship(
        "User",
        secondary="project_user",
        back_populates="projects",
        viewonly=True,
    )
