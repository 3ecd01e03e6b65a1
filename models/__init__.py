"""
Models package initialization.
"""

from .base import Base, BaseModel, SoftDeleteMixin
from .enums import ProjectRole, TaskPriority, TaskStatus
from .project import Project
from .project_user import ProjectUser
from .task import Task
from .user import User

__all__ = [
    "Base",
    "BaseModel",
    "SoftDeleteMixin",
    "User",
    "Project",
    "Task",
    "ProjectUser",
    # Enumerations
    "TaskStatus",
    "TaskPriority",
    "ProjectRole",
]
