"""
Provides the User model for the application's database schema.

Attributes
----------
name : sqlalchemy.Column
    Display name of the user.
email : sqlalchemy.Column
    The email address of the user, which must be unique.
password_hash : sqlalchemy.Column
    One-way hash of the user's password. Never serialised.
is_admin : sqlalchemy.Column
    Grants access to admin-only routes. Not part of ``fillable``.

Relationships
-------------
created_tasks / assigned_tasks : sqlalchemy.orm.relationship
    Tasks referencing the user as creator or assignee. Rows are removed by
    the database (``ON DELETE CASCADE``) when the user is hard-deleted.
memberships : sqlalchemy.orm.relationship
    ``project_user`` rows for the user, also removed by cascade.
"""

from sqlalchemy import Boolean, Column, DateTime, String, false
from sqlalchemy.orm import relationship

from .base import BaseModel, SoftDeleteMixin


class User(SoftDeleteMixin, BaseModel):
    """
    Represents a user account.

    ``is_admin`` is guarded: it is absent from ``fillable`` so bulk input can
    never set it.
    """

    __tablename__ = "users"

    fillable = ("name", "email")

    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    password_hash = Column(String(255), nullable=False)
    is_admin = Column(Boolean, nullable=False, default=False, server_default=false())
    email_verified_at = Column(DateTime, nullable=True)
    remember_token = Column(String(100), nullable=True)

    created_tasks = relationship(
        "Task",
        foreign_keys="Task.created_by",
        back_populates="creator",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    assigned_tasks = relationship(
        "Task",
        foreign_keys="Task.assigned_to",
        back_populates="assignee",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    memberships = relationship(
        "ProjectUser",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    projects = relationship(
        "Project",
        secondary="project_user",
        back_populates="users",
        viewonly=True,
    )
