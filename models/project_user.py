"""
Membership association between users and projects (the ``project_user`` table).
"""

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship, validates

from .base import BaseModel
from .enums import ProjectRole, coerce_enum, enum_values


class ProjectUser(BaseModel):
    """
    One user's membership in one project, carrying the per-project role and
    activity metrics. At most one row exists per (project, user) pair.
    """

    __tablename__ = "project_user"
    __table_args__ = (
        UniqueConstraint("project_id", "user_id", name="uq_project_user_project_id_user_id"),
    )

    fillable = ("role", "contribution_hours")

    project_id = Column(
        Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    role = Column(
        Enum(ProjectRole, name="project_role", values_callable=enum_values),
        nullable=False,
    )
    contribution_hours = Column(Integer, nullable=False, default=0, server_default="0")
    last_activity = Column(DateTime, nullable=True)

    project = relationship("Project", back_populates="memberships")
    user = relationship("User", back_populates="memberships")

    @validates("role")
    def _validate_role(self, _key, value):
        return coerce_enum(ProjectRole, value, "role")

    @validates("contribution_hours")
    def _validate_contribution_hours(self, _key, value):
        if value is not None and value < 0:
            raise ValueError("contribution_hours cannot be negative")
        return value
