"""Membership service: users in projects, with per-project roles."""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import and_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions.project import (
    DuplicateMembershipError,
    MembershipNotFoundError,
    ProjectNotFoundError,
)
from app.exceptions.user import UserNotFoundError
from app.schemas.membership import MembershipCreate, MembershipUpdate
from models import Project, ProjectRole, ProjectUser, User

logger = logging.getLogger(__name__)


class MembershipService:
    """Service class for project membership business logic."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_membership(self, user_id: int, project_id: int) -> Optional[ProjectUser]:
        """Get the membership row for a (user, project) pair, if any."""
        stmt = select(ProjectUser).where(
            and_(ProjectUser.user_id == user_id, ProjectUser.project_id == project_id)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_role_for_project(self, user: User, project_id: int) -> ProjectRole:
        """Return the user's role in the project.

        The role comes from the membership row, not from any attribute of the
        user. Raises MembershipNotFoundError when there is no such row.
        """
        membership = await self.get_membership(user.id, project_id)
        if membership is None:
            raise MembershipNotFoundError()
        return membership.role

    async def is_member(self, user_id: int, project_id: int) -> bool:
        return await self.get_membership(user_id, project_id) is not None

    async def has_role(self, user_id: int, project_id: int, *roles: ProjectRole) -> bool:
        membership = await self.get_membership(user_id, project_id)
        return membership is not None and membership.role in roles

    async def add_member(self, project_id: int, data: MembershipCreate) -> ProjectUser:
        """Add a user to a project with a role."""
        await self._ensure_project(project_id)
        await self._ensure_user(data.user_id)

        if await self.get_membership(data.user_id, project_id):
            raise DuplicateMembershipError()

        membership = ProjectUser(project_id=project_id, user_id=data.user_id)
        membership.fill(data.model_dump(include={"role", "contribution_hours"}))

        self.db.add(membership)
        try:
            await self.db.commit()
        except IntegrityError as e:
            # Lost a race against a concurrent insert of the same pair
            await self.db.rollback()
            raise DuplicateMembershipError() from e
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception("Adding member failed, transaction rolled back")
            raise
        await self.db.refresh(membership)
        logger.info(
            "User %s joined project %s as %s", data.user_id, project_id, membership.role.value
        )
        return membership

    async def update_member(
        self, project_id: int, user_id: int, data: MembershipUpdate
    ) -> ProjectUser:
        """Change a member's role and/or contribution hours."""
        membership = await self.get_membership(user_id, project_id)
        if membership is None:
            raise MembershipNotFoundError()

        membership.fill(data.model_dump(exclude_unset=True, exclude_none=True))
        await self._commit()
        await self.db.refresh(membership)
        return membership

    async def remove_member(self, project_id: int, user_id: int) -> None:
        membership = await self.get_membership(user_id, project_id)
        if membership is None:
            raise MembershipNotFoundError()
        await self.db.delete(membership)
        await self._commit()
        logger.info("User %s removed from project %s", user_id, project_id)

    async def touch_activity(self, user_id: int, project_id: int) -> None:
        """Stamp ``last_activity`` on the membership without committing."""
        membership = await self.get_membership(user_id, project_id)
        if membership is not None:
            membership.last_activity = datetime.utcnow()

    async def get_members(self, project_id: int) -> list[tuple[User, ProjectUser]]:
        """Active users of a project together with their membership rows."""
        stmt = (
            select(User, ProjectUser)
            .join(ProjectUser, ProjectUser.user_id == User.id)
            .where(and_(ProjectUser.project_id == project_id, User.active()))
            .order_by(User.id)
        )
        result = await self.db.execute(stmt)
        return [(user, membership) for user, membership in result.all()]

    async def get_user_projects(self, user_id: int) -> list[tuple[Project, ProjectUser]]:
        """Active projects of a user together with the user's membership rows."""
        stmt = (
            select(Project, ProjectUser)
            .join(ProjectUser, ProjectUser.project_id == Project.id)
            .where(and_(ProjectUser.user_id == user_id, Project.active()))
            .order_by(Project.id)
        )
        result = await self.db.execute(stmt)
        return [(project, membership) for project, membership in result.all()]

    async def _ensure_project(self, project_id: int) -> Project:
        stmt = select(Project).where(and_(Project.id == project_id, Project.active()))
        project = (await self.db.execute(stmt)).scalar_one_or_none()
        if project is None:
            raise ProjectNotFoundError()
        return project

    async def _ensure_user(self, user_id: int) -> User:
        stmt = select(User).where(and_(User.id == user_id, User.active()))
        user = (await self.db.execute(stmt)).scalar_one_or_none()
        if user is None:
            raise UserNotFoundError()
        return user

    async def _commit(self) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception("Membership write failed, transaction rolled back")
            raise
