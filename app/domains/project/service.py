"""Project service layer with business logic."""

import logging
from typing import Any, Dict, Optional

from sqlalchemy import and_, asc, desc, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions.project import ProjectNotFoundError
from app.schemas.project import ProjectCreate, ProjectFilter, ProjectUpdate
from app.shared.pagination import PaginationParams, paginate
from models import Project, ProjectUser, Task, TaskPriority

logger = logging.getLogger(__name__)


class ProjectService:
    """Service class for project business logic."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_project(self, project_data: ProjectCreate) -> Project:
        """Create a new project."""
        project = Project().fill(project_data.model_dump())

        self.db.add(project)
        await self._commit()
        await self.db.refresh(project)
        logger.info("Created project %s", project.id)
        return project

    async def get_project_by_id(
        self, project_id: int, include_deleted: bool = False
    ) -> Optional[Project]:
        """Get a project by ID. Soft-deleted projects are hidden by default."""
        stmt = select(Project).where(Project.id == project_id)
        if not include_deleted:
            stmt = stmt.where(Project.active())
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_projects_list(
        self,
        filters: Optional[ProjectFilter] = None,
        pagination: Optional[PaginationParams] = None,
        member_user_id: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Get paginated list of projects with optional filters.

        When ``member_user_id`` is given only projects the user belongs to
        are returned.
        """
        filters = filters or ProjectFilter()
        stmt = select(Project)

        if not filters.include_deleted:
            stmt = stmt.where(Project.active())

        if member_user_id is not None:
            stmt = stmt.join(ProjectUser, ProjectUser.project_id == Project.id).where(
                ProjectUser.user_id == member_user_id
            )

        if filters.search:
            search_term = f"%{filters.search}%"
            stmt = stmt.where(
                or_(
                    Project.name.ilike(search_term),
                    Project.description.ilike(search_term),
                )
            )

        stmt = stmt.order_by(Project.id)

        return await paginate(self.db, stmt, pagination or PaginationParams())

    async def update_project(self, project_id: int, project_data: ProjectUpdate) -> Project:
        """Update a project."""
        project = await self._get_or_404(project_id)

        project.fill(project_data.model_dump(exclude_unset=True, exclude_none=True))

        await self._commit()
        await self.db.refresh(project)
        return project

    async def soft_delete_project(self, project_id: int) -> bool:
        """Soft-delete a project. Returns False if it was already deleted.

        Tasks and memberships are not touched: only a hard delete cascades.
        """
        project = await self._get_or_404(project_id, include_deleted=True)
        if not project.soft_delete():
            return False
        await self._commit()
        logger.info("Soft-deleted project %s", project_id)
        return True

    async def restore_project(self, project_id: int) -> Project:
        project = await self._get_or_404(project_id, include_deleted=True)
        if project.restore():
            await self._commit()
            await self.db.refresh(project)
        return project

    async def force_delete_project(self, project_id: int) -> None:
        """Remove a project row; its tasks and memberships go by cascade."""
        project = await self._get_or_404(project_id, include_deleted=True)
        await self.db.delete(project)
        await self._commit()
        logger.info("Hard-deleted project %s", project_id)

    # Derived task views, computed on every call
    async def latest_task(self, project_id: int) -> Optional[Task]:
        """Task with the greatest ``created_at`` in the project."""
        return await self._first_task(
            project_id, desc(Task.created_at), desc(Task.id)
        )

    async def oldest_task(self, project_id: int) -> Optional[Task]:
        """Task with the smallest ``created_at`` in the project."""
        return await self._first_task(
            project_id, asc(Task.created_at), asc(Task.id)
        )

    async def highest_priority_task(self, project_id: int) -> Optional[Task]:
        """Most recently created high-priority task in the project."""
        return await self._first_task(
            project_id,
            desc(Task.created_at),
            desc(Task.id),
            condition=Task.priority == TaskPriority.high,
        )

    # Private helper methods
    async def _first_task(self, project_id: int, *ordering, condition=None) -> Optional[Task]:
        stmt = select(Task).where(and_(Task.project_id == project_id, Task.active()))
        if condition is not None:
            stmt = stmt.where(condition)
        stmt = stmt.order_by(*ordering).limit(1)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def _get_or_404(self, project_id: int, include_deleted: bool = False) -> Project:
        project = await self.get_project_by_id(project_id, include_deleted=include_deleted)
        if not project:
            raise ProjectNotFoundError()
        return project

    async def _commit(self) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception("Project write failed, transaction rolled back")
            raise
