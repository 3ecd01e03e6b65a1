"""Task service layer with business logic."""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import and_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from app.domains.membership.service import MembershipService
from app.exceptions.base import AppPermissionError, ValidationError
from app.exceptions.project import ProjectNotFoundError
from app.exceptions.task import InvalidTaskOperationError, TaskNotFoundError
from app.exceptions.user import UserNotFoundError
from app.schemas.task import TaskCreate, TaskFilter, TaskStatusUpdate, TaskUpdate
from app.shared.pagination import PaginationParams, paginate
from models import Project, ProjectRole, ProjectUser, Task, TaskPriority, TaskStatus, User
from models.enums import coerce_enum

logger = logging.getLogger(__name__)


def _enum_filter(enum_cls, value, field: str):
    try:
        return coerce_enum(enum_cls, value, field)
    except ValueError as e:
        raise ValidationError(str(e)) from e


class TaskService:
    """Service class for task business logic."""

    # Fields an update may set back to null
    NULLABLE_FIELDS = frozenset({"notes"})

    def __init__(self, db: AsyncSession):
        self.db = db
        self.memberships = MembershipService(db)

    async def create_task(self, task_data: TaskCreate, creator: User) -> Task:
        """Create a task in a project on behalf of ``creator``.

        The project and the assignee must exist and not be soft-deleted, the
        assignee must be a member of the project, and the creator must be an
        admin or a manager of the project. Everything is written in one commit.
        """
        await self._get_active_project(task_data.project_id)
        await self._ensure_can_manage(creator, task_data.project_id)
        await self._ensure_assignable(task_data.assigned_to, task_data.project_id)

        task = Task().fill(task_data.model_dump())
        task.created_by = creator.id

        self.db.add(task)
        await self.memberships.touch_activity(creator.id, task_data.project_id)
        await self._commit("create")
        await self.db.refresh(task)
        logger.info("User %s created task %s in project %s", creator.id, task.id, task.project_id)
        return task

    async def get_task_by_id(self, task_id: int, include_deleted: bool = False) -> Optional[Task]:
        """Get a task by ID. Soft-deleted tasks are hidden by default."""
        stmt = select(Task).where(Task.id == task_id)
        if not include_deleted:
            stmt = stmt.where(Task.active())
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_task_for_user(self, task_id: int, user: User) -> Task:
        """Get a task the user may see: admins see all, others their projects'."""
        task = await self._get_or_404(task_id)
        if not user.is_admin and not await self.memberships.is_member(user.id, task.project_id):
            raise AppPermissionError("You don't have access to this task")
        return task

    async def update_task(self, task_id: int, task_data: TaskUpdate, user: User) -> Task:
        """Update task fields (admin or project manager)."""
        task = await self._get_or_404(task_id)
        await self._ensure_can_manage(user, task.project_id)

        changes = {
            field: value
            for field, value in task_data.model_dump(exclude_unset=True).items()
            if value is not None or field in self.NULLABLE_FIELDS
        }
        if "assigned_to" in changes and changes["assigned_to"] != task.assigned_to:
            await self._ensure_assignable(changes["assigned_to"], task.project_id)

        task.fill(changes)
        await self.memberships.touch_activity(user.id, task.project_id)
        await self._commit("update")
        await self.db.refresh(task)
        return task

    async def update_task_status(
        self, task_id: int, status_data: TaskStatusUpdate, user: User
    ) -> Task:
        """Change a task's status. Allowed for the assignee, managers and admins."""
        task = await self._get_or_404(task_id)
        if task.assigned_to != user.id:
            await self._ensure_can_manage(user, task.project_id)

        task.status = status_data.status
        if status_data.notes is not None:
            task.notes = status_data.notes

        await self.memberships.touch_activity(user.id, task.project_id)
        await self._commit("update status of")
        await self.db.refresh(task)
        return task

    async def soft_delete_task(self, task_id: int, user: User) -> bool:
        """Soft-delete a task. Returns False if it was already deleted."""
        task = await self._get_or_404(task_id, include_deleted=True)
        await self._ensure_can_manage(user, task.project_id)
        if not task.soft_delete():
            return False
        await self._commit("delete")
        logger.info("Soft-deleted task %s", task_id)
        return True

    async def restore_task(self, task_id: int) -> Task:
        task = await self._get_or_404(task_id, include_deleted=True)
        if task.restore():
            await self._commit("restore")
            await self.db.refresh(task)
        return task

    async def force_delete_task(self, task_id: int) -> None:
        task = await self._get_or_404(task_id, include_deleted=True)
        await self.db.delete(task)
        await self._commit("delete")
        logger.info("Hard-deleted task %s", task_id)

    def assigned_tasks_query(
        self,
        user_id: int,
        status: TaskStatus | str | None = None,
        priority: TaskPriority | str | None = None,
    ) -> Select:
        """Query for active tasks assigned to the user, narrowed by the filters.

        Empty filters are ignored; both filters combine with AND.
        """
        stmt = select(Task).where(and_(Task.assigned_to == user_id, Task.active()))
        if status:
            stmt = stmt.where(Task.status == _enum_filter(TaskStatus, status, "status"))
        if priority:
            stmt = stmt.where(Task.priority == _enum_filter(TaskPriority, priority, "priority"))
        return stmt.order_by(Task.id)

    async def filter_assigned_tasks(
        self,
        user_id: int,
        status: TaskStatus | str | None = None,
        priority: TaskPriority | str | None = None,
    ) -> List[Task]:
        """Tasks assigned to the user, optionally by exact status and priority."""
        result = await self.db.execute(self.assigned_tasks_query(user_id, status, priority))
        return list(result.scalars().all())

    async def get_assigned_tasks_page(
        self, user_id: int, filters: TaskFilter, pagination: PaginationParams
    ) -> Dict[str, Any]:
        stmt = self.assigned_tasks_query(user_id, filters.status, filters.priority)
        return await paginate(self.db, stmt, pagination)

    async def get_created_tasks(self, user_id: int) -> List[Task]:
        stmt = (
            select(Task)
            .where(and_(Task.created_by == user_id, Task.active()))
            .order_by(Task.id)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_member_project_tasks(
        self, user_id: int, assigned_only: bool = False
    ) -> List[Task]:
        """Tasks in the active projects the user is a member of.

        With ``assigned_only`` the result is restricted to tasks assigned to
        the user.
        """
        stmt = (
            select(Task)
            .join(ProjectUser, ProjectUser.project_id == Task.project_id)
            .join(Project, Project.id == Task.project_id)
            .where(and_(ProjectUser.user_id == user_id, Task.active(), Project.active()))
        )
        if assigned_only:
            stmt = stmt.where(Task.assigned_to == user_id)
        result = await self.db.execute(stmt.order_by(Task.id))
        return list(result.scalars().all())

    # Private helper methods
    async def _get_or_404(self, task_id: int, include_deleted: bool = False) -> Task:
        task = await self.get_task_by_id(task_id, include_deleted=include_deleted)
        if not task:
            raise TaskNotFoundError()
        return task

    async def _get_active_project(self, project_id: int) -> Project:
        stmt = select(Project).where(and_(Project.id == project_id, Project.active()))
        project = (await self.db.execute(stmt)).scalar_one_or_none()
        if project is None:
            raise ProjectNotFoundError()
        return project

    async def _ensure_can_manage(self, user: User, project_id: int) -> None:
        if user.is_admin:
            return
        if not await self.memberships.has_role(user.id, project_id, ProjectRole.manager):
            raise AppPermissionError("Only project managers can manage tasks")

    async def _ensure_assignable(self, user_id: int, project_id: int) -> None:
        stmt = select(User).where(and_(User.id == user_id, User.active()))
        if (await self.db.execute(stmt)).scalar_one_or_none() is None:
            raise UserNotFoundError("Assignee not found")
        if not await self.memberships.is_member(user_id, project_id):
            raise InvalidTaskOperationError("Assignee is not a member of this project")

    async def _commit(self, action: str) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception("Failed to %s task, transaction rolled back", action)
            raise
