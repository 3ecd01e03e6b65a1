"""
Unit tests for TaskService.
"""

import pytest
import pytest_asyncio
from sqlalchemy import func, select

from app.domains.task.service import TaskService
from app.exceptions.base import AppPermissionError, ValidationError
from app.exceptions.project import ProjectNotFoundError
from app.exceptions.task import InvalidTaskOperationError, TaskNotFoundError
from app.exceptions.user import UserNotFoundError
from app.schemas.task import TaskCreate, TaskStatusUpdate, TaskUpdate
from models import ProjectRole, Task, TaskPriority, TaskStatus
from tests.factories import ProjectFactory, persist
from tests.helpers import add_membership, add_task, create_user


def task_payload(project_id: int, assigned_to: int, **overrides) -> TaskCreate:
    data = {
        "project_id": project_id,
        "assigned_to": assigned_to,
        "title": "Write docs",
        "description": "Document the API",
        "priority": "high",
        "due_date": "2030-01-01",
    }
    data.update(overrides)
    return TaskCreate(**data)


@pytest_asyncio.fixture
async def assigned_tasks(test_db, test_project, test_user, test_user_2, manager_membership, developer_membership):
    """Tasks assigned to ``test_user_2`` covering every status and priority."""
    combos = [
        (TaskStatus.new, TaskPriority.low),
        (TaskStatus.in_progress, TaskPriority.medium),
        (TaskStatus.completed, TaskPriority.high),
        (TaskStatus.completed, TaskPriority.low),
    ]
    tasks = [
        await add_task(test_db, test_project, test_user, test_user_2, f"task {i}", status=s, priority=p)
        for i, (s, p) in enumerate(combos)
    ]
    # Noise: someone else's task and a soft-deleted one
    await add_task(test_db, test_project, test_user, test_user, "manager's", status=TaskStatus.completed)
    gone = await add_task(
        test_db, test_project, test_user, test_user_2, "gone", status=TaskStatus.completed, priority=TaskPriority.low
    )
    gone.soft_delete()
    await test_db.commit()
    return tasks


class TestCreateTask:
    @pytest.mark.asyncio
    async def test_manager_creates_task(
        self, test_db, test_project, test_user, test_user_2, manager_membership, developer_membership
    ):
        task = await TaskService(test_db).create_task(
            task_payload(test_project.id, test_user_2.id), creator=test_user
        )

        assert task.created_by == test_user.id
        assert task.assigned_to == test_user_2.id
        assert task.status == TaskStatus.new
        assert manager_membership.last_activity is not None

    @pytest.mark.asyncio
    async def test_admin_creates_task_without_membership(
        self, test_db, admin_user, test_project, test_user_2, developer_membership
    ):
        task = await TaskService(test_db).create_task(
            task_payload(test_project.id, test_user_2.id), creator=admin_user
        )
        assert task.created_by == admin_user.id

    @pytest.mark.asyncio
    async def test_developer_cannot_create(
        self, test_db, test_project, test_user_2, developer_membership
    ):
        with pytest.raises(AppPermissionError):
            await TaskService(test_db).create_task(
                task_payload(test_project.id, test_user_2.id), creator=test_user_2
            )

    @pytest.mark.asyncio
    async def test_assignee_must_be_member(self, test_db, test_project, test_user, manager_membership):
        outsider = await create_user(test_db, "Outsider", "outsider@example.com")

        with pytest.raises(InvalidTaskOperationError):
            await TaskService(test_db).create_task(
                task_payload(test_project.id, outsider.id), creator=test_user
            )
        count = await test_db.execute(select(func.count()).select_from(Task))
        assert count.scalar() == 0

    @pytest.mark.asyncio
    async def test_unknown_assignee_or_project(self, test_db, test_project, admin_user):
        service = TaskService(test_db)
        with pytest.raises(UserNotFoundError):
            await service.create_task(task_payload(test_project.id, 999), creator=admin_user)
        with pytest.raises(ProjectNotFoundError):
            await service.create_task(task_payload(999, admin_user.id), creator=admin_user)


class TestTaskAccess:
    @pytest.mark.asyncio
    async def test_member_and_admin_can_read(self, test_db, test_task, test_user_2, admin_user):
        service = TaskService(test_db)
        assert (await service.get_task_for_user(test_task.id, test_user_2)).id == test_task.id
        assert (await service.get_task_for_user(test_task.id, admin_user)).id == test_task.id

    @pytest.mark.asyncio
    async def test_outsider_cannot_read(self, test_db, test_task):
        outsider = await create_user(test_db, "Outsider", "outsider@example.com")
        with pytest.raises(AppPermissionError):
            await TaskService(test_db).get_task_for_user(test_task.id, outsider)

    @pytest.mark.asyncio
    async def test_missing_task(self, test_db, admin_user):
        with pytest.raises(TaskNotFoundError):
            await TaskService(test_db).get_task_for_user(999, admin_user)


class TestTaskWrites:
    @pytest.mark.asyncio
    async def test_manager_updates_task(self, test_db, test_task, test_user):
        task = await TaskService(test_db).update_task(
            test_task.id, TaskUpdate(title="Renamed", priority="low"), test_user
        )
        assert task.title == "Renamed"
        assert task.priority == TaskPriority.low

    @pytest.mark.asyncio
    async def test_update_clears_notes_but_keeps_required_fields(self, test_db, test_task, test_user):
        service = TaskService(test_db)
        await service.update_task(test_task.id, TaskUpdate(notes="Check the logs"), test_user)

        task = await service.update_task(
            test_task.id, TaskUpdate(notes=None, title=None), test_user
        )

        assert task.notes is None
        assert task.title == "Test Task"

    @pytest.mark.asyncio
    async def test_reassign_requires_membership(self, test_db, test_task, test_user):
        outsider = await create_user(test_db, "Outsider", "outsider@example.com")
        with pytest.raises(InvalidTaskOperationError):
            await TaskService(test_db).update_task(
                test_task.id, TaskUpdate(assigned_to=outsider.id), test_user
            )

    @pytest.mark.asyncio
    async def test_developer_cannot_update_fields(self, test_db, test_task, test_user_2):
        with pytest.raises(AppPermissionError):
            await TaskService(test_db).update_task(test_task.id, TaskUpdate(title="x"), test_user_2)

    @pytest.mark.asyncio
    async def test_assignee_updates_status(self, test_db, test_task, test_user_2, developer_membership):
        task = await TaskService(test_db).update_task_status(
            test_task.id, TaskStatusUpdate(status="in_progress", notes="started"), test_user_2
        )

        assert task.status == TaskStatus.in_progress
        assert task.notes == "started"
        assert developer_membership.last_activity is not None

    @pytest.mark.asyncio
    async def test_tester_not_assigned_cannot_update_status(self, test_db, test_task, test_project):
        tester = await create_user(test_db, "Tester", "tester@example.com")
        await add_membership(test_db, tester, test_project, ProjectRole.tester)

        with pytest.raises(AppPermissionError):
            await TaskService(test_db).update_task_status(
                test_task.id, TaskStatusUpdate(status="completed"), tester
            )

    @pytest.mark.asyncio
    async def test_soft_delete_twice(self, test_db, test_task, test_user):
        service = TaskService(test_db)

        assert await service.soft_delete_task(test_task.id, test_user) is True
        marker = test_task.deleted_at
        assert await service.soft_delete_task(test_task.id, test_user) is False
        assert test_task.deleted_at == marker
        assert await service.get_task_by_id(test_task.id) is None

    @pytest.mark.asyncio
    async def test_restore_and_force_delete(self, test_db, test_task, test_user):
        service = TaskService(test_db)
        await service.soft_delete_task(test_task.id, test_user)

        assert (await service.restore_task(test_task.id)).deleted_at is None
        await service.force_delete_task(test_task.id)
        assert await service.get_task_by_id(test_task.id, include_deleted=True) is None


class TestAssignedTaskFilter:
    @pytest.mark.asyncio
    async def test_no_filters_returns_all_assigned(self, test_db, test_user_2, assigned_tasks):
        tasks = await TaskService(test_db).filter_assigned_tasks(test_user_2.id)
        assert [t.id for t in tasks] == [t.id for t in assigned_tasks]

    @pytest.mark.asyncio
    async def test_status_filter_returns_exact_subset(self, test_db, test_user_2, assigned_tasks):
        tasks = await TaskService(test_db).filter_assigned_tasks(test_user_2.id, status="completed")

        expected = [t.id for t in assigned_tasks if t.status == TaskStatus.completed]
        assert [t.id for t in tasks] == expected
        assert len(expected) == 2

    @pytest.mark.asyncio
    async def test_status_and_priority_intersect(self, test_db, test_user_2, assigned_tasks):
        tasks = await TaskService(test_db).filter_assigned_tasks(
            test_user_2.id, status=TaskStatus.completed, priority=TaskPriority.low
        )
        assert [t.id for t in tasks] == [assigned_tasks[3].id]

    @pytest.mark.asyncio
    async def test_priority_only(self, test_db, test_user_2, assigned_tasks):
        tasks = await TaskService(test_db).filter_assigned_tasks(test_user_2.id, priority="medium")
        assert [t.id for t in tasks] == [assigned_tasks[1].id]

    @pytest.mark.asyncio
    async def test_empty_strings_mean_no_filter(self, test_db, test_user_2, assigned_tasks):
        tasks = await TaskService(test_db).filter_assigned_tasks(test_user_2.id, status="", priority="")
        assert len(tasks) == len(assigned_tasks)

    @pytest.mark.asyncio
    async def test_invalid_filter_value(self, test_db, test_user_2):
        with pytest.raises(ValidationError, match="Invalid status"):
            await TaskService(test_db).filter_assigned_tasks(test_user_2.id, status="done")


class TestTaskListings:
    @pytest.mark.asyncio
    async def test_created_tasks(self, test_db, test_user, test_user_2, assigned_tasks):
        created = await TaskService(test_db).get_created_tasks(test_user.id)
        assert len(created) == len(assigned_tasks) + 1
        assert await TaskService(test_db).get_created_tasks(test_user_2.id) == []

    @pytest.mark.asyncio
    async def test_member_project_tasks(self, test_db, test_user, test_user_2, assigned_tasks):
        other = await persist(test_db, ProjectFactory.build())
        await add_membership(test_db, test_user, other, ProjectRole.manager)
        await add_task(test_db, other, test_user, test_user, "elsewhere")
        service = TaskService(test_db)

        everything = await service.get_member_project_tasks(test_user_2.id)
        mine_only = await service.get_member_project_tasks(test_user.id, assigned_only=True)

        assert len(everything) == len(assigned_tasks) + 1
        assert {t.title for t in mine_only} == {"manager's", "elsewhere"}
