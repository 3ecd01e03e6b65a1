"""Task API controller with FastAPI endpoints."""

import logging

from fastapi import APIRouter, Body, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.authorization import require_admin
from app.core.dependencies import get_current_user, get_db
from app.domains.task.service import TaskService
from app.schemas.base import ResponseSchema
from app.schemas.task import (
    TaskCreate,
    TaskFilter,
    TaskListResponse,
    TaskResponse,
    TaskStatusUpdate,
    TaskUpdate,
)
from app.shared.pagination import PaginationParams
from models import User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


@router.post("/", response_model=ResponseSchema, status_code=status.HTTP_201_CREATED)
async def create_task(
    task_data: TaskCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Create a new task. The caller becomes its creator."""
    task = await TaskService(db).create_task(task_data, creator=current_user)

    return ResponseSchema(
        status="success",
        message="Task created successfully",
        data=TaskResponse.model_validate(task).model_dump(),
    )


@router.get("/assigned", response_model=TaskListResponse)
async def get_assigned_tasks(
    task_status: str | None = Query(None, alias="status", description="new, in_progress or completed"),
    priority: str | None = Query(None, description="low, medium or high"),
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Tasks assigned to the caller, optionally filtered by status and priority."""
    filters = TaskFilter(status=task_status, priority=priority)
    pagination = PaginationParams(page=page, size=size)

    result = await TaskService(db).get_assigned_tasks_page(current_user.id, filters, pagination)

    return TaskListResponse(
        tasks=[TaskResponse.model_validate(task) for task in result["items"]],
        total=result["total"],
        page=result["page"],
        size=result["size"],
        has_next=result["has_next"],
        has_prev=result["has_prev"],
    )


@router.get("/{task_id}", response_model=ResponseSchema)
async def get_task(
    task_id: int = Path(..., description="Task ID"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get a specific task by ID."""
    task = await TaskService(db).get_task_for_user(task_id, current_user)

    return ResponseSchema(
        status="success",
        message="Task retrieved successfully",
        data=TaskResponse.model_validate(task).model_dump(),
    )


@router.put("/{task_id}", response_model=ResponseSchema)
async def update_task(
    task_id: int = Path(..., description="Task ID"),
    task_data: TaskUpdate = Body(...),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Update a task (admins and project managers)."""
    task = await TaskService(db).update_task(task_id, task_data, current_user)

    return ResponseSchema(
        status="success",
        message="Task updated successfully",
        data=TaskResponse.model_validate(task).model_dump(),
    )


@router.patch("/{task_id}/status", response_model=ResponseSchema)
async def update_task_status(
    task_id: int = Path(..., description="Task ID"),
    status_data: TaskStatusUpdate = Body(...),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Move a task through its workflow (assignee, managers, admins)."""
    task = await TaskService(db).update_task_status(task_id, status_data, current_user)

    return ResponseSchema(
        status="success",
        message="Task status updated successfully",
        data=TaskResponse.model_validate(task).model_dump(),
    )


@router.delete("/{task_id}", response_model=ResponseSchema)
async def delete_task(
    task_id: int = Path(..., description="Task ID"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Soft-delete a task. Deleting it again reports that it is already gone."""
    deleted = await TaskService(db).soft_delete_task(task_id, current_user)

    return ResponseSchema(
        status="success",
        message="Task deleted successfully" if deleted else "Task already deleted",
        data=None,
    )


@router.delete("/{task_id}/force", response_model=ResponseSchema)
async def force_delete_task(
    task_id: int = Path(..., description="Task ID"),
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    await TaskService(db).force_delete_task(task_id)
    return ResponseSchema(status="success", message="Task permanently deleted", data=None)


@router.post("/{task_id}/restore", response_model=ResponseSchema)
async def restore_task(
    task_id: int = Path(..., description="Task ID"),
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    task = await TaskService(db).restore_task(task_id)
    return ResponseSchema(
        status="success",
        message="Task restored successfully",
        data=TaskResponse.model_validate(task).model_dump(),
    )
