"""Project API controller with FastAPI endpoints."""

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.authorization import require_admin
from app.core.dependencies import get_current_user, get_db
from app.domains.membership.service import MembershipService
from app.domains.project.service import ProjectService
from app.exceptions.base import AppPermissionError
from app.exceptions.project import ProjectNotFoundError
from app.schemas.base import ResponseSchema
from app.schemas.membership import (
    MemberResponse,
    MembershipCreate,
    MembershipResponse,
    MembershipUpdate,
)
from app.schemas.project import (
    ProjectCreate,
    ProjectFilter,
    ProjectListResponse,
    ProjectResponse,
    ProjectUpdate,
)
from app.schemas.task import TaskResponse
from app.shared.pagination import PaginationParams
from models import Project, User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/projects", tags=["projects"])


async def _get_visible_project(project_id: int, user: User, db: AsyncSession) -> Project:
    """Load an active project the caller may read (admin or member)."""
    project = await ProjectService(db).get_project_by_id(project_id)
    if not project:
        raise ProjectNotFoundError()
    if not user.is_admin and not await MembershipService(db).is_member(user.id, project_id):
        raise AppPermissionError("You are not a member of this project")
    return project


def _task_payload(task) -> Optional[dict]:
    return TaskResponse.model_validate(task).model_dump() if task else None


@router.post("/", response_model=ResponseSchema, status_code=status.HTTP_201_CREATED)
async def create_project(
    project_data: ProjectCreate,
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Create a new project."""
    project = await ProjectService(db).create_project(project_data)

    return ResponseSchema(
        status="success",
        message="Project created successfully",
        data=ProjectResponse.model_validate(project).model_dump(),
    )


@router.get("/", response_model=ProjectListResponse)
async def get_projects(
    search: Optional[str] = Query(None),
    include_deleted: bool = Query(False, description="Admins only"),
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List projects: every project for admins, member projects for others."""
    filters = ProjectFilter(
        search=search, include_deleted=include_deleted and current_user.is_admin
    )
    pagination = PaginationParams(page=page, size=size)

    result = await ProjectService(db).get_projects_list(
        filters=filters,
        pagination=pagination,
        member_user_id=None if current_user.is_admin else current_user.id,
    )

    return ProjectListResponse(
        projects=[ProjectResponse.model_validate(project) for project in result["items"]],
        total=result["total"],
        page=result["page"],
        size=result["size"],
        has_next=result["has_next"],
        has_prev=result["has_prev"],
    )


@router.get("/{project_id}", response_model=ResponseSchema)
async def get_project(
    project_id: int = Path(..., description="Project ID"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get a specific project by ID."""
    project = await _get_visible_project(project_id, current_user, db)

    return ResponseSchema(
        status="success",
        message="Project retrieved successfully",
        data=ProjectResponse.model_validate(project).model_dump(),
    )


@router.put("/{project_id}", response_model=ResponseSchema)
async def update_project(
    project_id: int = Path(..., description="Project ID"),
    project_data: ProjectUpdate = Body(...),
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Update a specific project."""
    project = await ProjectService(db).update_project(project_id, project_data)

    return ResponseSchema(
        status="success",
        message="Project updated successfully",
        data=ProjectResponse.model_validate(project).model_dump(),
    )


@router.delete("/{project_id}", response_model=ResponseSchema)
async def delete_project(
    project_id: int = Path(..., description="Project ID"),
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Soft-delete a project. Its tasks and members are kept."""
    deleted = await ProjectService(db).soft_delete_project(project_id)

    return ResponseSchema(
        status="success",
        message="Project deleted successfully" if deleted else "Project already deleted",
        data=None,
    )


@router.delete("/{project_id}/force", response_model=ResponseSchema)
async def force_delete_project(
    project_id: int = Path(..., description="Project ID"),
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Permanently delete a project with its tasks and memberships."""
    await ProjectService(db).force_delete_project(project_id)
    return ResponseSchema(status="success", message="Project permanently deleted", data=None)


@router.post("/{project_id}/restore", response_model=ResponseSchema)
async def restore_project(
    project_id: int = Path(..., description="Project ID"),
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    project = await ProjectService(db).restore_project(project_id)
    return ResponseSchema(
        status="success",
        message="Project restored successfully",
        data=ProjectResponse.model_validate(project).model_dump(),
    )


# ----- Derived task views -----


@router.get("/{project_id}/tasks/latest", response_model=ResponseSchema)
async def get_latest_task(
    project_id: int = Path(..., description="Project ID"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Most recently created task of the project."""
    await _get_visible_project(project_id, current_user, db)
    task = await ProjectService(db).latest_task(project_id)
    return ResponseSchema(
        status="success", message="Latest task retrieved", data=_task_payload(task)
    )


@router.get("/{project_id}/tasks/oldest", response_model=ResponseSchema)
async def get_oldest_task(
    project_id: int = Path(..., description="Project ID"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """First created task of the project."""
    await _get_visible_project(project_id, current_user, db)
    task = await ProjectService(db).oldest_task(project_id)
    return ResponseSchema(
        status="success", message="Oldest task retrieved", data=_task_payload(task)
    )


@router.get("/{project_id}/tasks/highest-priority", response_model=ResponseSchema)
async def get_highest_priority_task(
    project_id: int = Path(..., description="Project ID"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Most recently created high-priority task of the project."""
    await _get_visible_project(project_id, current_user, db)
    task = await ProjectService(db).highest_priority_task(project_id)
    return ResponseSchema(
        status="success", message="Highest priority task retrieved", data=_task_payload(task)
    )


# ----- Members -----


@router.get("/{project_id}/members", response_model=ResponseSchema)
async def get_project_members(
    project_id: int = Path(..., description="Project ID"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Members of the project with their role and activity."""
    await _get_visible_project(project_id, current_user, db)
    members = await MembershipService(db).get_members(project_id)

    return ResponseSchema(
        status="success",
        message="Project members retrieved successfully",
        data=[
            MemberResponse(
                user_id=user.id,
                name=user.name,
                email=user.email,
                role=membership.role,
                contribution_hours=membership.contribution_hours,
                last_activity=membership.last_activity,
            ).model_dump()
            for user, membership in members
        ],
    )


@router.post(
    "/{project_id}/members", response_model=ResponseSchema, status_code=status.HTTP_201_CREATED
)
async def add_project_member(
    membership_data: MembershipCreate,
    project_id: int = Path(..., description="Project ID"),
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    membership = await MembershipService(db).add_member(project_id, membership_data)
    return ResponseSchema(
        status="success",
        message="Member added successfully",
        data=MembershipResponse.model_validate(membership).model_dump(),
    )


@router.put("/{project_id}/members/{user_id}", response_model=ResponseSchema)
async def update_project_member(
    membership_data: MembershipUpdate,
    project_id: int = Path(..., description="Project ID"),
    user_id: int = Path(..., description="User ID"),
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    membership = await MembershipService(db).update_member(project_id, user_id, membership_data)
    return ResponseSchema(
        status="success",
        message="Member updated successfully",
        data=MembershipResponse.model_validate(membership).model_dump(),
    )


@router.delete("/{project_id}/members/{user_id}", response_model=ResponseSchema)
async def remove_project_member(
    project_id: int = Path(..., description="Project ID"),
    user_id: int = Path(..., description="User ID"),
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    await MembershipService(db).remove_member(project_id, user_id)
    return ResponseSchema(status="success", message="Member removed successfully", data=None)
