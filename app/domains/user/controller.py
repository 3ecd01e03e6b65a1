"""User account controller endpoints."""

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.authorization import require_admin
from app.core.dependencies import get_current_user
from app.database import get_db
from app.domains.membership.service import MembershipService
from app.domains.task.service import TaskService
from app.domains.user.service import UserService
from app.schemas.base import ResponseSchema
from app.schemas.membership import UserProjectResponse
from app.schemas.task import TaskResponse
from app.schemas.user import (
    AdminFlagRequest,
    RoleResponse,
    UserCreateRequest,
    UserResponse,
    UserUpdateRequest,
)
from app.shared.pagination import PaginationParams
from models import User

router = APIRouter(prefix="/api/users", tags=["users"])


# ----- Current user -----


@router.get("/me", response_model=ResponseSchema)
async def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Get current authenticated user information."""
    return ResponseSchema(
        status="success",
        message="User retrieved successfully",
        data=UserResponse.model_validate(current_user).model_dump(),
    )


@router.put("/me", response_model=ResponseSchema)
async def update_current_user(
    update_data: UserUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Update name, email or password of the current user.

    Any other keys in the body (``is_admin`` included) are ignored.
    """
    user = await UserService(db).update_user(current_user.id, update_data)
    return ResponseSchema(
        status="success",
        message="User updated successfully",
        data=UserResponse.model_validate(user).model_dump(),
    )


@router.get("/me/projects", response_model=ResponseSchema)
async def get_my_projects(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Projects the current user belongs to, with role and activity."""
    rows = await MembershipService(db).get_user_projects(current_user.id)
    return ResponseSchema(
        status="success",
        message="Projects retrieved successfully",
        data=[
            UserProjectResponse(
                project_id=project.id,
                name=project.name,
                description=project.description,
                role=membership.role,
                contribution_hours=membership.contribution_hours,
                last_activity=membership.last_activity,
            ).model_dump()
            for project, membership in rows
        ],
    )


@router.get("/me/projects/{project_id}/role", response_model=ResponseSchema)
async def get_my_role_for_project(
    project_id: int = Path(..., description="Project ID"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get the current user's role in a project."""
    role = await MembershipService(db).get_role_for_project(current_user, project_id)
    return ResponseSchema(
        status="success",
        message="Role retrieved successfully",
        data=RoleResponse(project_id=project_id, user_id=current_user.id, role=role.value).model_dump(),
    )


@router.get("/me/tasks/created", response_model=ResponseSchema)
async def get_my_created_tasks(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Tasks created by the current user."""
    tasks = await TaskService(db).get_created_tasks(current_user.id)
    return ResponseSchema(
        status="success",
        message="Tasks retrieved successfully",
        data=[TaskResponse.model_validate(task).model_dump() for task in tasks],
    )


@router.get("/me/tasks/projects", response_model=ResponseSchema)
async def get_my_project_tasks(
    assigned_only: bool = Query(False, description="Only tasks assigned to me"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Tasks in every project the current user is a member of."""
    tasks = await TaskService(db).get_member_project_tasks(
        current_user.id, assigned_only=assigned_only
    )
    return ResponseSchema(
        status="success",
        message="Tasks retrieved successfully",
        data=[TaskResponse.model_validate(task).model_dump() for task in tasks],
    )


# ----- Administration -----


@router.post("/", response_model=ResponseSchema, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: UserCreateRequest,
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Create a regular user account."""
    user = await UserService(db).create_user(user_data)
    return ResponseSchema(
        status="success",
        message="User created successfully",
        data=UserResponse.model_validate(user).model_dump(),
    )


@router.get("/", response_model=ResponseSchema)
async def get_users(
    include_deleted: bool = Query(False),
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """List user accounts."""
    result = await UserService(db).get_users_list(
        PaginationParams(page=page, size=size), include_deleted=include_deleted
    )
    return ResponseSchema(
        status="success",
        message="Users retrieved successfully",
        data={
            "users": [UserResponse.model_validate(user).model_dump() for user in result["items"]],
            "total": result["total"],
            "page": result["page"],
            "size": result["size"],
            "has_next": result["has_next"],
            "has_prev": result["has_prev"],
        },
    )


@router.get("/{user_id}", response_model=ResponseSchema)
async def get_user(
    user_id: int = Path(..., description="User ID"),
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    user = await UserService(db).get_user_or_404(user_id, include_deleted=True)
    return ResponseSchema(
        status="success",
        message="User retrieved successfully",
        data=UserResponse.model_validate(user).model_dump(),
    )


@router.get("/{user_id}/projects/{project_id}/role", response_model=ResponseSchema)
async def get_user_role_for_project(
    user_id: int = Path(..., description="User ID"),
    project_id: int = Path(..., description="Project ID"),
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Get any user's role in a project."""
    user = await UserService(db).get_user_or_404(user_id)
    role = await MembershipService(db).get_role_for_project(user, project_id)
    return ResponseSchema(
        status="success",
        message="Role retrieved successfully",
        data=RoleResponse(project_id=project_id, user_id=user.id, role=role.value).model_dump(),
    )


@router.put("/{user_id}/admin", response_model=ResponseSchema)
async def set_admin_flag(
    flag: AdminFlagRequest,
    user_id: int = Path(..., description="User ID"),
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Grant or revoke admin access. The only HTTP route that writes ``is_admin``."""
    user = await UserService(db).set_admin_flag(user_id, flag.is_admin)
    return ResponseSchema(
        status="success",
        message="Admin flag updated successfully",
        data=UserResponse.model_validate(user).model_dump(),
    )


@router.delete("/{user_id}", response_model=ResponseSchema)
async def delete_user(
    user_id: int = Path(..., description="User ID"),
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Soft-delete a user."""
    deleted = await UserService(db).soft_delete_user(user_id)
    return ResponseSchema(
        status="success",
        message="User deleted successfully" if deleted else "User already deleted",
        data=None,
    )


@router.delete("/{user_id}/force", response_model=ResponseSchema)
async def force_delete_user(
    user_id: int = Path(..., description="User ID"),
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Permanently delete a user together with their tasks and memberships."""
    await UserService(db).force_delete_user(user_id)
    return ResponseSchema(status="success", message="User permanently deleted", data=None)


@router.post("/{user_id}/restore", response_model=ResponseSchema)
async def restore_user(
    user_id: int = Path(..., description="User ID"),
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    user = await UserService(db).restore_user(user_id)
    return ResponseSchema(
        status="success",
        message="User restored successfully",
        data=UserResponse.model_validate(user).model_dump(),
    )
