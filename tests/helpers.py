"""Builders and auth helpers shared by fixtures and tests."""

from datetime import date, datetime, timedelta

import jwt
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.security import hash_password
from models import Project, ProjectRole, ProjectUser, Task, TaskPriority, TaskStatus, User


def make_token(user: User, **claims) -> str:
    """Mint a bearer token the way the identity provider does."""
    payload = {"sub": str(user.id), "exp": datetime.utcnow() + timedelta(minutes=30)}
    payload.update(claims)
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {make_token(user)}"}


async def create_user(db: AsyncSession, name: str, email: str, is_admin: bool = False) -> User:
    user = User(name=name, email=email, password_hash=hash_password("password123"))
    user.is_admin = is_admin
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def add_membership(
    db: AsyncSession,
    user: User,
    project: Project,
    role: ProjectRole = ProjectRole.developer,
    contribution_hours: int = 0,
) -> ProjectUser:
    membership = ProjectUser(
        project_id=project.id, user_id=user.id, role=role, contribution_hours=contribution_hours
    )
    db.add(membership)
    await db.commit()
    await db.refresh(membership)
    return membership


async def add_task(
    db: AsyncSession,
    project: Project,
    creator: User,
    assignee: User,
    title: str = "Test Task",
    status: TaskStatus = TaskStatus.new,
    priority: TaskPriority = TaskPriority.medium,
    created_at: datetime | None = None,
) -> Task:
    task = Task(
        project_id=project.id,
        created_by=creator.id,
        assigned_to=assignee.id,
        title=title,
        description=f"Description of {title}",
        status=status,
        priority=priority,
        due_date=date.today() + timedelta(days=7),
    )
    if created_at is not None:
        task.created_at = created_at
    db.add(task)
    await db.commit()
    await db.refresh(task)
    return task
