# tests/conftest.py
import os

# Set up test environment variables BEFORE any other imports
os.environ.setdefault("TESTING", "true")
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("TEST_DATABASE_URL", "sqlite+aiosqlite:///./test.db")
os.environ.setdefault("DATABASE_URL", os.environ["TEST_DATABASE_URL"])
os.environ.setdefault("SECRET_KEY", "test-secret-key-with-enough-length-for-hs256")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.database import enable_sqlite_foreign_keys, get_db
from app.main import app
from models import Base, Project, ProjectRole
from tests.helpers import add_membership, add_task, auth_headers, create_user

# Every test gets its own in-memory database; StaticPool keeps a single
# connection so the schema survives across sessions.
TEST_ENGINE_URL = "sqlite+aiosqlite://"


@pytest_asyncio.fixture
async def test_engine():
    engine = create_async_engine(TEST_ENGINE_URL, poolclass=StaticPool, echo=False)
    enable_sqlite_foreign_keys(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def test_db(test_engine):
    """Create a test database session."""
    TestSessionLocal = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    async with TestSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


@pytest_asyncio.fixture
async def client(test_db):
    """Create a test client with database dependency override."""
    app.dependency_overrides[get_db] = lambda: test_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


# User fixtures
@pytest_asyncio.fixture
async def test_user(test_db):
    """Create a regular test user."""
    return await create_user(test_db, "Test User", "test@example.com")


@pytest_asyncio.fixture
async def test_user_2(test_db):
    """Create a second regular test user."""
    return await create_user(test_db, "Second User", "test2@example.com")


@pytest_asyncio.fixture
async def admin_user(test_db):
    """Create an admin user."""
    return await create_user(test_db, "Admin", "admin@admin.com", is_admin=True)


@pytest.fixture
def user_headers(test_user):
    return auth_headers(test_user)


@pytest.fixture
def user_2_headers(test_user_2):
    return auth_headers(test_user_2)


@pytest.fixture
def admin_headers(admin_user):
    return auth_headers(admin_user)


# Project fixtures
@pytest_asyncio.fixture
async def test_project(test_db):
    """Create a test project."""
    project = Project(name="Test Project", description="A test project for testing")
    test_db.add(project)
    await test_db.commit()
    await test_db.refresh(project)
    return project


@pytest_asyncio.fixture
async def manager_membership(test_db, test_user, test_project):
    """Make ``test_user`` a manager of ``test_project``."""
    return await add_membership(test_db, test_user, test_project, ProjectRole.manager, 12)


@pytest_asyncio.fixture
async def developer_membership(test_db, test_user_2, test_project):
    """Make ``test_user_2`` a developer of ``test_project``."""
    return await add_membership(test_db, test_user_2, test_project, ProjectRole.developer)


# Task fixtures
@pytest_asyncio.fixture
async def test_task(
    test_db, test_project, test_user, test_user_2, manager_membership, developer_membership
):
    """A task created by the manager and assigned to the developer."""
    return await add_task(test_db, test_project, test_user, test_user_2)
