"""Pytest configuration and fixtures."""
import os
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

TEST_DB_PATH = Path("test_taskmanager.db")
if TEST_DB_PATH.exists():
    TEST_DB_PATH.unlink()

TEST_DATABASE_URL = f"sqlite+aiosqlite:///{TEST_DB_PATH}"
os.environ.setdefault("DATABASE_URL", TEST_DATABASE_URL)
os.environ.setdefault("TENANCY_MODE", "multi")
os.environ.setdefault("LOG_FORMAT", "text")

from taskmanager.main import app  # noqa: E402
from taskmanager.database import Base, build_engine, get_db, init_db  # noqa: E402
from taskmanager.models.user import User  # noqa: E402
from taskmanager.services.scoping import OwnerScope, SharedScope  # noqa: E402
from taskmanager.services.task_service import TaskService  # noqa: E402
from taskmanager.utils.security import create_access_token, get_password_hash  # noqa: E402


# Same engine setup as the application, SQLite functions included
test_engine = build_engine(TEST_DATABASE_URL)

TestSessionLocal = async_sessionmaker(
    test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


@pytest_asyncio.fixture(scope="function")
async def db_session():
    """Create a test database session."""
    await init_db(test_engine)

    async with TestSessionLocal() as session:
        yield session

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession):
    """Async HTTP client bound to the app with the database dependency overridden."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as test_client:
        yield test_client
    app.dependency_overrides.clear()


async def _make_user(db_session: AsyncSession, username: str) -> User:
    user = User(
        username=username,
        email=f"{username}@example.com",
        password_hash=get_password_hash("testpassword"),
        full_name=username.title(),
        is_active=True,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession):
    """Create a test user."""
    return await _make_user(db_session, "alice")


@pytest_asyncio.fixture
async def other_user(db_session: AsyncSession):
    """Create a second user owning separate tasks."""
    return await _make_user(db_session, "bob")


@pytest.fixture
def auth_headers(test_user):
    """Get authentication headers."""
    token = create_access_token({"sub": str(test_user.id), "username": test_user.username})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def other_auth_headers(other_user):
    token = create_access_token({"sub": str(other_user.id), "username": other_user.username})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def task_service():
    """Owner-scoped (multi-tenant) task service."""
    return TaskService(OwnerScope())


@pytest.fixture
def shared_task_service():
    """Unscoped (single-tenant) task service."""
    return TaskService(SharedScope())
