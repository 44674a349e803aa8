"""Async engine, session factory and table setup for the task store."""
from typing import Any, Optional

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

from taskmanager.config import settings


def _unicode_lower(value: Any) -> Any:
    if isinstance(value, str):
        return value.lower()
    return value


def register_sqlite_functions(async_engine: AsyncEngine) -> None:
    """Replace SQLite's ASCII-only ``lower()`` with ``str.lower`` on every new connection.

    Keyword search lowercases the needle in Python and the column in SQL;
    both sides have to fold the same way for non-ASCII titles to match.
    """

    @event.listens_for(async_engine.sync_engine, "connect")
    def _on_connect(dbapi_conn, connection_record):
        dbapi_conn.create_function("lower", 1, _unicode_lower)


def build_engine(url: str, *, echo: bool = False) -> AsyncEngine:
    """Create the async engine with pool settings for the target backend."""
    engine_kwargs = {
        "echo": echo,
        "pool_pre_ping": True,
    }

    is_sqlite = make_url(url).get_backend_name() == "sqlite"
    if is_sqlite:
        # One shared connection; aiosqlite runs it off the event loop thread
        engine_kwargs.update(
            {
                "poolclass": StaticPool,
                "connect_args": {"check_same_thread": False},
            }
        )
    else:
        engine_kwargs.update(
            {
                "pool_size": 10,
                "max_overflow": 20,
            }
        )

    async_engine = create_async_engine(url, **engine_kwargs)
    if is_sqlite:
        register_sqlite_functions(async_engine)
    return async_engine


engine = build_engine(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)

Base = declarative_base()


async def get_db() -> AsyncSession:
    """Request-scoped session dependency."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_db(bind: Optional[AsyncEngine] = None) -> None:
    """Create the user and task tables if they are missing."""
    # Register models on the metadata before create_all
    import taskmanager.models  # noqa: F401

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Dispose of pooled connections on shutdown."""
    await engine.dispose()
