"""SQLAlchemy async session management."""

from collections.abc import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from vidtube.config import get_settings
from vidtube.db.models import Base

_engine = None
_sessionmaker = None


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """Turn on FK enforcement (and with it ON DELETE CASCADE) for SQLite."""
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine.sync_engine, "connect")
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def get_engine() -> AsyncEngine:
    """Get or create the async database engine."""
    global _engine
    if _engine:
        return _engine
    url = get_settings().database_url
    # Ensure SQLite URLs use async driver
    if url.startswith("sqlite:///"):
        url = url.replace("sqlite:///", "sqlite+aiosqlite:///")
    _engine = create_async_engine(url, future=True)
    enable_sqlite_foreign_keys(_engine)
    return _engine


def get_sessionmaker():
    """Get or create the async session maker."""
    global _sessionmaker
    if _sessionmaker:
        return _sessionmaker
    _sessionmaker = async_sessionmaker(get_engine(), expire_on_commit=False)
    return _sessionmaker


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for FastAPI routes to get an async database session."""
    async with get_sessionmaker()() as session:
        yield session


async def init_db() -> None:
    """Create any missing tables."""
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
