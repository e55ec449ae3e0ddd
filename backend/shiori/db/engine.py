"""Database engine and session factory."""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from backend.shiori.config import Settings, get_settings


def normalize_async_url(database_url: str) -> str:
    """Map sync driver URLs onto their asyncio drivers.

    Args:
        database_url: URL as configured (sync or async driver)

    Returns:
        URL usable with create_async_engine
    """
    if database_url.startswith("postgresql://"):
        return database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if database_url.startswith("sqlite://"):
        return database_url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return database_url


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """Turn on FK enforcement for every new SQLite connection.

    SQLite ships with foreign keys disabled; without this pragma the
    ON DELETE CASCADE / SET NULL rules in the schema are ignored.
    """
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection: Any, connection_record: Any) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_async_engine_from_settings(settings: Settings) -> AsyncEngine:
    """Create async SQLAlchemy engine from settings.

    Raises:
        ValueError: If DATABASE_URL is unset or empty.
    """
    if not settings.database_url:
        raise ValueError(
            "DATABASE_URL must be set to a valid connection string. "
            "Please configure the database_url setting."
        )

    engine = create_async_engine(
        normalize_async_url(settings.database_url), pool_pre_ping=True, echo=False
    )
    enable_sqlite_foreign_keys(engine)
    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create sessionmaker for creating database sessions.

    Args:
        engine: Async SQLAlchemy engine

    Returns:
        Sessionmaker bound to the engine
    """
    return async_sessionmaker(bind=engine, expire_on_commit=False)


_async_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def get_async_engine() -> AsyncEngine:
    """Get global async engine instance."""
    global _async_engine
    if _async_engine is None:
        _async_engine = create_async_engine_from_settings(get_settings())
    return _async_engine


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for async database session.

    Yields:
        AsyncSession instance
    """
    global _session_factory
    if _session_factory is None:
        _session_factory = create_session_factory(get_async_engine())
    async with _session_factory() as session:
        yield session
