"""SQLAlchemy database session and engine configuration."""

from collections.abc import AsyncGenerator
from pathlib import Path

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from inventory.config import get_settings


def _get_async_url(url: str) -> str:
    """Convert a sync SQLAlchemy URL to an async one."""
    if url.startswith("sqlite:///"):
        return url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


def ensure_sqlite_directory(url: str) -> None:
    """Create the parent directory of a file-backed SQLite database."""
    parsed = make_url(url)
    if not parsed.drivername.startswith("sqlite"):
        return
    if parsed.database and parsed.database != ":memory:":
        Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)


def configure_sqlite_engine(engine: AsyncEngine) -> None:
    """Let SQLAlchemy, not the sqlite3 driver, emit BEGIN.

    The driver's own transaction handling does not cooperate with SAVEPOINT,
    which the per-record transactions rely on.
    """
    if not engine.dialect.name == "sqlite":
        return

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


def build_engine(url: str, *, echo: bool = False, **kwargs) -> AsyncEngine:
    """Create an async engine for ``url`` with SQLite savepoint support."""
    engine = create_async_engine(_get_async_url(url), echo=echo, future=True, **kwargs)
    configure_sqlite_engine(engine)
    return engine


settings = get_settings()

engine = build_engine(
    settings.database_url,
    echo=(settings.app_env == "development" and settings.log_level_sql == "DEBUG"),
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency — yields an async DB session per request."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
