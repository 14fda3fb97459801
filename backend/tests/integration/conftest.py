"""Shared fixtures for the integration tests — in-memory SQLite on both sides."""

from collections.abc import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from inventory.infrastructure.database import Base
from inventory.infrastructure.database.repositories import SQLAlchemyLocalAssetStore
from inventory.infrastructure.database.session import build_engine, get_db_session
from inventory.main import create_app

MEMORY_URL = "sqlite:///:memory:"


@pytest_asyncio.fixture
async def server_engine() -> AsyncGenerator[AsyncEngine, None]:
    engine = build_engine(MEMORY_URL, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def server_sessions(server_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(server_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def api_client(server_sessions) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the app, with the database swapped for the test engine."""
    app = create_app()

    async def _override_session() -> AsyncGenerator[AsyncSession, None]:
        async with server_sessions() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = _override_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def device_store() -> AsyncGenerator[SQLAlchemyLocalAssetStore, None]:
    store = SQLAlchemyLocalAssetStore(build_engine(MEMORY_URL, poolclass=StaticPool))
    await store.initialize()
    yield store
    await store.dispose()
