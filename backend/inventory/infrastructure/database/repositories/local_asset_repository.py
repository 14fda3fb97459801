"""Device-local record store backed by SQLAlchemy (SQLite on the device)."""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from inventory.application.interfaces import LocalAssetStore
from inventory.domain.entities import AssetRecord, as_utc
from inventory.domain.exceptions import PersistenceError
from inventory.infrastructure.database.base import LocalBase
from inventory.infrastructure.database.models import LocalAssetModel
from inventory.infrastructure.database.repositories.asset_mapping import (
    copy_state,
    to_entity,
    to_model,
)
from inventory.infrastructure.database.session import build_engine, ensure_sqlite_directory

logger = logging.getLogger(__name__)


class SQLAlchemyLocalAssetStore(LocalAssetStore):
    """Implements the LocalAssetStore port with its own engine.

    Every write runs in its own short transaction under a single asyncio
    lock, so writes from the capture UI and from the sync client never
    interleave.
    """

    def __init__(self, engine: AsyncEngine):
        self._engine = engine
        self._session_factory = async_sessionmaker(
            engine, class_=AsyncSession, expire_on_commit=False
        )
        self._write_lock = asyncio.Lock()

    @classmethod
    def from_url(cls, url: str) -> "SQLAlchemyLocalAssetStore":
        ensure_sqlite_directory(url)
        return cls(build_engine(url))

    async def initialize(self) -> None:
        """Create the local table if it does not exist yet."""
        async with self._engine.begin() as conn:
            await conn.run_sync(LocalBase.metadata.create_all)

    async def dispose(self) -> None:
        await self._engine.dispose()

    @asynccontextmanager
    async def _session(self, *, write: bool = False) -> AsyncIterator[AsyncSession]:
        """Yield a session; writes are serialized and committed on exit."""
        if write:
            await self._write_lock.acquire()
        try:
            async with self._session_factory() as session:
                try:
                    yield session
                    if write:
                        await session.commit()
                except SQLAlchemyError as exc:
                    await session.rollback()
                    raise PersistenceError(f"Local store error: {exc}") from exc
        finally:
            if write:
                self._write_lock.release()

    @staticmethod
    async def _get_model(session: AsyncSession, guid: str) -> LocalAssetModel | None:
        result = await session.execute(
            select(LocalAssetModel).where(LocalAssetModel.guid == guid)
        )
        return result.scalar_one_or_none()

    async def get_by_guid(self, guid: str) -> AssetRecord | None:
        async with self._session() as session:
            model = await self._get_model(session, guid)
            return to_entity(model) if model else None

    async def get_all(self, *, include_deleted: bool = False) -> list[AssetRecord]:
        stmt = select(LocalAssetModel)
        if not include_deleted:
            stmt = stmt.where(LocalAssetModel.is_deleted.is_(False))
        stmt = stmt.order_by(LocalAssetModel.created_at.desc(), LocalAssetModel.id.desc())
        async with self._session() as session:
            result = await session.execute(stmt)
            return [to_entity(row) for row in result.scalars().all()]

    async def get_dirty(self) -> list[AssetRecord]:
        stmt = (
            select(LocalAssetModel)
            .where(LocalAssetModel.is_dirty.is_(True))
            .order_by(LocalAssetModel.id)
        )
        async with self._session() as session:
            result = await session.execute(stmt)
            return [to_entity(row) for row in result.scalars().all()]

    async def count_dirty(self) -> int:
        stmt = select(func.count()).select_from(LocalAssetModel).where(
            LocalAssetModel.is_dirty.is_(True)
        )
        async with self._session() as session:
            return (await session.execute(stmt)).scalar_one()

    async def add(self, record: AssetRecord) -> AssetRecord:
        async with self._session(write=True) as session:
            model = to_model(LocalAssetModel, record)
            session.add(model)
            await session.flush()
            return to_entity(model)

    async def save(self, record: AssetRecord) -> AssetRecord:
        async with self._session(write=True) as session:
            model = await self._get_model(session, record.guid)
            if model is None:
                raise ValueError(f"Asset {record.guid} not found in local store")
            copy_state(model, record)
            await session.flush()
            return to_entity(model)

    async def clear_dirty(self, acknowledged: dict[str, datetime]) -> list[str]:
        if not acknowledged:
            return []

        cleared: list[str] = []
        async with self._session(write=True) as session:
            for guid, sent_updated_at in acknowledged.items():
                model = await self._get_model(session, guid)
                if model is None or not model.is_dirty:
                    continue
                if as_utc(model.updated_at) != as_utc(sent_updated_at):
                    logger.debug("Asset %s edited during sync — stays dirty", guid)
                    continue
                model.is_dirty = False
                cleared.append(guid)
        return cleared
