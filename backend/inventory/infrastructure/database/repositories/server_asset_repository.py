"""Concrete repository implementation for the server's assets backed by SQLAlchemy."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from inventory.application.interfaces import ServerAssetRepository
from inventory.domain.entities import AssetRecord
from inventory.domain.exceptions import PersistenceError
from inventory.infrastructure.database.models import AssetModel
from inventory.infrastructure.database.repositories.asset_mapping import (
    copy_state,
    to_entity,
    to_model,
)


class SQLAlchemyServerAssetRepository(ServerAssetRepository):
    """Implements the ServerAssetRepository port using SQLAlchemy async sessions.

    ``record_transaction`` opens a SAVEPOINT, so one record's failure rolls
    back only that record's writes.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def _get_model(self, guid: str) -> AssetModel | None:
        result = await self._session.execute(
            select(AssetModel).where(AssetModel.guid == guid)
        )
        return result.scalar_one_or_none()

    async def get_by_guid(self, guid: str) -> AssetRecord | None:
        model = await self._get_model(guid)
        return to_entity(model) if model else None

    async def get_all(self) -> list[AssetRecord]:
        stmt = select(AssetModel).order_by(AssetModel.created_at.desc(), AssetModel.id.desc())
        result = await self._session.execute(stmt)
        return [to_entity(row) for row in result.scalars().all()]

    async def add(self, record: AssetRecord) -> AssetRecord:
        model = to_model(AssetModel, record)
        self._session.add(model)
        await self._session.flush()
        return to_entity(model)

    async def save(self, record: AssetRecord) -> AssetRecord:
        model = await self._get_model(record.guid)
        if model is None:
            raise ValueError(f"Asset {record.guid} not found in database")
        copy_state(model, record)
        await self._session.flush()
        return to_entity(model)

    @asynccontextmanager
    async def record_transaction(self) -> AsyncIterator[None]:
        try:
            async with self._session.begin_nested():
                yield
        except SQLAlchemyError as exc:
            raise PersistenceError(f"{type(exc).__name__}: {exc}") from exc

    async def commit(self) -> None:
        try:
            await self._session.commit()
        except SQLAlchemyError as exc:
            await self._session.rollback()
            raise PersistenceError(f"Commit failed: {exc}") from exc
