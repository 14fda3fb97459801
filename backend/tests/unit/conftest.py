"""In-memory fakes of the asset ports, shared by the unit tests."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime

import pytest

from inventory.application.interfaces import (
    LocalAssetStore,
    ServerAssetRepository,
    SyncTransport,
)
from inventory.domain.entities import AssetRecord, BatchOutcome, as_utc
from inventory.domain.exceptions import PersistenceError, SyncTransportError


class FakeLocalAssetStore(LocalAssetStore):
    """In-memory fake local store; hands out copies like a real database."""

    def __init__(self):
        self._records: dict[str, AssetRecord] = {}
        self._next_id = 1
        self.fail_reads = False
        self.fail_clear = False

    def _check_read(self) -> None:
        if self.fail_reads:
            raise PersistenceError("disk I/O error")

    async def get_by_guid(self, guid: str) -> AssetRecord | None:
        self._check_read()
        record = self._records.get(guid)
        return record.copy() if record else None

    async def get_all(self, *, include_deleted: bool = False) -> list[AssetRecord]:
        self._check_read()
        records = [r.copy() for r in self._records.values()]
        if not include_deleted:
            records = [r for r in records if not r.is_deleted]
        return sorted(records, key=lambda r: r.created_at, reverse=True)

    async def get_dirty(self) -> list[AssetRecord]:
        self._check_read()
        return [r.copy() for r in self._records.values() if r.is_dirty]

    async def count_dirty(self) -> int:
        self._check_read()
        return sum(1 for r in self._records.values() if r.is_dirty)

    async def add(self, record: AssetRecord) -> AssetRecord:
        if record.guid in self._records:
            raise PersistenceError(f"UNIQUE constraint failed: {record.guid}")
        stored = record.copy()
        stored.id = self._next_id
        self._next_id += 1
        self._records[stored.guid] = stored
        return stored.copy()

    async def save(self, record: AssetRecord) -> AssetRecord:
        if record.guid not in self._records:
            raise ValueError(f"Asset {record.guid} not found")
        self._records[record.guid] = record.copy()
        return record.copy()

    async def clear_dirty(self, acknowledged: dict[str, datetime]) -> list[str]:
        if self.fail_clear:
            raise PersistenceError("database is locked")
        cleared = []
        for guid, sent in acknowledged.items():
            record = self._records.get(guid)
            if record is None or not record.is_dirty:
                continue
            if as_utc(record.updated_at) != as_utc(sent):
                continue
            record.is_dirty = False
            cleared.append(guid)
        return cleared

    def peek(self, guid: str) -> AssetRecord:
        return self._records[guid]


class FakeServerAssetRepository(ServerAssetRepository):
    """In-memory fake server repository with per-record rollback."""

    def __init__(self):
        self._records: dict[str, AssetRecord] = {}
        self._next_id = 1
        self.fail_guids: set[str] = set()
        self.fail_commit = False
        self.commits = 0

    async def get_by_guid(self, guid: str) -> AssetRecord | None:
        record = self._records.get(guid)
        return record.copy() if record else None

    async def get_all(self) -> list[AssetRecord]:
        return [r.copy() for r in self._records.values()]

    async def add(self, record: AssetRecord) -> AssetRecord:
        if record.guid in self.fail_guids:
            raise PersistenceError(f"insert failed for {record.guid}")
        stored = record.copy()
        stored.id = self._next_id
        self._next_id += 1
        self._records[stored.guid] = stored
        return stored.copy()

    async def save(self, record: AssetRecord) -> AssetRecord:
        if record.guid in self.fail_guids:
            raise PersistenceError(f"update failed for {record.guid}")
        self._records[record.guid] = record.copy()
        return record.copy()

    @asynccontextmanager
    async def record_transaction(self) -> AsyncIterator[None]:
        snapshot = {guid: r.copy() for guid, r in self._records.items()}
        try:
            yield
        except PersistenceError:
            self._records = snapshot
            raise

    async def commit(self) -> None:
        if self.fail_commit:
            raise PersistenceError("Commit failed: connection lost")
        self.commits += 1

    def peek(self, guid: str) -> AssetRecord | None:
        return self._records.get(guid)


class FakeSyncTransport(SyncTransport):
    """Records the batches it receives and acknowledges them.

    By default every sent guid is accepted; ``drop`` removes guids from the
    acknowledgment and ``error`` makes every call fail.
    """

    def __init__(self):
        self.batches: list[list[AssetRecord]] = []
        self.drop: set[str] = set()
        self.error: SyncTransportError | None = None
        self.before_ack = None

    async def send_batch(self, records: list[AssetRecord]) -> BatchOutcome:
        self.batches.append([r.copy() for r in records])
        if self.error is not None:
            raise self.error
        if self.before_ack is not None:
            await self.before_ack()
        return BatchOutcome(accepted=[r.guid for r in records if r.guid not in self.drop])

    async def fetch_server_assets(self) -> list[AssetRecord]:
        return []


@pytest.fixture
def local_store() -> FakeLocalAssetStore:
    return FakeLocalAssetStore()


@pytest.fixture
def server_repo() -> FakeServerAssetRepository:
    return FakeServerAssetRepository()


@pytest.fixture
def transport() -> FakeSyncTransport:
    return FakeSyncTransport()
