"""Abstract repository interface (port) for the server of record."""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager

from inventory.domain.entities import AssetRecord


class ServerAssetRepository(ABC):
    """Port for server-side asset persistence — implemented in the infrastructure layer."""

    @abstractmethod
    async def get_by_guid(self, guid: str) -> AssetRecord | None:
        ...

    @abstractmethod
    async def get_all(self) -> list[AssetRecord]:
        """Every server record, tombstones included, newest first."""
        ...

    @abstractmethod
    async def add(self, record: AssetRecord) -> AssetRecord:
        ...

    @abstractmethod
    async def save(self, record: AssetRecord) -> AssetRecord:
        ...

    @abstractmethod
    def record_transaction(self) -> AbstractAsyncContextManager[None]:
        """Scope the writes for one record; rolled back alone on failure.

        Storage failures inside the scope surface as PersistenceError.
        """
        ...

    @abstractmethod
    async def commit(self) -> None:
        """Make every successful record transaction durable."""
        ...
