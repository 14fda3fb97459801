"""Abstract repository interface (port) for the device-local record store."""

from abc import ABC, abstractmethod
from datetime import datetime

from inventory.domain.entities import AssetRecord


class LocalAssetStore(ABC):
    """Port for durable per-device asset storage — implemented in the infrastructure layer.

    Implementations serialize all writes (single writer at a time) so a UI
    edit and a sync's dirty-clearing write can never interleave on a record.
    """

    @abstractmethod
    async def get_by_guid(self, guid: str) -> AssetRecord | None:
        """Retrieve a single record by its identity."""
        ...

    @abstractmethod
    async def get_all(self, *, include_deleted: bool = False) -> list[AssetRecord]:
        """Retrieve every record, newest first."""
        ...

    @abstractmethod
    async def get_dirty(self) -> list[AssetRecord]:
        """Retrieve every record with unacknowledged local mutations."""
        ...

    @abstractmethod
    async def count_dirty(self) -> int:
        ...

    @abstractmethod
    async def add(self, record: AssetRecord) -> AssetRecord:
        """Persist a new record; the store assigns its local sequence id."""
        ...

    @abstractmethod
    async def save(self, record: AssetRecord) -> AssetRecord:
        """Write back an existing record identified by its guid."""
        ...

    @abstractmethod
    async def clear_dirty(self, acknowledged: dict[str, datetime]) -> list[str]:
        """Clear the dirty flag of acknowledged records, atomically.

        ``acknowledged`` maps guid to the ``updated_at`` that was sent. A
        record is only cleared if it still carries that timestamp; records
        edited after the batch was read stay dirty. Returns the cleared guids.
        """
        ...
