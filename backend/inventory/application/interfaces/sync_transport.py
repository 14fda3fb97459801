"""Abstract transport interface (port) between the device and the server."""

from abc import ABC, abstractmethod

from inventory.domain.entities import AssetRecord, BatchOutcome


class SyncTransport(ABC):
    """Delivers one batch of dirty records and returns the server's acknowledgment.

    Implementations raise SyncTransportError for connection failures,
    timeouts, non-success statuses and undecodable responses.
    """

    @abstractmethod
    async def send_batch(self, records: list[AssetRecord]) -> BatchOutcome:
        ...

    @abstractmethod
    async def fetch_server_assets(self) -> list[AssetRecord]:
        """Read-only view of the server's record set, for display."""
        ...
