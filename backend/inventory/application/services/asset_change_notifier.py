"""Asset change notifier — in-process broadcaster for local store changes."""

import asyncio
import logging
from collections.abc import AsyncGenerator

from inventory.domain.entities import AssetChange

logger = logging.getLogger(__name__)

SUBSCRIBER_QUEUE_SIZE = 256


class AssetChangeNotifier:
    """Pushes local asset changes to subscribers instead of having them poll.

    Each subscriber gets its own bounded asyncio.Queue. A subscriber that
    falls behind far enough to fill its queue is disconnected.
    """

    def __init__(self) -> None:
        self._queues: list[asyncio.Queue[AssetChange | None]] = []

    async def subscribe(self) -> AsyncGenerator[AssetChange, None]:
        """Yield changes until the notifier shuts down or the consumer stops."""
        queue: asyncio.Queue[AssetChange | None] = asyncio.Queue(
            maxsize=SUBSCRIBER_QUEUE_SIZE
        )
        self._queues.append(queue)
        try:
            while True:
                change = await queue.get()
                if change is None:
                    break
                yield change
        finally:
            if queue in self._queues:
                self._queues.remove(queue)

    def publish(self, change: AssetChange) -> None:
        dead_queues: list[asyncio.Queue[AssetChange | None]] = []

        for queue in self._queues:
            try:
                queue.put_nowait(change)
            except asyncio.QueueFull:
                dead_queues.append(queue)
                logger.warning("Change subscriber queue full — disconnecting")

        for q in dead_queues:
            self._queues.remove(q)
            # Drop the oldest event so the close sentinel fits.
            q.get_nowait()
            q.put_nowait(None)

    async def shutdown(self) -> None:
        """Disconnect all subscribers."""
        for queue in self._queues:
            while queue.full():
                queue.get_nowait()
            queue.put_nowait(None)
        self._queues.clear()

    @property
    def subscriber_count(self) -> int:
        return len(self._queues)
