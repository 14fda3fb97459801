"""Sync client — pushes dirty local records to the server and applies the acknowledgment."""

import asyncio
import logging

from pydantic import ValidationError

from inventory.application.interfaces import LocalAssetStore, SyncTransport
from inventory.application.schemas.sync import AssetPayload
from inventory.application.services.asset_change_notifier import AssetChangeNotifier
from inventory.domain.entities import (
    AssetChange,
    AssetRecord,
    ChangeKind,
    RejectedAsset,
    SyncResult,
)
from inventory.domain.exceptions import PersistenceError, SyncTransportError
from inventory.infrastructure.logging.colored_logger import SyncLogger, SyncStage

logger = logging.getLogger(__name__)
slog = SyncLogger("inventory.sync.client")


class SyncClientService:
    """Reconciles the device's dirty records with the server of record.

    A run reads every dirty record, sends it in one batch (or in chunks of
    ``batch_size`` when set), and clears the dirty flag only for the guids
    the server acknowledged. Transport and storage failures are reported in
    the returned SyncResult and leave the dirty flags untouched, so the next
    run retries the same records.

    Overlapping ``run_sync()`` calls are serialized: a second caller waits
    for the run in flight and then performs its own run against whatever is
    still dirty.
    """

    def __init__(
        self,
        store: LocalAssetStore,
        transport: SyncTransport,
        *,
        notifier: AssetChangeNotifier | None = None,
        batch_size: int = 0,
    ):
        self._store = store
        self._transport = transport
        self._notifier = notifier
        self._batch_size = max(batch_size, 0)
        self._lock = asyncio.Lock()

    @property
    def is_syncing(self) -> bool:
        return self._lock.locked()

    async def run_sync(self) -> SyncResult:
        async with self._lock:
            return await self._run()

    async def list_server_assets(self) -> list[AssetRecord]:
        """Fetch the server's record set for display. Raises SyncTransportError."""
        return await self._transport.fetch_server_assets()

    async def _run(self) -> SyncResult:
        try:
            dirty = await self._store.get_dirty()
        except PersistenceError as exc:
            slog.step_error(SyncStage.COLLECT, "Could not read dirty records", error=exc)
            return SyncResult(success=False, error=str(exc))

        if not dirty:
            logger.debug("Nothing to sync")
            return SyncResult(success=True, synced_count=0)

        slog.step_start(SyncStage.COLLECT, f"Collected {len(dirty)} dirty assets")

        sendable, rejected = self._split_sendable(dirty)
        cleared: list[str] = []

        for batch in self._chunks(sendable):
            sent = {record.guid: record.updated_at for record in batch}

            try:
                with slog.timed_step(SyncStage.SEND, f"Sending {len(batch)} assets"):
                    outcome = await self._transport.send_batch(batch)
            except SyncTransportError as exc:
                return self._failure(dirty, cleared, rejected, exc.message)

            acknowledged = {
                guid: sent[guid] for guid in outcome.accepted if guid in sent
            }
            unknown = len(outcome.accepted) - len(acknowledged)
            if unknown:
                logger.warning("Server acknowledged %d guids that were not sent", unknown)

            try:
                batch_cleared = await self._store.clear_dirty(acknowledged)
            except PersistenceError as exc:
                slog.step_error(SyncStage.ACK, "Could not clear dirty flags", error=exc)
                return self._failure(dirty, cleared, rejected, str(exc))

            cleared.extend(batch_cleared)
            await self._publish_synced(batch_cleared)
            rejected.extend(outcome.rejected)
            slog.step_complete(
                SyncStage.ACK,
                "Acknowledgment applied",
                accepted=len(acknowledged),
                cleared=len(batch_cleared),
            )

        cleared_set = set(cleared)
        pending = [record.guid for record in dirty if record.guid not in cleared_set]
        for item in rejected:
            logger.warning("Server rejected asset %s: %s", item.guid, item.reason)
        if pending:
            logger.warning("%d assets remain dirty after sync", len(pending))

        slog.stats(submitted=len(dirty), cleared=len(cleared), pending=len(pending))
        return SyncResult(
            success=True,
            synced_count=len(cleared),
            submitted_count=len(dirty),
            pending_guids=pending,
            rejected=rejected,
        )

    def _chunks(self, records: list[AssetRecord]) -> list[list[AssetRecord]]:
        if not records:
            return []
        if not self._batch_size:
            return [records]
        return [
            records[i : i + self._batch_size]
            for i in range(0, len(records), self._batch_size)
        ]

    def _failure(
        self,
        dirty: list[AssetRecord],
        cleared: list[str],
        rejected: list[RejectedAsset],
        error: str,
    ) -> SyncResult:
        cleared_set = set(cleared)
        return SyncResult(
            success=False,
            synced_count=len(cleared),
            error=error,
            submitted_count=len(dirty),
            pending_guids=[r.guid for r in dirty if r.guid not in cleared_set],
            rejected=rejected,
        )

    async def _publish_synced(self, guids: list[str]) -> None:
        if self._notifier is None or not guids:
            return
        try:
            dirty = await self._store.count_dirty()
        except PersistenceError:
            logger.warning("Could not count dirty assets for change notification", exc_info=True)
            return
        for guid in guids:
            self._notifier.publish(
                AssetChange(guid=guid, kind=ChangeKind.SYNCED, dirty_count=dirty)
            )

    @staticmethod
    def _split_sendable(
        records: list[AssetRecord],
    ) -> tuple[list[AssetRecord], list[RejectedAsset]]:
        """Hold back records the sync payload cannot carry; they stay dirty."""
        sendable: list[AssetRecord] = []
        invalid: list[RejectedAsset] = []
        for record in records:
            try:
                AssetPayload.from_entity(record)
            except ValidationError as exc:
                first = exc.errors()[0]
                field = ".".join(str(part) for part in first.get("loc", ())) or "asset"
                reason = f"{field}: {first.get('msg', 'invalid value')}"
                slog.step_error(SyncStage.COLLECT, f"Asset {record.guid} cannot be sent ({reason})")
                invalid.append(RejectedAsset(guid=record.guid, reason=reason))
                continue
            sendable.append(record)
        return sendable, invalid
