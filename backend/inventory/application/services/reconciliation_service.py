"""Application service (use case) for applying a device's sync batch on the server."""

import logging
from enum import Enum

from inventory.application.interfaces import ServerAssetRepository
from inventory.domain.entities import (
    AssetRecord,
    BatchOutcome,
    RejectedAsset,
)
from inventory.domain.exceptions import PersistenceError
from inventory.infrastructure.logging.colored_logger import SyncLogger, SyncStage

logger = logging.getLogger(__name__)
slog = SyncLogger("inventory.sync.server")


class TombstonePolicy(str, Enum):
    """What to do with an update that arrives for an already-deleted guid."""

    REACTIVATE = "reactivate"
    REJECT = "reject"


class ReconciliationService:
    """Idempotent upsert / soft-delete of incoming assets, keyed by guid.

    Each record is applied in its own transaction, so a storage failure on
    one record drops only that guid from the accepted list. Updates are a
    full replace of the mutable fields (last writer wins, no field merge);
    timestamps are taken verbatim from the device.
    """

    def __init__(
        self,
        repository: ServerAssetRepository,
        tombstone_policy: TombstonePolicy = TombstonePolicy.REACTIVATE,
    ):
        self._repository = repository
        self._tombstone_policy = TombstonePolicy(tombstone_policy)

    async def list_assets(self) -> list[AssetRecord]:
        return await self._repository.get_all()

    async def apply_batch(self, records: list[AssetRecord]) -> BatchOutcome:
        """Apply every record and commit. Raises PersistenceError if the
        batch as a whole cannot be committed."""
        outcome = BatchOutcome()
        slog.step_start(SyncStage.APPLY, f"Applying batch of {len(records)} assets")

        for incoming in records:
            try:
                async with self._repository.record_transaction():
                    reason = await self._apply_one(incoming)
            except PersistenceError as exc:
                slog.step_error(SyncStage.APPLY, f"Asset {incoming.guid} not applied", error=exc)
                outcome.rejected.append(RejectedAsset(guid=incoming.guid, reason=str(exc)))
                continue

            if reason is not None:
                outcome.rejected.append(RejectedAsset(guid=incoming.guid, reason=reason))
            else:
                outcome.accepted.append(incoming.guid)

        await self._repository.commit()
        slog.step_complete(
            SyncStage.APPLY,
            "Batch committed",
            accepted=len(outcome.accepted),
            rejected=len(outcome.rejected),
        )
        return outcome

    async def _apply_one(self, incoming: AssetRecord) -> str | None:
        """Apply a single record. Returns a rejection reason, or None if applied."""
        existing = await self._repository.get_by_guid(incoming.guid)

        if incoming.is_deleted:
            if existing is not None:
                existing.is_deleted = True
                existing.is_dirty = False
                existing.updated_at = incoming.updated_at
                await self._repository.save(existing)
                slog.detail("tombstoned", guid=incoming.guid)
            else:
                # Nothing to delete; the device's intent is already satisfied
                slog.detail("delete for unknown guid", guid=incoming.guid)
            return None

        if existing is None:
            record = incoming.copy()
            record.id = None
            record.is_dirty = False
            record.is_deleted = False
            await self._repository.add(record)
            slog.detail("inserted", guid=incoming.guid)
            return None

        if existing.is_deleted and self._tombstone_policy is TombstonePolicy.REJECT:
            logger.info("Update for tombstoned asset %s rejected", incoming.guid)
            return "tombstoned"

        for name, value in incoming.mutable_values().items():
            setattr(existing, name, value)
        existing.updated_at = incoming.updated_at
        existing.is_dirty = False
        existing.is_deleted = False
        await self._repository.save(existing)
        slog.detail("updated", guid=incoming.guid)
        return None
