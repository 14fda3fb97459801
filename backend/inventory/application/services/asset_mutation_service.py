"""Application service (use case) for capturing and editing assets on the device."""

import logging
from typing import Any

from pydantic import ValidationError

from inventory.application.interfaces import LocalAssetStore
from inventory.application.schemas.asset import AssetCreate, AssetUpdate
from inventory.application.services.asset_change_notifier import AssetChangeNotifier
from inventory.domain.entities import (
    AssetChange,
    AssetRecord,
    CaptureContext,
    ChangeKind,
    new_guid,
)
from inventory.domain.exceptions import AssetValidationError, EntityNotFoundError

logger = logging.getLogger(__name__)


def _validate(schema: type[AssetCreate], data: AssetCreate | dict[str, Any]) -> AssetCreate:
    if isinstance(data, schema):
        return data
    try:
        return schema.model_validate(data)
    except ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or "asset"
        raise AssetValidationError(field, first.get("msg", "invalid value")) from exc


class AssetMutationService:
    """Records local create/update/delete operations as dirty mutations.

    Every mutation sets ``is_dirty`` and advances ``updated_at``. Nothing
    here ever clears the dirty flag; only an acknowledged sync does that.
    """

    def __init__(
        self,
        store: LocalAssetStore,
        notifier: AssetChangeNotifier | None = None,
    ):
        self._store = store
        self._notifier = notifier

    async def get_asset(self, guid: str) -> AssetRecord:
        record = await self._store.get_by_guid(guid)
        if record is None:
            raise EntityNotFoundError("Asset", guid)
        return record

    async def list_assets(self, *, include_deleted: bool = False) -> list[AssetRecord]:
        return await self._store.get_all(include_deleted=include_deleted)

    async def dirty_count(self) -> int:
        return await self._store.count_dirty()

    async def create_asset(
        self,
        data: AssetCreate | dict[str, Any],
        context: CaptureContext | None = None,
    ) -> AssetRecord:
        """Capture a new asset, tagged with the device's client/site context.

        A draft carrying a guid that already exists locally updates that
        record instead of inserting a second one.
        """
        draft = _validate(AssetCreate, data)
        if context is not None:
            # Tags obey the same limits as a form edit
            draft = _validate(
                AssetUpdate,
                {**draft.model_dump(), "client": context.client, "site": context.site},
            )
        values = draft.model_dump(exclude={"guid"})

        if draft.guid is not None:
            existing = await self._store.get_by_guid(draft.guid)
            if existing is not None:
                logger.debug("Create for known guid %s treated as update", draft.guid)
                # Capturing again revives a locally deleted asset
                existing.is_deleted = False
                existing.apply_edit(values)
                saved = await self._store.save(existing)
                await self._publish(saved.guid, ChangeKind.UPDATED)
                return saved

        record = AssetRecord(guid=draft.guid or new_guid(), **values)
        record.updated_at = record.created_at
        record.is_dirty = True
        saved = await self._store.add(record)
        logger.info("Captured asset %s (%s)", saved.guid, saved.name)
        await self._publish(saved.guid, ChangeKind.CREATED)
        return saved

    async def update_asset(
        self, guid: str, data: AssetUpdate | dict[str, Any]
    ) -> AssetRecord:
        """Replace the asset's fields with the submitted form values."""
        edit = _validate(AssetUpdate, data)
        record = await self.get_asset(guid)

        values = edit.model_dump(exclude={"guid"})
        # Tags stay with the record unless the form explicitly changes them
        if values["client"] is None:
            values["client"] = record.client
        if values["site"] is None:
            values["site"] = record.site

        record.apply_edit(values)
        saved = await self._store.save(record)
        await self._publish(saved.guid, ChangeKind.UPDATED)
        return saved

    async def delete_asset(self, guid: str) -> AssetRecord:
        """Soft delete; the tombstone is kept so the deletion can be synced."""
        record = await self.get_asset(guid)
        record.mark_deleted()
        saved = await self._store.save(record)
        logger.info("Asset %s marked deleted", guid)
        await self._publish(saved.guid, ChangeKind.DELETED)
        return saved

    async def _publish(self, guid: str, kind: ChangeKind) -> None:
        if self._notifier is None:
            return
        dirty = await self._store.count_dirty()
        self._notifier.publish(AssetChange(guid=guid, kind=kind, dirty_count=dirty))
