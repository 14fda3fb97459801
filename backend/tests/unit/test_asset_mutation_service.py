"""Unit tests for the AssetMutationService (the device's mutation tracker)."""

import asyncio

import pytest

from inventory.application.schemas import AssetCreate, AssetUpdate
from inventory.application.services import AssetChangeNotifier, AssetMutationService
from inventory.domain.entities import CaptureContext, ChangeKind
from inventory.domain.exceptions import AssetValidationError, EntityNotFoundError


CONTEXT = CaptureContext(client="Acme Water", site="North Plant")


@pytest.fixture
def service(local_store) -> AssetMutationService:
    return AssetMutationService(local_store)


@pytest.mark.asyncio
async def test_create_assigns_guid_marks_dirty_and_applies_context(service, local_store):
    asset = await service.create_asset(
        AssetCreate(name="PLC rack 3", location="Pump house"), CONTEXT
    )

    assert asset.guid
    assert asset.id == 1
    assert asset.is_dirty is True
    assert asset.is_deleted is False
    assert asset.client == "Acme Water"
    assert asset.site == "North Plant"
    assert asset.created_at == asset.updated_at
    assert local_store.peek(asset.guid).is_dirty is True


@pytest.mark.asyncio
async def test_create_accepts_plain_dict(service):
    asset = await service.create_asset({"name": "  Switch  ", "ip_address": "10.0.0.4"})
    assert asset.name == "Switch"
    assert asset.ip_address == "10.0.0.4"
    assert asset.client is None


@pytest.mark.asyncio
async def test_create_with_blank_name_stores_nothing(service):
    with pytest.raises(AssetValidationError) as exc_info:
        await service.create_asset({"name": "   "}, CONTEXT)

    assert exc_info.value.field == "name"
    assert await service.list_assets(include_deleted=True) == []
    assert await service.dirty_count() == 0


@pytest.mark.asyncio
async def test_create_with_known_guid_updates_instead_of_duplicating(service):
    first = await service.create_asset(AssetCreate(name="HMI"), CONTEXT)

    again = await service.create_asset(
        AssetCreate(name="HMI panel", guid=first.guid), CONTEXT
    )

    assert again.guid == first.guid
    assert again.id == first.id
    assert again.name == "HMI panel"
    assert len(await service.list_assets()) == 1


@pytest.mark.asyncio
async def test_update_marks_dirty_and_advances_updated_at(service, local_store):
    created = await service.create_asset(AssetCreate(name="Router"), CONTEXT)
    local_store.peek(created.guid).is_dirty = False

    updated = await service.update_asset(
        created.guid, AssetUpdate(name="Router", model="RB4011")
    )

    assert updated.is_dirty is True
    assert updated.updated_at > created.updated_at
    assert updated.created_at == created.created_at
    assert updated.model == "RB4011"
    # Tags stay with the record when the form leaves them empty
    assert updated.client == "Acme Water"
    assert updated.site == "North Plant"


@pytest.mark.asyncio
async def test_update_is_a_full_replace_of_form_fields(service):
    created = await service.create_asset(
        AssetCreate(name="Camera", location="Gate", description="PTZ"), CONTEXT
    )

    updated = await service.update_asset(created.guid, {"name": "Camera"})

    assert updated.location is None
    assert updated.description is None


@pytest.mark.asyncio
async def test_update_unknown_guid_raises(service):
    with pytest.raises(EntityNotFoundError):
        await service.update_asset("missing", AssetUpdate(name="X"))


@pytest.mark.asyncio
async def test_update_with_blank_name_leaves_record_untouched(service, local_store):
    created = await service.create_asset(AssetCreate(name="Sensor"), CONTEXT)
    local_store.peek(created.guid).is_dirty = False

    with pytest.raises(AssetValidationError):
        await service.update_asset(created.guid, {"name": ""})

    stored = local_store.peek(created.guid)
    assert stored.name == "Sensor"
    assert stored.is_dirty is False


@pytest.mark.asyncio
async def test_delete_keeps_tombstone_in_storage(service, local_store):
    created = await service.create_asset(AssetCreate(name="Old gateway"), CONTEXT)
    local_store.peek(created.guid).is_dirty = False

    deleted = await service.delete_asset(created.guid)

    assert deleted.is_deleted is True
    assert deleted.is_dirty is True
    assert await service.list_assets() == []
    remaining = await service.list_assets(include_deleted=True)
    assert [r.guid for r in remaining] == [created.guid]


@pytest.mark.asyncio
async def test_create_with_overlong_capture_tag_stores_nothing(service):
    context = CaptureContext(client="c" * 201, site="North Plant")

    with pytest.raises(AssetValidationError) as exc_info:
        await service.create_asset(AssetCreate(name="PLC"), context)

    assert exc_info.value.field == "client"
    assert await service.list_assets(include_deleted=True) == []
    assert await service.dirty_count() == 0


@pytest.mark.asyncio
async def test_create_with_guid_of_deleted_asset_revives_it(service):
    created = await service.create_asset(AssetCreate(name="Old gateway"), CONTEXT)
    await service.delete_asset(created.guid)

    revived = await service.create_asset(
        AssetCreate(name="Gateway", guid=created.guid), CONTEXT
    )

    assert revived.guid == created.guid
    assert revived.is_deleted is False
    assert revived.is_dirty is True
    assert [a.guid for a in await service.list_assets()] == [created.guid]


@pytest.mark.asyncio
async def test_mutations_publish_change_events(local_store):
    notifier = AssetChangeNotifier()
    service = AssetMutationService(local_store, notifier)

    events = notifier.subscribe()
    first = asyncio.ensure_future(events.__anext__())
    await asyncio.sleep(0)

    created = await service.create_asset(AssetCreate(name="Drive"), CONTEXT)
    change = await first

    assert change.guid == created.guid
    assert change.kind is ChangeKind.CREATED
    assert change.dirty_count == 1

    await service.delete_asset(created.guid)
    change = await events.__anext__()
    assert change.kind is ChangeKind.DELETED

    await events.aclose()
    assert notifier.subscriber_count == 0
