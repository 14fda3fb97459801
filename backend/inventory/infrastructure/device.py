"""Device-side wiring — builds the local store, mutation tracker and sync client."""

import logging
from dataclasses import dataclass
from pathlib import Path

import httpx

from inventory.application.schemas import AssetCreate
from inventory.application.services import (
    AssetChangeNotifier,
    AssetMutationService,
    SyncClientService,
)
from inventory.config import Settings, get_settings, load_capture_context
from inventory.domain.entities import AssetRecord, CaptureContext
from inventory.infrastructure.database.repositories import SQLAlchemyLocalAssetStore
from inventory.infrastructure.logging.log_config import setup_logging
from inventory.infrastructure.sync import HttpSyncTransport

logger = logging.getLogger(__name__)


@dataclass
class DeviceServices:
    """Everything the capture UI needs, sharing one store and one notifier."""

    store: SQLAlchemyLocalAssetStore
    notifier: AssetChangeNotifier
    mutations: AssetMutationService
    sync: SyncClientService
    context: CaptureContext | None = None

    async def capture(self, data: AssetCreate | dict) -> AssetRecord:
        """Create an asset tagged with this device's client/site."""
        return await self.mutations.create_asset(data, self.context)

    async def close(self) -> None:
        await self.notifier.shutdown()
        await self.store.dispose()


async def create_device_services(
    settings: Settings | None = None,
    *,
    http_client: httpx.AsyncClient | None = None,
    capture_settings_path: Path | None = None,
) -> DeviceServices:
    """Open the local store (creating its table) and wire the services to it."""
    settings = settings or get_settings()
    setup_logging(settings)

    store = SQLAlchemyLocalAssetStore.from_url(settings.local_database_url)
    await store.initialize()

    context = (
        load_capture_context(capture_settings_path)
        if capture_settings_path is not None
        else load_capture_context()
    )
    if context is None:
        logger.warning("No client/site configured; captured assets will be untagged")

    notifier = AssetChangeNotifier()
    transport = HttpSyncTransport(
        base_url=settings.sync_api_base_url,
        timeout_seconds=settings.sync_timeout_seconds,
        http_client=http_client,
    )
    logger.info("Device services ready, syncing with %s", settings.sync_api_base_url)

    return DeviceServices(
        store=store,
        notifier=notifier,
        mutations=AssetMutationService(store, notifier),
        sync=SyncClientService(
            store,
            transport,
            notifier=notifier,
            batch_size=settings.sync_batch_size,
        ),
        context=context,
    )
