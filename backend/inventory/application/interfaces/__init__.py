from .local_asset_store import LocalAssetStore
from .server_asset_repository import ServerAssetRepository
from .sync_transport import SyncTransport

__all__ = [
    "LocalAssetStore",
    "ServerAssetRepository",
    "SyncTransport",
]
