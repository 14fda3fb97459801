from .asset import AssetCreate, AssetUpdate
from .sync import (
    AssetPayload,
    ServerAssetResponse,
    SyncRequest,
    SyncResponse,
    RejectedAssetSchema,
)

__all__ = [
    "AssetCreate",
    "AssetUpdate",
    "AssetPayload",
    "ServerAssetResponse",
    "SyncRequest",
    "SyncResponse",
    "RejectedAssetSchema",
]
