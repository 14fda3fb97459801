from .asset_record import AssetRecord, CaptureContext, MUTABLE_FIELDS, as_utc, new_guid
from .asset_change import AssetChange, ChangeKind
from .sync_outcome import BatchOutcome, RejectedAsset, SyncResult

__all__ = [
    "AssetRecord",
    "CaptureContext",
    "MUTABLE_FIELDS",
    "new_guid",
    "as_utc",
    "AssetChange",
    "ChangeKind",
    "BatchOutcome",
    "RejectedAsset",
    "SyncResult",
]
