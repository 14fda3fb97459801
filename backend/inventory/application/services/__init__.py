from .asset_change_notifier import AssetChangeNotifier
from .asset_mutation_service import AssetMutationService
from .reconciliation_service import ReconciliationService, TombstonePolicy
from .sync_client_service import SyncClientService

__all__ = [
    "AssetChangeNotifier",
    "AssetMutationService",
    "ReconciliationService",
    "TombstonePolicy",
    "SyncClientService",
]
