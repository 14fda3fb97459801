from .server_asset_repository import SQLAlchemyServerAssetRepository
from .local_asset_repository import SQLAlchemyLocalAssetStore

__all__ = [
    "SQLAlchemyServerAssetRepository",
    "SQLAlchemyLocalAssetStore",
]
