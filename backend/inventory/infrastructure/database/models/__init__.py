from .asset import AssetModel, LocalAssetModel

__all__ = [
    "AssetModel",
    "LocalAssetModel",
]
