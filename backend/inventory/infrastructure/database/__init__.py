from .base import Base, LocalBase
from .session import engine, async_session_factory, get_db_session
from .models import AssetModel, LocalAssetModel

__all__ = [
    "Base",
    "LocalBase",
    "engine",
    "async_session_factory",
    "get_db_session",
    "AssetModel",
    "LocalAssetModel",
]
