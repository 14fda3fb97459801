"""Sync transport infrastructure package."""

from .http_sync_transport import HttpSyncTransport

__all__ = ["HttpSyncTransport"]
