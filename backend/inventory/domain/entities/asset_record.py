"""Domain entity — the unit of synchronization between a device and the server."""

from dataclasses import dataclass, field, fields
from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import uuid4

# Fields overwritten wholesale by an edit or by a server-side update.
MUTABLE_FIELDS: tuple[str, ...] = (
    "name",
    "location",
    "description",
    "image_data_url",
    "model",
    "mac_address",
    "ip_address",
    "client",
    "site",
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_guid() -> str:
    return str(uuid4())


def as_utc(value: datetime) -> datetime:
    """Normalise a timestamp to aware UTC; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class CaptureContext:
    """Client/site tags stamped onto every asset captured on this device."""

    client: str
    site: str


@dataclass
class AssetRecord:
    """Core domain entity for a captured asset.

    ``guid`` is the cross-system identity: generated once on the device and
    never regenerated. ``id`` is a store-local sequence number and is never
    used to correlate records across the sync boundary.
    """

    name: str
    guid: str = field(default_factory=new_guid)
    id: int | None = None
    location: str | None = None
    description: str | None = None
    image_data_url: str | None = None
    model: str | None = None
    mac_address: str | None = None
    ip_address: str | None = None
    client: str | None = None
    site: str | None = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)
    is_dirty: bool = True
    is_deleted: bool = False

    def touch(self) -> None:
        """Mark the record as locally mutated.

        ``updated_at`` always moves forward, even when the clock has not
        ticked since the previous mutation.
        """
        now = _utcnow()
        if now <= self.updated_at:
            now = self.updated_at + timedelta(microseconds=1)
        self.updated_at = now
        self.is_dirty = True

    def apply_edit(self, values: dict[str, Any]) -> None:
        """Replace mutable fields from ``values`` and mark the record dirty."""
        for key, value in values.items():
            if key not in MUTABLE_FIELDS:
                raise KeyError(f"'{key}' is not a mutable asset field")
            setattr(self, key, value)
        self.touch()

    def mark_deleted(self) -> None:
        """Soft delete — the tombstone stays in storage until acknowledged."""
        self.is_deleted = True
        self.touch()

    def mutable_values(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in MUTABLE_FIELDS}

    def copy(self) -> "AssetRecord":
        return AssetRecord(**{f.name: getattr(self, f.name) for f in fields(self)})
