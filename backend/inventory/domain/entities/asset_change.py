"""Change events published by the local record store."""

from dataclasses import dataclass
from enum import Enum


class ChangeKind(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    SYNCED = "synced"


@dataclass(frozen=True)
class AssetChange:
    guid: str
    kind: ChangeKind
    dirty_count: int
