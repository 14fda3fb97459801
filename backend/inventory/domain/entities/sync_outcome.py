"""Value objects describing the outcome of a reconciliation attempt."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class RejectedAsset:
    """A submitted guid the server did not apply, with the reason."""

    guid: str
    reason: str


@dataclass
class BatchOutcome:
    """Server-side result of applying one batch.

    ``accepted`` holds every guid that was durably applied (or whose delete
    was satisfied vacuously); anything else is listed in ``rejected``.
    """

    accepted: list[str] = field(default_factory=list)
    rejected: list[RejectedAsset] = field(default_factory=list)


@dataclass
class SyncResult:
    """Client-side result of ``run_sync()``.

    ``synced_count`` is the number of local records whose dirty flag was
    actually cleared, which can be lower than ``submitted_count`` when the
    server acknowledged only part of the batch.
    """

    success: bool
    synced_count: int = 0
    error: str | None = None
    submitted_count: int = 0
    pending_guids: list[str] = field(default_factory=list)
    rejected: list[RejectedAsset] = field(default_factory=list)

    @property
    def is_partial(self) -> bool:
        return self.success and bool(self.pending_guids)
