"""Wire DTOs for the sync protocol (camelCase JSON on the wire)."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from inventory.domain.entities import AssetRecord, BatchOutcome, RejectedAsset, as_utc


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AssetPayload(_WireModel):
    """An asset as sent by the device and listed by the server.

    Optional fields that are absent mean null, not "unchanged".
    """

    guid: str = Field(..., min_length=1, max_length=64)
    name: str = Field(..., max_length=200)
    location: str | None = Field(None, max_length=200)
    description: str | None = None
    image_data_url: str | None = None
    created_at: datetime
    updated_at: datetime
    is_dirty: bool = False
    is_deleted: bool | None = False
    client: str | None = Field(None, max_length=200)
    site: str | None = Field(None, max_length=200)
    model: str | None = Field(None, max_length=200)
    mac_address: str | None = None
    ip_address: str | None = Field(None, max_length=200, alias="IPAddress")

    @classmethod
    def from_entity(cls, record: AssetRecord) -> "AssetPayload":
        return cls(
            guid=record.guid,
            name=record.name,
            location=record.location,
            description=record.description,
            image_data_url=record.image_data_url,
            created_at=record.created_at,
            updated_at=record.updated_at,
            is_dirty=record.is_dirty,
            is_deleted=record.is_deleted,
            client=record.client,
            site=record.site,
            model=record.model,
            mac_address=record.mac_address,
            ip_address=record.ip_address,
        )

    def to_entity(self) -> AssetRecord:
        return AssetRecord(
            guid=self.guid,
            name=self.name,
            location=self.location,
            description=self.description,
            image_data_url=self.image_data_url,
            model=self.model,
            mac_address=self.mac_address,
            ip_address=self.ip_address,
            client=self.client,
            site=self.site,
            created_at=as_utc(self.created_at),
            updated_at=as_utc(self.updated_at),
            is_dirty=self.is_dirty,
            is_deleted=bool(self.is_deleted),
        )


class ServerAssetResponse(AssetPayload):
    """Server-side view of an asset, including its sequence id."""

    id: int

    @classmethod
    def from_entity(cls, record: AssetRecord) -> "ServerAssetResponse":
        return cls(id=record.id, **AssetPayload.from_entity(record).model_dump())

    def to_entity(self) -> AssetRecord:
        record = super().to_entity()
        record.id = self.id
        return record


class SyncRequest(_WireModel):
    assets: list[AssetPayload]


class RejectedAssetSchema(_WireModel):
    guid: str
    reason: str


class SyncResponse(_WireModel):
    """Acknowledgment of a sync batch.

    ``synced_guids`` is the accepted-identity list; ``rejected`` carries a
    reason for each submitted guid that was not applied.
    """

    synced_guids: list[str] = Field(default_factory=list)
    rejected: list[RejectedAssetSchema] = Field(default_factory=list)

    @classmethod
    def from_outcome(cls, outcome: BatchOutcome) -> "SyncResponse":
        return cls(
            synced_guids=list(outcome.accepted),
            rejected=[
                RejectedAssetSchema(guid=r.guid, reason=r.reason)
                for r in outcome.rejected
            ],
        )

    def to_outcome(self) -> BatchOutcome:
        return BatchOutcome(
            accepted=list(self.synced_guids),
            rejected=[RejectedAsset(guid=r.guid, reason=r.reason) for r in self.rejected],
        )
