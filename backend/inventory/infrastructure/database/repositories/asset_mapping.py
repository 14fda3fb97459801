"""ORM model ⇄ domain entity mapping shared by the asset repositories."""

from typing import TypeVar

from inventory.domain.entities import AssetRecord, MUTABLE_FIELDS, as_utc
from inventory.infrastructure.database.models import AssetModel, LocalAssetModel

ModelT = TypeVar("ModelT", AssetModel, LocalAssetModel)


def to_entity(model: AssetModel | LocalAssetModel) -> AssetRecord:
    """Map ORM model → domain entity."""
    return AssetRecord(
        id=model.id,
        guid=model.guid,
        **{name: getattr(model, name) for name in MUTABLE_FIELDS},
        created_at=as_utc(model.created_at),
        updated_at=as_utc(model.updated_at),
        is_dirty=model.is_dirty,
        is_deleted=model.is_deleted,
    )


def to_model(model_cls: type[ModelT], entity: AssetRecord) -> ModelT:
    """Map domain entity → ORM model (for creation; the store assigns the id)."""
    model = model_cls(guid=entity.guid, created_at=as_utc(entity.created_at))
    copy_state(model, entity)
    return model


def copy_state(model: AssetModel | LocalAssetModel, entity: AssetRecord) -> None:
    """Overwrite every mutable column of ``model`` from ``entity``."""
    for name in MUTABLE_FIELDS:
        setattr(model, name, getattr(entity, name))
    model.updated_at = as_utc(entity.updated_at)
    model.is_dirty = entity.is_dirty
    model.is_deleted = entity.is_deleted
