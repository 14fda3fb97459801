"""SQLAlchemy ORM models for assets — server of record and device-local store."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from inventory.infrastructure.database.base import Base, LocalBase


class _AssetColumns:
    """Columns shared by both asset tables."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    guid: Mapped[str] = mapped_column(String(64), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    location: Mapped[str | None] = mapped_column(String(200), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_data_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    model: Mapped[str | None] = mapped_column(String(200), nullable=True)
    mac_address: Mapped[str | None] = mapped_column(String(450), nullable=True)
    ip_address: Mapped[str | None] = mapped_column(String(200), nullable=True)
    client: Mapped[str | None] = mapped_column(String(200), nullable=True)
    site: Mapped[str | None] = mapped_column(String(200), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    is_dirty: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        return (
            f"<{type(self).__name__}(id={self.id}, guid={self.guid}, "
            f"dirty={self.is_dirty}, deleted={self.is_deleted})>"
        )


class AssetModel(_AssetColumns, Base):
    """ORM model — maps to the server's 'assets' table."""

    __tablename__ = "assets"

    __table_args__ = (
        Index("ix_assets_guid", "guid", unique=True),
    )


class LocalAssetModel(_AssetColumns, LocalBase):
    """ORM model — maps to the device's 'local_assets' table."""

    __tablename__ = "local_assets"

    __table_args__ = (
        Index("ix_local_assets_guid", "guid", unique=True),
        Index("ix_local_assets_dirty", "is_dirty"),
        Index("ix_local_assets_created", "created_at"),
    )
