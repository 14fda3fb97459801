"""Pydantic DTOs for capturing and editing assets on the device."""

from pydantic import BaseModel, Field, field_validator


class AssetCreate(BaseModel):
    """Schema for a newly captured asset — only the name is required."""

    name: str = Field(..., max_length=200, examples=["PLC rack 3"])
    guid: str | None = Field(None, max_length=64)
    location: str | None = Field(None, max_length=200)
    description: str | None = None
    image_data_url: str | None = None
    model: str | None = Field(None, max_length=200)
    mac_address: str | None = Field(None, max_length=200)
    ip_address: str | None = Field(None, max_length=200)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name is required")
        return value


class AssetUpdate(AssetCreate):
    """Schema for editing an asset — the form resubmits every field.

    ``client`` and ``site`` default to the values already on the record.
    """

    client: str | None = Field(None, max_length=200)
    site: str | None = Field(None, max_length=200)
