"""SQLAlchemy ORM bases and model registries."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for the server's ORM models."""

    pass


class LocalBase(DeclarativeBase):
    """Base class for the device-local ORM models (separate database)."""

    pass
