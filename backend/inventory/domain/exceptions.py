"""Domain-specific exceptions — framework-independent."""


class EntityNotFoundError(Exception):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: int | str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class AssetValidationError(Exception):
    """Raised when an asset fails local validation; nothing was stored."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class PersistenceError(Exception):
    """Raised when a local or server store cannot complete a write."""


class SyncTransportError(Exception):
    """Raised when a sync batch could not be delivered or acknowledged.

    ``status_code`` is None for connection failures and timeouts.
    """

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        self.message = message
        super().__init__(message)
