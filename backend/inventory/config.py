import json
import logging
from pathlib import Path

from pydantic_settings import BaseSettings
from functools import lru_cache

from inventory.domain.entities import CaptureContext

_config_logger = logging.getLogger(__name__)

_SETTINGS_FILE = Path("data/settings.json")
_BACKEND_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _BACKEND_DIR / ".env",
    ".env",
)
_TOMBSTONE_POLICIES = frozenset({"reactivate", "reject"})
# Same limit as the client/site columns and the sync payload
_TAG_MAX_LENGTH = 200


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_title: str = "OT Asset Inventory API"
    app_version: str = "0.1.0"
    app_env: str = "development"
    database_url: str = "sqlite:///./data/server.db"
    cors_origins: list[str] = ["*"]

    # Device side: local record store and sync transport
    local_database_url: str = "sqlite:///./data/device.db"
    sync_api_base_url: str = "http://localhost:8020/api/v1"
    sync_timeout_seconds: float = 30.0
    sync_batch_size: int = 0                 # 0 = send every dirty record at once

    # Server side: what to do with an update for an already-deleted guid
    tombstone_policy: str = "reactivate"     # reactivate | reject

    # Logging: per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_sql: str = "WARNING"           # sqlalchemy.engine SQL queries
    log_level_http: str = "WARNING"          # httpx / httpcore outbound HTTP
    log_level_uvicorn: str = "INFO"          # uvicorn.access / uvicorn.error
    log_level_sync: str = "INFO"             # Sync client + reconciliation

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
    }

    def model_post_init(self, __context: object) -> None:
        if self.tombstone_policy not in _TOMBSTONE_POLICIES:
            _config_logger.warning(
                "Unknown tombstone_policy '%s' — falling back to 'reactivate'",
                self.tombstone_policy,
            )
            object.__setattr__(self, "tombstone_policy", "reactivate")


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance — reads .env once."""
    return Settings()


def load_capture_context(path: Path = _SETTINGS_FILE) -> CaptureContext | None:
    """Read the device's client/site tags from data/settings.json.

    Returns None when the file is missing, unreadable, or either tag is
    empty; the capture form refuses to create assets until both are set.
    """
    if not path.exists():
        return None
    try:
        raw = json.loads(path.read_text("utf-8"))
    except (OSError, ValueError) as exc:
        _config_logger.warning("Could not load capture settings: %s", exc)
        return None

    client = raw.get("client") if isinstance(raw, dict) else None
    site = raw.get("site") if isinstance(raw, dict) else None
    if not isinstance(client, str) or not isinstance(site, str) or not client or not site:
        return None
    if len(client) > _TAG_MAX_LENGTH or len(site) > _TAG_MAX_LENGTH:
        _config_logger.warning(
            "Capture settings ignored: client and site must be at most %d characters",
            _TAG_MAX_LENGTH,
        )
        return None
    return CaptureContext(client=client, site=site)


def save_capture_context(context: CaptureContext, path: Path = _SETTINGS_FILE) -> None:
    """Persist the device's client/site tags to data/settings.json."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps({"client": context.client, "site": context.site}),
        encoding="utf-8",
    )
