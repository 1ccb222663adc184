"""Application configuration helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path


def _default_data_root() -> Path:
    """Return the platform specific directory used for persistent data."""

    if os.name == "nt":
        base = Path(os.environ.get("LOCALAPPDATA", Path.home()))
        return base / "LotLedger"
    return Path.home() / ".lotledger"


def _default_database_path() -> Path:
    """Resolve the SQLite database path taking overrides into account."""

    override = os.environ.get("LOTLEDGER_DB")
    if override:
        return Path(override).expanduser()
    return _default_data_root() / "inventory.sqlite3"


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() in {"1", "true", "yes", "on"}


def _cors_origins() -> list[str]:
    raw = os.environ.get("LOTLEDGER_CORS_ORIGINS", "*")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@dataclass(slots=True)
class Settings:
    """Runtime configuration loaded from environment variables."""

    app_name: str = field(default_factory=lambda: os.environ.get("LOTLEDGER_APP_NAME", "Lot Ledger"))
    host: str = field(default_factory=lambda: os.environ.get("LOTLEDGER_HOST", "127.0.0.1"))
    port: int = field(default_factory=lambda: int(os.environ.get("LOTLEDGER_PORT", "8000")))
    reload: bool = field(default_factory=lambda: _env_flag("LOTLEDGER_RELOAD", "false"))
    log_level: str = field(default_factory=lambda: os.environ.get("LOTLEDGER_LOG_LEVEL", "info"))
    log_json: bool = field(default_factory=lambda: _env_flag("LOTLEDGER_LOG_JSON", "false"))
    database_path: Path = field(default_factory=_default_database_path)
    database_url_override: str | None = field(
        default_factory=lambda: os.environ.get("LOTLEDGER_DATABASE_URL") or None
    )
    seed_demo_data: bool = field(default_factory=lambda: _env_flag("LOTLEDGER_SEED_DEMO", "true"))
    cors_origins: list[str] = field(default_factory=_cors_origins)

    @property
    def database_url(self) -> str:
        """SQLAlchemy URL of the inventory store."""

        if self.database_url_override:
            return self.database_url_override
        return f"sqlite:///{self.database_path}"

    def ensure_storage(self) -> None:
        """Ensure that the database directory exists."""

        if not self.database_url_override:
            self.database_path.parent.mkdir(parents=True, exist_ok=True)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached application settings."""

    settings = Settings()
    settings.ensure_storage()
    return settings
