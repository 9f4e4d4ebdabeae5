"""Engine settings.

All fields can be set via ``TSENGINE_*`` environment variables (e.g.
``TSENGINE_MAX_PAGE_SIZE=2000``) or a ``.env`` file in the working
directory. Unknown variables are ignored.

Fields
──────
database_path            : SQLite file used by the CLI stores
default_page_size        : Page size when the caller does not pass one
max_page_size            : Upper bound accepted for ``page_size``
upstream_timeout_seconds : Default deadline for each collaborator call
log_level / log_format   : structlog configuration (``json`` or ``console``)
service_name             : ``service.name`` stamped on every log event
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    """Centralized configuration for the query engine and its CLI."""

    model_config = SettingsConfigDict(
        env_prefix="TSENGINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Storage ──────────────────────────────────────────────────
    database_path: Path = Field(
        default_factory=lambda: Path.home() / ".tsengine" / "series.db",
        description="SQLite database holding series, series_data and series_data_history",
    )

    # ── Paging ───────────────────────────────────────────────────
    default_page_size: int = Field(default=500, ge=1)
    max_page_size: int = Field(default=1000, ge=1)

    # ── Upstream ─────────────────────────────────────────────────
    upstream_timeout_seconds: float = Field(default=10.0, gt=0)

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")
    service_name: str = Field(default="tsengine")

    @model_validator(mode="after")
    def _check_page_bounds(self) -> EngineSettings:
        if self.default_page_size > self.max_page_size:
            raise ValueError(
                f"default_page_size ({self.default_page_size}) exceeds max_page_size ({self.max_page_size})"
            )
        return self


_settings: EngineSettings | None = None


def get_settings(*, _force_reload: bool = False) -> EngineSettings:
    """Load, validate and cache the process-wide settings."""
    global _settings
    if _settings is None or _force_reload:
        _settings = EngineSettings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings (tests, CLI overrides)."""
    global _settings
    _settings = None
