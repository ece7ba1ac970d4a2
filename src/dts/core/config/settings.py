"""
Centralized settings for the disaster-tracking human-effects layer.

Manifesto:
    One validated, cached settings object replaces ad-hoc ``os.environ``
    parsing in the CLI and ops modules. ``DtsSettings`` reads ``DTS_*``
    environment variables and an optional ``.env`` file.

Tags:
    dts, configuration, settings, pydantic, caching, validation

Doc-Types:
    api-reference
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DtsSettings(BaseSettings):
    """Human-effects configuration.

    All fields can be set via ``DTS_*`` environment variables (e.g.
    ``DTS_DATABASE_URL=postgresql+psycopg://...``) or through a ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_prefix="DTS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Database ─────────────────────────────────────────────────
    database_url: str = Field(default="sqlite:///data/dts.db")
    database_echo: bool = Field(default=False)

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console", description="json | console")
    service_name: str = Field(default="dts")

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        value = value.upper()
        if value not in ("DEBUG", "INFO", "WARNING", "ERROR"):
            raise ValueError(f"invalid log level: {value}")
        return value

    @field_validator("log_format")
    @classmethod
    def _known_format(cls, value: str) -> str:
        value = value.lower()
        if value not in ("json", "console"):
            raise ValueError(f"invalid log format: {value}")
        return value

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


# ── Settings factory with caching ────────────────────────────────────────

_settings_cache: dict[str, DtsSettings] = {}


def get_settings(*, _force_reload: bool = False) -> DtsSettings:
    """Load, validate, and cache a :class:`DtsSettings` instance."""
    if not _force_reload and "default" in _settings_cache:
        return _settings_cache["default"]
    settings = DtsSettings()
    _settings_cache["default"] = settings
    return settings


def clear_settings_cache() -> None:
    """Clear the settings cache (primarily for testing)."""
    _settings_cache.clear()
