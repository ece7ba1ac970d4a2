"""Tests for dts.core.config.settings."""

import pytest
from pydantic import ValidationError

from dts.core.config import DtsSettings, clear_settings_cache, get_settings


class TestDtsSettings:
    def test_defaults(self, monkeypatch):
        for key in ("DTS_DATABASE_URL", "DTS_LOG_LEVEL", "DTS_LOG_FORMAT"):
            monkeypatch.delenv(key, raising=False)
        s = DtsSettings(_env_file=None)
        assert s.database_url == "sqlite:///data/dts.db"
        assert s.log_level == "INFO"
        assert s.log_format == "console"
        assert s.is_sqlite

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("DTS_DATABASE_URL", "postgresql+psycopg://u@h/db")
        monkeypatch.setenv("DTS_LOG_LEVEL", "debug")
        s = DtsSettings(_env_file=None)
        assert s.database_url.startswith("postgresql")
        assert not s.is_sqlite
        assert s.log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            DtsSettings(_env_file=None, log_level="loud")

    def test_invalid_log_format(self):
        with pytest.raises(ValidationError):
            DtsSettings(_env_file=None, log_format="xml")


class TestSettingsCache:
    def test_cached(self):
        assert get_settings() is get_settings()

    def test_force_reload_and_clear(self, monkeypatch):
        first = get_settings()
        monkeypatch.setenv("DTS_SERVICE_NAME", "other")
        assert get_settings() is first
        reloaded = get_settings(_force_reload=True)
        assert reloaded.service_name == "other"
        clear_settings_cache()
        assert get_settings() is not reloaded
