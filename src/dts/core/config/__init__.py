"""Centralized configuration.

Quick start::

    from dts.core.config import get_settings

    settings = get_settings()
    print(settings.database_url)
"""

from .settings import DtsSettings, clear_settings_cache, get_settings

__all__ = [
    "DtsSettings",
    "get_settings",
    "clear_settings_cache",
]
