"""Configuration management using pydantic-settings."""

from .settings import (
    CacheSettings,
    GatewaySettings,
    LoggingSettings,
    ToolgateSettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "CacheSettings",
    "GatewaySettings",
    "LoggingSettings",
    "ToolgateSettings",
    "clear_settings_cache",
    "get_settings",
]
