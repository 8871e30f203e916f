"""Environment-based configuration using pydantic-settings.

Provides type-safe, validated defaults for the caching provider, the logging
middleware and the gateway. Explicit constructor arguments always win over
these values.

Example:
    >>> from toolgate.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.cache.discovery_ttl
    3600

    # Or with environment variables:
    # TOOLGATE_CACHE_RESULT_TTL=60
    # TOOLGATE_LOG_LEVEL=DEBUG
    # TOOLGATE_GATEWAY_TOOL_PREFIX=acme
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, NonNegativeInt, PositiveInt, SecretStr, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CacheSettings(BaseSettings):
    """Caching provider defaults."""

    model_config = SettingsConfigDict(
        env_prefix="TOOLGATE_CACHE_",
        extra="ignore",
    )

    discovery_ttl: NonNegativeInt = Field(default=3600, description="Tool list TTL in seconds")
    result_ttl: NonNegativeInt = Field(default=300, description="Read-only result TTL in seconds")
    prefix: str = Field(default="toolgate:", description="Key prefix for namespacing")
    max_entries: PositiveInt = Field(default=1000, description="MemoryStore capacity")
    redis_url: SecretStr | None = Field(default=None, description="Redis URL for a shared store")

    @computed_field
    @property
    def backend(self) -> Literal["memory", "redis"]:
        """Determine cache store from configuration."""
        return "redis" if self.redis_url else "memory"


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="TOOLGATE_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["console", "json", "none"] = "console"
    log_arguments: bool = False
    log_results: bool = False


class GatewaySettings(BaseSettings):
    """Gateway and composition defaults."""

    model_config = SettingsConfigDict(
        env_prefix="TOOLGATE_GATEWAY_",
        extra="ignore",
    )

    tool_prefix: str | None = Field(default=None, description="Prefix for the three gateway tool names")
    prefixed: bool = Field(default=True, description="Namespace composite tool names by provider key")
    strict_validation: bool = Field(default=False, description="Reject unknown properties on object schemas")


class ToolgateSettings(BaseSettings):
    """Root settings for toolgate.

    Loads configuration from environment variables with TOOLGATE_ prefix.
    Supports nested configuration and .env files.
    """

    model_config = SettingsConfigDict(
        env_prefix="TOOLGATE_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    cache: CacheSettings = Field(default_factory=CacheSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    gateway: GatewaySettings = Field(default_factory=GatewaySettings)


@lru_cache(maxsize=1)
def get_settings() -> ToolgateSettings:
    """Get the global settings instance (cached)."""
    return ToolgateSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache so the next get_settings() re-reads the environment."""
    get_settings.cache_clear()
