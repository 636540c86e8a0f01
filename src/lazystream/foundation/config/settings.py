"""Environment-based configuration using pydantic-settings.

Example:
    >>> from lazystream.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.logging.level
    'WARNING'

    # Or with environment variables:
    # LAZYSTREAM_LOG_LEVEL=DEBUG
    # LAZYSTREAM_ITERATOR_TRACE_PULLS=true
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LAZYSTREAM_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    format: Literal["console", "json", "none"] = "console"
    colors: bool | None = Field(default=None, description="Force console colors on/off, None = auto-detect")

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, v: str) -> str:
        """Accept lowercase level names from the environment."""
        return v.strip().upper() if isinstance(v, str) else v


class IteratorSettings(BaseSettings):
    """Iterator diagnostics."""

    model_config = SettingsConfigDict(
        env_prefix="LAZYSTREAM_ITERATOR_",
        extra="ignore",
    )

    trace_pulls: bool = Field(default=False, description="Log a debug event for every pull")


class LazyStreamSettings(BaseSettings):
    """Root settings for lazystream.

    Loads configuration from environment variables with LAZYSTREAM_ prefix.

    Example environment variables:
        LAZYSTREAM_DEBUG=true
        LAZYSTREAM_LOG_LEVEL=DEBUG
        LAZYSTREAM_LOG_FORMAT=json
        LAZYSTREAM_ITERATOR_TRACE_PULLS=true
    """

    model_config = SettingsConfigDict(
        env_prefix="LAZYSTREAM_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    debug: bool = Field(default=False, description="Enable debug mode")

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    iterator: IteratorSettings = Field(default_factory=IteratorSettings)

    @computed_field
    @property
    def effective_log_level(self) -> str:
        """Debug mode forces DEBUG logging."""
        return "DEBUG" if self.debug else self.logging.level


@lru_cache(maxsize=1)
def get_settings() -> LazyStreamSettings:
    """Get the global settings instance (cached)."""
    return LazyStreamSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing).

    After calling this, the next get_settings() call will
    reload configuration from environment.
    """
    get_settings.cache_clear()
