"""Configuration: environment-driven settings for lazystream."""

from .settings import (
    IteratorSettings,
    LazyStreamSettings,
    LoggingSettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "LazyStreamSettings",
    "LoggingSettings",
    "IteratorSettings",
    "get_settings",
    "clear_settings_cache",
]
