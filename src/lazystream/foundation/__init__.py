"""Foundation layer: configuration and error types."""

from .config import LazyStreamSettings, clear_settings_cache, get_settings
from .errors import ErrorCode, InvalidArgumentError, InvalidStructureError, StreamError, StreamException

__all__ = [
    "LazyStreamSettings", "get_settings", "clear_settings_cache",
    "ErrorCode", "StreamError", "StreamException", "InvalidArgumentError", "InvalidStructureError",
]
