"""Error handling for lazystream.

- ErrorCode: Machine-readable error classification
- StreamError/StreamException: Structured error payload and its exception
- InvalidArgumentError/InvalidStructureError: Builtin-compatible subclasses
"""

from .errors import (
    ErrorCode,
    InvalidArgumentError,
    InvalidStructureError,
    StreamError,
    StreamException,
)

__all__ = [
    "ErrorCode", "StreamError", "StreamException",
    "InvalidArgumentError", "InvalidStructureError",
]
