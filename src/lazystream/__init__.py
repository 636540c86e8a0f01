"""lazystream - Composable, pull-based asynchronous streams.

A producer hands out one element per awaited pull; combinators wrap it
without ever evaluating ahead of demand.

Quick Start:
    >>> from lazystream import iterator_from_incrementing, iterator_from_zipped
    >>>
    >>> evens = iterator_from_incrementing(0).filter(lambda x: x % 2 == 0)
    >>> await evens.take(4).collect_remaining()
    [0, 2, 4, 6]
    >>>
    >>> batches = iterator_from_incrementing(0).take(10).batch(4)
    >>> await batches.collect_remaining()
    [[0, 1, 2, 3], [4, 5, 6, 7], [8, 9]]

Zipping (shape-preserving, shortest stream wins):
    >>> a = iterator_from_incrementing(0).take(3)
    >>> b = iterator_from_incrementing(0).map(lambda x: x * 10)
    >>> await iterator_from_zipped({"x": a, "y": b}).collect_remaining()
    [{'x': 0, 'y': 0}, {'x': 1, 'y': 10}, {'x': 2, 'y': 20}]

Configuration comes from LAZYSTREAM_* environment variables; see
lazystream.foundation.config.
"""

from __future__ import annotations

__version__ = "0.1.0"

# Configuration
from .foundation.config import LazyStreamSettings, clear_settings_cache, get_settings

# Errors
from .foundation.errors import (
    ErrorCode,
    InvalidArgumentError,
    InvalidStructureError,
    StreamError,
    StreamException,
)

# Iterators
from .iterators import (
    DONE,
    LazyIterator,
    PullResult,
    ZipLeaf,
    ZipMapping,
    ZipSequence,
    iterator_from_concatenated,
    iterator_from_concatenated_function,
    iterator_from_function,
    iterator_from_incrementing,
    iterator_from_items,
    iterator_from_zipped,
    merge_mappings,
    pull_done,
    pull_value,
)

# Logging
from .runtime.observability import configure_logging, get_logger

__all__ = [
    "__version__",
    # Iterators
    "LazyIterator", "PullResult", "DONE", "pull_value", "pull_done",
    "iterator_from_items", "iterator_from_function", "iterator_from_incrementing",
    "iterator_from_concatenated", "iterator_from_concatenated_function", "iterator_from_zipped",
    "ZipLeaf", "ZipSequence", "ZipMapping", "merge_mappings",
    # Errors
    "ErrorCode", "StreamError", "StreamException", "InvalidArgumentError", "InvalidStructureError",
    # Configuration & logging
    "LazyStreamSettings", "get_settings", "clear_settings_cache", "configure_logging", "get_logger",
]
