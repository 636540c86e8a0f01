"""Pull-based asynchronous iterators and their combinators.

Sources:
    - iterator_from_items: Fixed sequence
    - iterator_from_function: One generator call per pull
    - iterator_from_incrementing: Infinite counter

Composition:
    - iterator_from_concatenated: Stream of streams, drained in order
    - iterator_from_concatenated_function: Streams produced by a function
    - iterator_from_zipped: Structural parallel join (shortest wins)

Instance combinators (map, filter, batch, take, skip, concatenate, ...)
live on LazyIterator.
"""

from .base import LazyIterator
from .composition import (
    ChainedIterator,
    ZipIterator,
    ZipLeaf,
    ZipMapping,
    ZipSequence,
    build_zip_tree,
    iterator_from_concatenated,
    iterator_from_concatenated_function,
    iterator_from_zipped,
    merge_mappings,
)
from .result import DONE, PullResult, as_pull_result, pull_done, pull_value
from .sources import (
    FunctionCallIterator,
    IncrementingIterator,
    ItemsIterator,
    iterator_from_function,
    iterator_from_incrementing,
    iterator_from_items,
)
from .transforms import (
    AsyncMapIterator,
    BatchIterator,
    ErrorHandlingIterator,
    FilterIterator,
    MapIterator,
    SkipIterator,
    TakeIterator,
)

__all__ = [
    # Core
    "LazyIterator", "PullResult", "DONE", "pull_value", "pull_done", "as_pull_result",
    # Sources
    "iterator_from_items", "iterator_from_function", "iterator_from_incrementing",
    "ItemsIterator", "FunctionCallIterator", "IncrementingIterator",
    # Transforms
    "MapIterator", "AsyncMapIterator", "FilterIterator", "TakeIterator", "SkipIterator",
    "BatchIterator", "ErrorHandlingIterator",
    # Composition
    "iterator_from_concatenated", "iterator_from_concatenated_function", "iterator_from_zipped",
    "ChainedIterator", "ZipIterator", "ZipLeaf", "ZipSequence", "ZipMapping", "build_zip_tree",
    "merge_mappings",
]
