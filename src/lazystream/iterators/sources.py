"""Source iterators: streams that do not pull from another iterator."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from typing import Callable, TypeVar

from .base import LazyIterator
from .result import PullResult, as_pull_result, pull_done, pull_value

T = TypeVar("T")

# Returns a PullResult, a (value, done) pair or a mapping; may be async
PullFunction = Callable[[], object]


class ItemsIterator(LazyIterator[T]):
    """Yields a fixed sequence of items in order."""

    def __init__(self, items: Iterable[T]) -> None:
        super().__init__()
        self._items = list(items)
        self._index = 0

    def _label(self) -> str:
        return f"Items({len(self._items)})"

    async def _serial_next(self) -> PullResult[T]:
        if self._index >= len(self._items):
            return pull_done()
        item = self._items[self._index]
        self._index += 1
        return pull_value(item)


class FunctionCallIterator(LazyIterator[T]):
    """Calls a generator function once per pull.

    The function returns a ``PullResult`` (or a ``(value, done)`` pair, or a
    ``{"value": ..., "done": ...}`` mapping) and may be a coroutine function.
    After it reports done it is never called again.
    """

    def __init__(self, fn: PullFunction) -> None:
        super().__init__()
        self._fn = fn

    def _label(self) -> str:
        return f"Function({getattr(self._fn, '__name__', type(self._fn).__name__)})"

    async def _serial_next(self) -> PullResult[T]:
        raw = self._fn()
        if asyncio.iscoroutine(raw):
            raw = await raw
        return as_pull_result(raw)  # type: ignore[return-value]


class IncrementingIterator(LazyIterator[int]):
    """Yields ``start, start + 1, ...`` without end."""

    def __init__(self, start: int) -> None:
        super().__init__()
        self._start = start
        self._next_value = start

    def _label(self) -> str:
        return f"Incrementing(start={self._start})"

    async def _serial_next(self) -> PullResult[int]:
        value = self._next_value
        self._next_value += 1
        return pull_value(value)


# ─────────────────────────────────────────────────────────────────────────────
# Factory Functions
# ─────────────────────────────────────────────────────────────────────────────

def iterator_from_items(items: Iterable[T]) -> LazyIterator[T]:
    """Create an iterator over a fixed sequence. The sequence is copied.

    Example:
        >>> await iterator_from_items([1, 2, 3]).collect_remaining()
        [1, 2, 3]
    """
    return ItemsIterator(items)


def iterator_from_function(fn: PullFunction) -> LazyIterator[T]:
    """Create an iterator that calls ``fn`` for each pull.

    Example:
        >>> counter = iter(range(3))
        >>> def gen():
        ...     x = next(counter, None)
        ...     return pull_done() if x is None else pull_value(x)
        >>> await iterator_from_function(gen).collect_remaining()
        [0, 1, 2]
    """
    return FunctionCallIterator(fn)


def iterator_from_incrementing(start: int) -> LazyIterator[int]:
    """Create an infinite counter starting at ``start``. Pair with ``take()``."""
    return IncrementingIterator(start)
