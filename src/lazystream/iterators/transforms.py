"""One-upstream combinators: map, filter, take, skip, batch, error handling.

Each wraps a single upstream iterator and pulls from it only as far as one
output pull requires. Loops replace recursion wherever a single output may
need many upstream pulls (filter, skip, error recovery), so long discard
runs cannot exhaust the stack.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from typing import Callable, Generic, TypeVar

from lazystream.foundation.errors import InvalidArgumentError
from lazystream.runtime.observability import get_logger

from .base import LazyIterator
from .result import PullResult, pull_done, pull_value

T = TypeVar("T")
U = TypeVar("U")

log = get_logger("lazystream.iterators")


def _count_or_none(operation: str, count: int | None) -> int | None:
    """Validate a take/skip count. None and negatives mean unlimited."""
    if count is None:
        return None
    if isinstance(count, bool) or not isinstance(count, int):
        raise InvalidArgumentError.for_operation(operation, f"count must be an int or None, got {count!r}")
    return None if count < 0 else count


class _OneToOneIterator(LazyIterator[U], Generic[T, U]):
    """Base for iterators with exactly one upstream."""

    def __init__(self, upstream: LazyIterator[T]) -> None:
        super().__init__()
        self._upstream = upstream

    def upstreams(self) -> tuple[LazyIterator[object], ...]:
        return (self._upstream,)  # type: ignore[return-value]


class MapIterator(_OneToOneIterator[T, U]):
    """Applies a synchronous projection to each value."""

    def __init__(self, upstream: LazyIterator[T], fn: Callable[[T], U]) -> None:
        super().__init__(upstream)
        self._fn = fn

    async def _serial_next(self) -> PullResult[U]:
        result = await self._upstream.next()
        if result.done:
            return pull_done()
        return pull_value(self._fn(result.value))  # type: ignore[arg-type]


class AsyncMapIterator(_OneToOneIterator[T, U]):
    """Applies an async projection to each value."""

    def __init__(self, upstream: LazyIterator[T], fn: Callable[[T], Awaitable[U]]) -> None:
        super().__init__(upstream)
        self._fn = fn

    def _label(self) -> str:
        return "MapAsync"

    async def _serial_next(self) -> PullResult[U]:
        result = await self._upstream.next()
        if result.done:
            return pull_done()
        return pull_value(await self._fn(result.value))  # type: ignore[arg-type]


class FilterIterator(_OneToOneIterator[T, T]):
    """Passes values satisfying a predicate, preserving order."""

    def __init__(self, upstream: LazyIterator[T], predicate: Callable[[T], bool]) -> None:
        super().__init__(upstream)
        self._predicate = predicate

    async def _serial_next(self) -> PullResult[T]:
        while True:
            result = await self._upstream.next()
            if result.done or self._predicate(result.value):  # type: ignore[arg-type]
                return result


class TakeIterator(_OneToOneIterator[T, T]):
    """Emits at most ``max_count`` values, then done."""

    def __init__(self, upstream: LazyIterator[T], max_count: int) -> None:
        super().__init__(upstream)
        self._max_count = max_count
        self._count = 0

    def _label(self) -> str:
        return f"Take({self._max_count})"

    async def _serial_next(self) -> PullResult[T]:
        if self._count >= self._max_count:
            return pull_done()
        self._count += 1
        return await self._upstream.next()


class SkipIterator(_OneToOneIterator[T, T]):
    """Discards the first ``max_count`` values, then passes the rest."""

    def __init__(self, upstream: LazyIterator[T], max_count: int) -> None:
        super().__init__(upstream)
        self._max_count = max_count
        self._skipped = 0

    def _label(self) -> str:
        return f"Skip({self._max_count})"

    async def _serial_next(self) -> PullResult[T]:
        while self._skipped < self._max_count:
            skipped = await self._upstream.next()
            if skipped.done:
                return skipped
            self._skipped += 1
        return await self._upstream.next()


class BatchIterator(_OneToOneIterator[T, list[T]]):
    """Groups values into lists of ``batch_size``.

    On upstream exhaustion a non-empty partial batch is emitted once;
    an empty one means done immediately.
    """

    def __init__(self, upstream: LazyIterator[T], batch_size: int) -> None:
        if isinstance(batch_size, bool) or not isinstance(batch_size, int) or batch_size <= 0:
            raise InvalidArgumentError.for_operation(
                "batch", f"batch_size must be a positive integer, got {batch_size!r}",
            )
        super().__init__(upstream)
        self._batch_size = batch_size

    def _label(self) -> str:
        return f"Batch({self._batch_size})"

    async def _serial_next(self) -> PullResult[list[T]]:
        batch: list[T] = []
        while len(batch) < self._batch_size:
            result = await self._upstream.next()
            if result.done:
                return pull_value(batch) if batch else pull_done()
            batch.append(result.value)  # type: ignore[arg-type]
        return pull_value(batch)


class ErrorHandlingIterator(_OneToOneIterator[T, T]):
    """Lets a handler decide whether an upstream exception is skipped or re-raised."""

    def __init__(
        self,
        upstream: LazyIterator[T],
        handler: Callable[[Exception], bool] | Callable[[Exception], Awaitable[bool]],
    ) -> None:
        super().__init__(upstream)
        self._handler = handler

    def _label(self) -> str:
        return "HandleErrors"

    async def _serial_next(self) -> PullResult[T]:
        while True:
            try:
                return await self._upstream.next()
            except Exception as e:
                keep_going = self._handler(e)
                if asyncio.iscoroutine(keep_going):
                    keep_going = await keep_going
                if not keep_going:
                    raise
                log.debug("upstream error skipped", iterator=self._upstream.summary(), error=repr(e))
