"""LazyIterator: the asynchronous pull contract every stream implements.

A consumer awaits ``next()`` and receives a ``PullResult``. Subclasses only
implement ``_serial_next()``; the base class wraps it with the guarantees
every iterator shares:

    - Serialized pulls: calls on one instance resolve in call order, never
      in completion order, even when several are awaited at once
    - Terminal done: once a pull reports done, every later pull does too
    - Chaining: map/filter/batch/take/skip/concatenate return new iterators
    - Collection: collect_remaining/resolve_fully/resolve_while/for_each

Example:
    >>> it = iterator_from_incrementing(0).skip(2).take(3).map(lambda x: x * 10)
    >>> await it.collect_remaining()
    [20, 30, 40]
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Awaitable
from typing import TYPE_CHECKING, Callable, Generic, TypeVar

from lazystream.foundation.config import get_settings
from lazystream.runtime.observability import get_logger

from .result import PullResult, pull_done

if TYPE_CHECKING:
    from types import TracebackType

T = TypeVar("T")
U = TypeVar("U")

log = get_logger("lazystream.iterators")


class LazyIterator(ABC, Generic[T]):
    """Abstract pull-based asynchronous iterator.

    Subclasses implement ``_serial_next()``, which is never entered
    concurrently for the same instance, and report their upstream iterators
    through ``upstreams()`` so that ``aclose()`` and ``summary()`` can walk
    the chain.
    """

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._finished = False
        self._closed = False

    # ─────────────────────────────────────────────────────────────────
    # Pull contract
    # ─────────────────────────────────────────────────────────────────

    @abstractmethod
    async def _serial_next(self) -> PullResult[T]:
        """Produce the next result. Called with the instance lock held."""

    async def next(self) -> PullResult[T]:
        """Pull the next element.

        Returns:
            ``PullResult(value, False)`` or the end-of-stream result

        Raises:
            Exception: Whatever the underlying source or transform raised
        """
        async with self._lock:
            if self._finished:
                return pull_done()
            result = await self._serial_next()
            if result.done:
                self._finished = True
        if get_settings().iterator.trace_pulls:
            log.debug("pull", iterator=self.summary(), done=result.done)
        return result

    def __aiter__(self) -> AsyncIterator[T]:
        return self

    async def __anext__(self) -> T:
        result = await self.next()
        if result.done:
            raise StopAsyncIteration
        return result.value  # type: ignore[return-value]

    # ─────────────────────────────────────────────────────────────────
    # Chain introspection & lifecycle
    # ─────────────────────────────────────────────────────────────────

    def upstreams(self) -> tuple[LazyIterator[object], ...]:
        """Iterators this one pulls from, in visitation order."""
        return ()

    def _label(self) -> str:
        return type(self).__name__.removesuffix("Iterator")

    def summary(self) -> str:
        """Readable description of the chain, outermost first."""
        ups = self.upstreams()
        if not ups:
            return self._label()
        if len(ups) == 1:
            return f"{self._label()} <- {ups[0].summary()}"
        return f"{self._label()} <- [{'; '.join(u.summary() for u in ups)}]"

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.summary()}>"

    @property
    def closed(self) -> bool:
        return self._closed

    async def aclose(self) -> None:
        """Mark this iterator terminal and close its upstreams. Idempotent."""
        if self._closed:
            return
        self._closed = True
        self._finished = True
        log.debug("iterator closed", iterator=self._label())
        for upstream in self.upstreams():
            await upstream.aclose()

    async def __aenter__(self) -> LazyIterator[T]:
        return self

    async def __aexit__(self, exc_type: type[BaseException] | None, exc_val: BaseException | None,
                        exc_tb: TracebackType | None) -> None:
        await self.aclose()

    # ─────────────────────────────────────────────────────────────────
    # Collectors
    # ─────────────────────────────────────────────────────────────────

    async def collect_remaining(self) -> list[T]:
        """Pull until done and return every value in production order.

        The first exception raised by any pull propagates; values collected
        before it are discarded.
        """
        values: list[T] = []
        while not (result := await self.next()).done:
            values.append(result.value)  # type: ignore[arg-type]
        return values

    async def resolve_fully(self) -> None:
        """Pull until done, discarding values (for side-effecting streams)."""
        while not (await self.next()).done:
            pass

    async def resolve_while(self, predicate: Callable[[T], bool]) -> None:
        """Pull until done or until ``predicate`` rejects a value.

        The rejected value is consumed.
        """
        while not (result := await self.next()).done:
            if not predicate(result.value):  # type: ignore[arg-type]
                return

    async def for_each(self, fn: Callable[[T], object] | Callable[[T], Awaitable[object]]) -> None:
        """Apply ``fn`` to every remaining value; ``fn`` may be async."""
        async for value in self:
            out = fn(value)
            if asyncio.iscoroutine(out):
                await out

    # ─────────────────────────────────────────────────────────────────
    # Combinators
    # ─────────────────────────────────────────────────────────────────

    def map(self, fn: Callable[[T], U]) -> LazyIterator[U]:
        """Project each value through a synchronous ``fn``."""
        from .transforms import MapIterator
        return MapIterator(self, fn)

    def map_async(self, fn: Callable[[T], Awaitable[U]]) -> LazyIterator[U]:
        """Project each value through an async ``fn``."""
        from .transforms import AsyncMapIterator
        return AsyncMapIterator(self, fn)

    def filter(self, predicate: Callable[[T], bool]) -> LazyIterator[T]:
        """Keep only values for which ``predicate`` is true, in order."""
        from .transforms import FilterIterator
        return FilterIterator(self, predicate)

    def batch(self, batch_size: int) -> LazyIterator[list[T]]:
        """Group values into lists of ``batch_size``; the last may be shorter.

        Raises:
            InvalidArgumentError: If ``batch_size`` is not a positive integer
        """
        from .transforms import BatchIterator
        return BatchIterator(self, batch_size)

    def take(self, count: int | None) -> LazyIterator[T]:
        """Limit to the first ``count`` values. Negative or None means no limit."""
        from .transforms import TakeIterator, _count_or_none
        if (n := _count_or_none("take", count)) is None:
            return self
        return TakeIterator(self, n)

    def skip(self, count: int | None) -> LazyIterator[T]:
        """Drop the first ``count`` values. Negative or None means drop nothing."""
        from .transforms import SkipIterator, _count_or_none
        if (n := _count_or_none("skip", count)) is None:
            return self
        return SkipIterator(self, n)

    def concatenate(self, other: LazyIterator[T]) -> LazyIterator[T]:
        """All of this iterator's values, then all of ``other``'s."""
        from .composition import iterator_from_concatenated
        from .sources import iterator_from_items
        return iterator_from_concatenated(iterator_from_items([self, other]))

    def handle_errors(self, handler: Callable[[Exception], bool]) -> LazyIterator[T]:
        """Recover from upstream exceptions.

        ``handler(exc)`` returning True skips the failed pull and pulls
        again; False re-raises.

        Over a zip, a skipped pull drops the values its sibling leaves
        produced in the same round, so the leaves are no longer aligned.
        """
        from .transforms import ErrorHandlingIterator
        return ErrorHandlingIterator(self, handler)
