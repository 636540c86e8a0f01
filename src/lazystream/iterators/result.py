"""Pull result type shared by every iterator.

A pull resolves to either a value (``done=False``) or end-of-stream
(``done=True``, ``value=None``). Sources built from user functions may hand
back looser shapes; ``as_pull_result`` normalizes them.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Generic, TypeVar

from lazystream.foundation.errors import ErrorCode, StreamException

T = TypeVar("T")


@dataclass(slots=True, frozen=True)
class PullResult(Generic[T]):
    """Outcome of a single pull.

    Attributes:
        value: The produced element, ``None`` when done
        done: End-of-stream flag; terminal once observed
    """
    value: T | None = None
    done: bool = False

    def __iter__(self):
        # Allows ``value, done = await it.next()``
        yield self.value
        yield self.done


# Shared end-of-stream instance
DONE: PullResult[object] = PullResult(None, True)


def pull_value(value: T) -> PullResult[T]:
    """Create a non-terminal result carrying ``value``."""
    return PullResult(value, False)


def pull_done() -> PullResult[T]:
    """Return the end-of-stream result."""
    return DONE  # type: ignore[return-value]


def as_pull_result(raw: object) -> PullResult[object]:
    """Normalize a generator function's return into a ``PullResult``.

    Accepts a ``PullResult``, a ``(value, done)`` pair, or a mapping with
    ``value``/``done`` keys.

    Raises:
        StreamException: If ``raw`` has none of the accepted shapes
    """
    match raw:
        case PullResult():
            return raw
        case (value, done):
            return DONE if done else PullResult(value, False)
        case Mapping() if "done" in raw:
            return DONE if raw["done"] else PullResult(raw.get("value"), False)
    raise StreamException.create(
        "iterator_from_function",
        f"generator returned {type(raw).__name__}, expected a PullResult, (value, done) pair or mapping",
        ErrorCode.INVALID_STRUCTURE,
    )
