"""Multi-stream combinators: sequential concatenation and structural zip.

Concatenation drains one stream completely before touching the next.

Zip walks its input structure once, at construction, into a small tagged
tree (``ZipLeaf`` / ``ZipSequence`` / ``ZipMapping``). Each output pull then
fans out one ``next()`` per distinct upstream, awaits them all, and rebuilds
an element shaped exactly like the input. The first upstream to report done
ends the zip; the others are not drained.

Zip never merges the mappings it produces. To flatten
``[{"a": 1}, {"b": 2}]`` into ``{"a": 1, "b": 2}``, map the zip explicitly:

    >>> zipped = iterator_from_zipped([a, b]).map(merge_mappings)
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import TypeAlias, TypeVar

from lazystream.foundation.errors import InvalidArgumentError, InvalidStructureError
from lazystream.runtime.observability import get_logger

from .base import LazyIterator
from .result import PullResult, pull_done, pull_value
from .sources import PullFunction, iterator_from_function

T = TypeVar("T")

log = get_logger("lazystream.iterators")


# ─────────────────────────────────────────────────────────────────────────────
# Concatenation
# ─────────────────────────────────────────────────────────────────────────────


class ChainedIterator(LazyIterator[T]):
    """Concatenates the iterators produced by an outer iterator, in order."""

    def __init__(self, streams: LazyIterator[LazyIterator[T]]) -> None:
        super().__init__()
        self._streams = streams
        self._current: LazyIterator[T] | None = None
        self._advanced = 0

    def _label(self) -> str:
        return "Concatenated"

    def upstreams(self) -> tuple[LazyIterator[object], ...]:
        ups: tuple[LazyIterator[object], ...] = (self._streams,)  # type: ignore[assignment]
        return ups if self._current is None else (*ups, self._current)  # type: ignore[return-value]

    async def _serial_next(self) -> PullResult[T]:
        while True:
            if self._current is None:
                outer = await self._streams.next()
                if outer.done:
                    return pull_done()
                if not isinstance(outer.value, LazyIterator):
                    raise InvalidStructureError.for_operation(
                        "concatenate", f"expected a LazyIterator stream, got {type(outer.value).__name__}",
                    )
                self._current = outer.value
                self._advanced += 1
                log.debug("concatenation advanced", stream=self._advanced, iterator=self._current.summary())
            result = await self._current.next()
            if not result.done:
                return result
            self._current = None


def iterator_from_concatenated(streams: LazyIterator[LazyIterator[T]]) -> LazyIterator[T]:
    """Concatenate a stream of streams.

    Each inner iterator is drained before the next one is pulled from
    ``streams``.

    Example:
        >>> outer = iterator_from_items([iterator_from_items([1, 2]), iterator_from_items([3])])
        >>> await iterator_from_concatenated(outer).collect_remaining()
        [1, 2, 3]
    """
    return ChainedIterator(streams)


def iterator_from_concatenated_function(fn: PullFunction, count: int | None = None) -> LazyIterator[T]:
    """Concatenate the iterators returned by successive calls to ``fn``.

    ``fn`` is called at most ``count`` times (unlimited when None or
    negative), stopping early if it reports done. Each result is drained
    before the next call.
    """
    return iterator_from_concatenated(iterator_from_function(fn).take(count))


# ─────────────────────────────────────────────────────────────────────────────
# Zip
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(slots=True, frozen=True)
class ZipLeaf:
    """Position filled by the value of upstream ``index``."""
    index: int


@dataclass(slots=True, frozen=True)
class ZipSequence:
    """Ordered node; rebuilt as ``kind`` (list or tuple)."""
    children: tuple[ZipNode, ...]
    kind: type = list


@dataclass(slots=True, frozen=True)
class ZipMapping:
    """Named node; rebuilt as a dict with the original key order."""
    keys: tuple[object, ...]
    children: tuple[ZipNode, ...]


ZipNode: TypeAlias = "ZipLeaf | ZipSequence | ZipMapping"

# A LazyIterator, or a list/tuple/mapping of ZipStructures
ZipStructure: TypeAlias = "LazyIterator[object] | list[ZipStructure] | tuple[ZipStructure, ...] | Mapping[object, ZipStructure]"


def build_zip_tree(
    structure: ZipStructure,
    upstreams: list[LazyIterator[object]],
    _seen: dict[int, int] | None = None,
) -> ZipNode:
    """Walk ``structure`` into a template, appending distinct iterators to ``upstreams``.

    The same iterator instance appearing at several positions gets one
    upstream slot, so it is pulled once per output element.

    Raises:
        InvalidStructureError: On anything but iterators, lists, tuples and mappings
    """
    seen = {} if _seen is None else _seen
    match structure:
        case LazyIterator():
            if (index := seen.get(id(structure))) is None:
                index = seen[id(structure)] = len(upstreams)
                upstreams.append(structure)
            return ZipLeaf(index)
        case Mapping():
            return ZipMapping(
                tuple(structure.keys()),
                tuple(build_zip_tree(v, upstreams, seen) for v in structure.values()),
            )
        case list() | tuple():
            return ZipSequence(
                tuple(build_zip_tree(v, upstreams, seen) for v in structure),
                tuple if isinstance(structure, tuple) else list,
            )
    raise InvalidStructureError.for_operation(
        "zip", f"leaves must be LazyIterators, got {type(structure).__name__}",
    )


def rebuild(node: ZipNode, values: list[object]) -> object:
    """Substitute upstream values into the template."""
    match node:
        case ZipLeaf(index):
            return values[index]
        case ZipSequence(children, kind):
            return kind(rebuild(child, values) for child in children)
        case ZipMapping(keys, children):
            return {k: rebuild(child, values) for k, child in zip(keys, children)}
    raise InvalidStructureError.for_operation("zip", f"unknown template node {node!r}")


class ZipIterator(LazyIterator[object]):
    """Structural parallel join; ends with the shortest upstream."""

    def __init__(self, structure: ZipStructure) -> None:
        super().__init__()
        self._upstreams: list[LazyIterator[object]] = []
        self._template = build_zip_tree(structure, self._upstreams)
        if not self._upstreams:
            raise InvalidArgumentError.for_operation("zip", "structure contains no iterators")

    @property
    def template(self) -> ZipNode:
        return self._template

    def _label(self) -> str:
        return f"Zip({len(self._upstreams)})"

    def upstreams(self) -> tuple[LazyIterator[object], ...]:
        return tuple(self._upstreams)

    async def _serial_next(self) -> PullResult[object]:
        # Dispatch every pull before awaiting any
        pulls = [asyncio.ensure_future(up.next()) for up in self._upstreams]
        try:
            results = await asyncio.gather(*pulls)
        except BaseException:
            for pull in pulls:
                pull.cancel()
            # Let cancelled siblings unwind and release their locks
            await asyncio.gather(*pulls, return_exceptions=True)
            raise
        for index, result in enumerate(results):
            if result.done:
                log.debug("zip exhausted", leaf=index, iterator=self._upstreams[index].summary())
                return pull_done()
        return pull_value(rebuild(self._template, [r.value for r in results]))


def iterator_from_zipped(structure: ZipStructure) -> LazyIterator[object]:
    """Zip a (possibly nested) list, tuple or mapping of iterators.

    Each output element mirrors the shape of ``structure`` with every
    iterator replaced by its next value. Mappings are never merged; see
    ``merge_mappings``.

    Raises:
        InvalidStructureError: If a leaf is not a LazyIterator
        InvalidArgumentError: If the structure holds no iterators

    Example:
        >>> a = iterator_from_items([1, 2, 3])
        >>> b = iterator_from_items(["x", "y"])
        >>> await iterator_from_zipped({"n": a, "s": b}).collect_remaining()
        [{'n': 1, 's': 'x'}, {'n': 2, 's': 'y'}]
    """
    return ZipIterator(structure)


def merge_mappings(elements: Iterable[Mapping[object, object]]) -> dict[object, object]:
    """Fold mappings into one dict; later keys overwrite earlier ones.

    Collisions are not detected. Meant to be passed to ``map`` after a zip
    when a flat record is wanted.
    """
    merged: dict[object, object] = {}
    for element in elements:
        merged.update(element)
    return merged
