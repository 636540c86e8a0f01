"""Tests for source iterators."""

from __future__ import annotations

import pytest

from lazystream import (
    ErrorCode,
    StreamException,
    iterator_from_function,
    iterator_from_incrementing,
    iterator_from_items,
    pull_done,
    pull_value,
)


class TestFromItems:

    @pytest.mark.asyncio
    async def test_created_from_list(self) -> None:
        assert await iterator_from_items([1, 2, 3, 4, 5, 6]).collect_remaining() == [1, 2, 3, 4, 5, 6]

    @pytest.mark.asyncio
    async def test_input_is_copied(self) -> None:
        items = [1, 2]
        it = iterator_from_items(items)
        items.append(3)
        assert await it.collect_remaining() == [1, 2]

    @pytest.mark.asyncio
    async def test_empty(self) -> None:
        assert await iterator_from_items([]).collect_remaining() == []


class TestFromFunction:

    @pytest.mark.asyncio
    async def test_created_from_function(self) -> None:
        i = -1

        def gen():
            nonlocal i
            i += 1
            return pull_value(i) if i < 7 else pull_done()

        assert await iterator_from_function(gen).collect_remaining() == [0, 1, 2, 3, 4, 5, 6]

    @pytest.mark.asyncio
    async def test_not_called_after_done(self) -> None:
        calls = 0

        def gen():
            nonlocal calls
            calls += 1
            return pull_done()

        it = iterator_from_function(gen)
        for _ in range(3):
            assert (await it.next()).done
        assert calls == 1

    @pytest.mark.asyncio
    async def test_accepts_tuples_and_mappings(self) -> None:
        results = iter([("a", False), {"value": "b", "done": False}, (None, True)])
        assert await iterator_from_function(lambda: next(results)).collect_remaining() == ["a", "b"]

    @pytest.mark.asyncio
    async def test_async_generator_function(self) -> None:
        remaining = [3, 2, 1]

        async def gen():
            return pull_value(remaining.pop()) if remaining else pull_done()

        assert await iterator_from_function(gen).collect_remaining() == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_unrecognized_return_raises(self) -> None:
        it = iterator_from_function(lambda: 42)
        with pytest.raises(StreamException) as exc_info:
            await it.next()
        assert exc_info.value.code == ErrorCode.INVALID_STRUCTURE

    @pytest.mark.asyncio
    async def test_error_propagates_to_caller(self) -> None:
        def gen():
            raise KeyError("missing")

        with pytest.raises(KeyError):
            await iterator_from_function(gen).collect_remaining()


class TestFromIncrementing:

    @pytest.mark.asyncio
    async def test_incrementing_integers(self) -> None:
        assert await iterator_from_incrementing(0).take(7).collect_remaining() == [0, 1, 2, 3, 4, 5, 6]

    @pytest.mark.asyncio
    async def test_continues_from_where_it_stopped(self) -> None:
        it = iterator_from_incrementing(5)
        assert await it.take(2).collect_remaining() == [5, 6]
        # Not restarted in place
        assert (await it.next()).value == 7

    @pytest.mark.asyncio
    async def test_negative_start(self) -> None:
        assert await iterator_from_incrementing(-2).take(4).collect_remaining() == [-2, -1, 0, 1]
