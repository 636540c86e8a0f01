"""Tests for map, filter, take, skip, batch and error handling."""

from __future__ import annotations

import asyncio
import math

import pytest

from lazystream import (
    ErrorCode,
    InvalidArgumentError,
    iterator_from_incrementing,
    iterator_from_items,
)


# ─────────────────────────────────────────────────────────────────────────────
# map / filter
# ─────────────────────────────────────────────────────────────────────────────


class TestMapFilter:

    @pytest.mark.asyncio
    async def test_filters_elements(self, scrambled) -> None:
        result = await scrambled().filter(lambda x: x % 2 == 0).collect_remaining()
        assert result == [2 * i for i in range(50)]

    @pytest.mark.asyncio
    async def test_sparse_filter_does_not_recurse(self) -> None:
        """A single output pull may discard tens of thousands of values."""
        it = iterator_from_incrementing(0).filter(lambda x: x == 50_000)
        assert (await it.next()).value == 50_000

    @pytest.mark.asyncio
    async def test_filter_rejecting_everything(self, scrambled) -> None:
        assert await scrambled(30).filter(lambda x: False).collect_remaining() == []

    @pytest.mark.asyncio
    async def test_maps_elements(self, scrambled) -> None:
        result = await scrambled().map(lambda x: f"item {x}").collect_remaining()
        assert result == [f"item {i}" for i in range(100)]

    @pytest.mark.asyncio
    async def test_map_async(self) -> None:
        async def slow_square(x: int) -> int:
            await asyncio.sleep(0)
            return x * x

        result = await iterator_from_items([1, 2, 3]).map_async(slow_square).collect_remaining()
        assert result == [1, 4, 9]

    @pytest.mark.asyncio
    async def test_map_error_propagates(self) -> None:
        it = iterator_from_items([1, 0, 2]).map(lambda x: 1 // x)
        assert (await it.next()).value == 1
        with pytest.raises(ZeroDivisionError):
            await it.next()


# ─────────────────────────────────────────────────────────────────────────────
# take / skip
# ─────────────────────────────────────────────────────────────────────────────


class TestTakeSkip:

    @pytest.mark.asyncio
    async def test_take(self, scrambled) -> None:
        assert await scrambled().take(8).collect_remaining() == [0, 1, 2, 3, 4, 5, 6, 7]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("count", [-1, None])
    async def test_take_negative_or_none_is_pass_through(self, scrambled, count) -> None:
        base = scrambled()
        assert await base.take(count).collect_remaining() == base.data

    @pytest.mark.asyncio
    async def test_take_zero_and_take_past_end(self) -> None:
        assert await iterator_from_items([1, 2]).take(0).collect_remaining() == []
        assert await iterator_from_items([1, 2]).take(10).collect_remaining() == [1, 2]

    @pytest.mark.asyncio
    async def test_take_stops_pulling_upstream(self, scrambled) -> None:
        base = scrambled()
        await base.take(3).collect_remaining()
        assert base.pulls == 3

    @pytest.mark.asyncio
    async def test_skip_then_take(self, scrambled) -> None:
        assert await scrambled().skip(88).take(8).collect_remaining() == [88, 89, 90, 91, 92, 93, 94, 95]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("count", [-1, None])
    async def test_skip_negative_or_none_is_pass_through(self, scrambled, count) -> None:
        base = scrambled()
        assert await base.skip(count).collect_remaining() == base.data

    @pytest.mark.asyncio
    async def test_skip_past_end(self) -> None:
        assert await iterator_from_items([1, 2, 3]).skip(5).collect_remaining() == []

    @pytest.mark.asyncio
    async def test_skip_take_on_incrementing(self) -> None:
        k, m = 13, 5
        result = await iterator_from_incrementing(0).skip(k).take(m).collect_remaining()
        assert result == list(range(k, k + m))

    @pytest.mark.parametrize("count", [1.5, "3"])
    def test_non_integer_count_rejected(self, count) -> None:
        with pytest.raises(InvalidArgumentError):
            iterator_from_items([1]).take(count)
        with pytest.raises(InvalidArgumentError):
            iterator_from_items([1]).skip(count)


# ─────────────────────────────────────────────────────────────────────────────
# batch
# ─────────────────────────────────────────────────────────────────────────────


class TestBatch:

    @pytest.mark.asyncio
    async def test_batches_elements(self, scrambled) -> None:
        result = await scrambled().batch(8).collect_remaining()
        assert len(result) == 13
        for i in range(12):
            assert result[i] == [i * 8 + k for k in range(8)]
        assert result[12] == [96, 97, 98, 99]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(("n", "k"), [(10, 5), (7, 3), (1, 4)])
    async def test_batch_sizes(self, n: int, k: int) -> None:
        result = await iterator_from_incrementing(0).take(n).batch(k).collect_remaining()
        assert len(result) == math.ceil(n / k)
        assert all(len(b) == k for b in result[: n // k])
        if n % k:
            assert len(result[-1]) == n % k
        assert [x for b in result for x in b] == list(range(n))

    @pytest.mark.asyncio
    async def test_batch_of_empty_stream(self) -> None:
        it = iterator_from_items([]).batch(4)
        assert (await it.next()).done

    @pytest.mark.asyncio
    async def test_trailing_batch_then_done(self) -> None:
        it = iterator_from_items([1, 2, 3]).batch(2)
        assert (await it.next()).value == [1, 2]
        assert (await it.next()).value == [3]
        assert (await it.next()).done
        assert (await it.next()).done

    @pytest.mark.parametrize("size", [0, -3, 2.5, True])
    def test_invalid_batch_size_fails_at_construction(self, size) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            iterator_from_items([1, 2]).batch(size)
        assert exc_info.value.code == ErrorCode.INVALID_ARGUMENT
        assert isinstance(exc_info.value, ValueError)


# ─────────────────────────────────────────────────────────────────────────────
# handle_errors
# ─────────────────────────────────────────────────────────────────────────────


class TestHandleErrors:

    @staticmethod
    def _fragile(x: int) -> int:
        if x % 3 == 0:
            raise ValueError(f"bad {x}")
        return x

    @pytest.mark.asyncio
    async def test_handler_skips_failed_pulls(self) -> None:
        errors: list[Exception] = []

        def handler(e: Exception) -> bool:
            errors.append(e)
            return True

        it = iterator_from_incrementing(0).take(7).map(self._fragile).handle_errors(handler)
        assert await it.collect_remaining() == [1, 2, 4, 5]
        assert [str(e) for e in errors] == ["bad 0", "bad 3", "bad 6"]

    @pytest.mark.asyncio
    async def test_handler_can_reraise(self) -> None:
        it = iterator_from_incrementing(1).map(self._fragile).handle_errors(lambda e: False)
        assert await it.take(2).collect_remaining() == [1, 2]
        with pytest.raises(ValueError, match="bad 3"):
            await it.next()

    @pytest.mark.asyncio
    async def test_async_handler(self) -> None:
        async def handler(e: Exception) -> bool:
            return isinstance(e, ValueError)

        it = iterator_from_incrementing(0).take(4).map(self._fragile).handle_errors(handler)
        assert await it.collect_remaining() == [1, 2]
