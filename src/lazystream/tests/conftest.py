"""Shared fixtures for iterator tests."""

from __future__ import annotations

import asyncio
import random
from collections.abc import Callable, Iterator

import pytest

from lazystream import LazyIterator, PullResult, clear_settings_cache, pull_done, pull_value
from lazystream.runtime.observability import NoOpRenderer
from lazystream.runtime.observability import logging as obs_logging


class ScrambledIntegerIterator(LazyIterator[int]):
    """Yields 0..length-1, sleeping on roughly one pull in ten.

    The sleeps scramble the order in which pulls complete, so tests built on
    it show that combinators still consume streams in order.
    """

    def __init__(self, length: int = 100) -> None:
        super().__init__()
        self.length = length
        self.data = list(range(length))
        self.pulls = 0
        self._index = 0

    async def _serial_next(self) -> PullResult[int]:
        self.pulls += 1
        if self._index >= self.length:
            return pull_done()
        value = self.data[self._index]
        self._index += 1
        if random.random() < 0.1:
            await asyncio.sleep(0.001)
        return pull_value(value)


@pytest.fixture
def scrambled() -> Callable[..., ScrambledIntegerIterator]:
    """Factory for ScrambledIntegerIterator instances."""
    return ScrambledIntegerIterator


@pytest.fixture(autouse=True)
def _fresh_settings() -> Iterator[None]:
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def _silent_logging() -> Iterator[None]:
    """Start every test with a silent renderer and the settings-derived level."""
    renderer_token = obs_logging._renderer.set(NoOpRenderer())
    level_token = obs_logging._default_level.set(None)
    yield
    obs_logging._default_level.reset(level_token)
    obs_logging._renderer.reset(renderer_token)
