"""Shared fixtures for promise_utils tests."""

from __future__ import annotations

import time
from collections.abc import Iterator

import pytest

from promise_utils import clear_settings_cache, reset_lock_registry


@pytest.fixture(autouse=True)
def clean_globals() -> Iterator[None]:
    """Reset the default lock registry and cached settings around each test."""
    reset_lock_registry()
    clear_settings_cache()
    yield
    reset_lock_registry()
    clear_settings_cache()


class Stopwatch:
    """Elapsed wall time in ms since creation."""

    def __init__(self) -> None:
        self._start = time.monotonic()

    @property
    def ms(self) -> float:
        return (time.monotonic() - self._start) * 1000


@pytest.fixture
def stopwatch() -> Stopwatch:
    return Stopwatch()
