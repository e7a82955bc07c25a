"""Shared pytest fixtures for the barrier timer test suite."""
from __future__ import annotations

import os
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Iterator

import pytest
import structlog

from barrier_timer.runner import timer
from barrier_timer.runner.latch import CountDownLatch
from barrier_timer.runner.timeline import TimelineRecorder

os.environ.setdefault("MPLBACKEND", "Agg")


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    """Undo any structlog configuration a test applied."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def pool() -> Iterator[ThreadPoolExecutor]:
    """A pool with room for every concurrency level used in the tests."""
    executor = ThreadPoolExecutor(max_workers=32, thread_name_prefix="test-worker")
    try:
        yield executor
    finally:
        executor.shutdown(wait=True)


@pytest.fixture
def recorder() -> TimelineRecorder:
    return TimelineRecorder()


class CountingLatch(CountDownLatch):
    """Latch that remembers how many times ``count_down`` was called."""

    def __init__(self, count: int) -> None:
        super().__init__(count)
        self.calls = 0
        self._calls_lock = threading.Lock()

    def count_down(self) -> None:
        with self._calls_lock:
            self.calls += 1
        super().count_down()


@pytest.fixture
def counting_latches(monkeypatch: pytest.MonkeyPatch) -> list[CountingLatch]:
    """Swap the timer's latches for counting ones; returns [readiness, completion]."""
    created: list[CountingLatch] = []

    def factory(count: int) -> CountingLatch:
        latch = CountingLatch(count)
        created.append(latch)
        return latch

    monkeypatch.setattr(timer, "CountDownLatch", factory)
    return created
