"""Measurement record and the per-worker timeline recorder."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Callable

from barrier_timer.runner.errors import WorkFailure, WorkerInterrupted

COORDINATOR = -1

# Worker phases
READY = "ready"
START = "start"
FINISH = "finish"
# Coordinator phases
GATE_OPEN = "gate_open"
ALL_DONE = "all_done"


@dataclass(frozen=True)
class TimelineEvent:
    """One phase transition of a worker (or of the coordinator, worker -1)."""

    worker: int
    phase: str
    at_ns: int


class TimelineRecorder:
    """Thread-safe recorder of :class:`TimelineEvent` for one measurement.

    Pass an instance to :func:`barrier_timer.runner.timer.measure` to see
    when each worker became ready, started and finished the work, relative
    to the gate opening.
    """

    def __init__(self, clock: Callable[[], int] = time.perf_counter_ns) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._events: list[TimelineEvent] = []

    def record(self, worker: int, phase: str, at_ns: int | None = None) -> None:
        at = self._clock() if at_ns is None else at_ns
        with self._lock:
            self._events.append(TimelineEvent(worker, phase, at))

    def events(self) -> list[TimelineEvent]:
        with self._lock:
            return sorted(self._events, key=lambda e: e.at_ns)

    def phase_times(self, phase: str) -> dict[int, int]:
        """Map worker index -> timestamp for every event of *phase*."""
        return {e.worker: e.at_ns for e in self.events() if e.phase == phase}

    def count(self, phase: str) -> int:
        with self._lock:
            return sum(1 for e in self._events if e.phase == phase)


@dataclass(frozen=True)
class Measurement:
    """Outcome of a single barrier-timed run."""

    concurrency: int
    elapsed_ns: int
    failures: tuple[WorkFailure | WorkerInterrupted, ...] = ()
    events: tuple[TimelineEvent, ...] = field(default=(), repr=False)

    @property
    def elapsed(self) -> timedelta:
        return timedelta(microseconds=self.elapsed_ns / 1_000)

    @property
    def elapsed_ms(self) -> float:
        return self.elapsed_ns / 1_000_000

    @property
    def ok(self) -> bool:
        return not self.failures

    def raise_for_failures(self) -> None:
        """Raise every recorded failure as one ``ExceptionGroup``."""
        if self.failures:
            raise ExceptionGroup(
                f"{len(self.failures)} of {self.concurrency} workers failed",
                list(self.failures),
            )

    def to_dict(self) -> dict:
        return {
            "concurrency": self.concurrency,
            "elapsed_ns": self.elapsed_ns,
            "elapsed_ms": round(self.elapsed_ms, 3),
            "failures": [
                {"worker": f.worker, "error": str(f), "type": type(f).__name__}
                for f in self.failures
            ],
            "events": [
                {"worker": e.worker, "phase": e.phase, "at_ns": e.at_ns}
                for e in self.events
            ],
        }
