"""Error types raised and recorded by the barrier timer."""

from __future__ import annotations


class TimerError(Exception):
    """Base class for barrier timer errors."""


class CoordinationError(TimerError):
    """The coordinator could not complete the measurement.

    Raised when the calling thread is interrupted while waiting on a
    counter, when a bounded wait expires, or when the pool refuses work.
    No duration is available when this is raised.
    """


class InsufficientCapacity(CoordinationError):
    """Not every worker reached the start gate before the timeout.

    Almost always means the pool has fewer free workers than the
    requested concurrency.
    """

    def __init__(self, expected: int, ready: int, timeout: float) -> None:
        super().__init__(
            f"only {ready}/{expected} workers became ready within {timeout:g}s "
            f"(pool capacity below concurrency?)"
        )
        self.expected = expected
        self.ready = ready
        self.timeout = timeout


class WorkFailure(TimerError):
    """A work unit raised while running inside worker *worker*."""

    def __init__(self, worker: int, cause: BaseException) -> None:
        super().__init__(f"worker {worker}: {type(cause).__name__}: {cause}")
        self.worker = worker
        self.cause = cause


class WorkerInterrupted(TimerError):
    """Worker *worker* was released from the gate without running the work."""

    def __init__(self, worker: int) -> None:
        super().__init__(f"worker {worker} interrupted before running the work")
        self.worker = worker


__all__ = [
    "CoordinationError",
    "InsufficientCapacity",
    "TimerError",
    "WorkFailure",
    "WorkerInterrupted",
]
