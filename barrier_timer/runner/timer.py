"""Time a batch of concurrent executions behind a three-phase barrier.

Workers report in on a readiness latch, then park on a start gate. Once
every worker has reported, the coordinator reads the clock and opens the
gate in one step, so the wake-up latency of the coordinator itself never
lands inside the measured interval. A completion latch tells it when the
last worker is done.

Usage::

    with ThreadPoolExecutor(max_workers=10) as pool:
        m = measure(pool, 10, lambda: time.sleep(0.2))
    print(m.elapsed_ms)

The pool must be able to run *concurrency* workers at the same time.
With fewer free workers the barrier can never fill: pass ``timeout`` to
get :class:`InsufficientCapacity` instead of a hang.
"""

from __future__ import annotations

import time
from concurrent.futures import Executor
from typing import Callable

import structlog

from barrier_timer.runner.errors import (
    CoordinationError,
    InsufficientCapacity,
    WorkFailure,
    WorkerInterrupted,
)
from barrier_timer.runner.latch import CountDownLatch, StartGate
from barrier_timer.runner.timeline import (
    ALL_DONE,
    COORDINATOR,
    FINISH,
    GATE_OPEN,
    READY,
    START,
    Measurement,
    TimelineRecorder,
)

_log = structlog.get_logger("barrier_timer")


class _Worker:
    """One dispatched execution of the shared work unit."""

    def __init__(
        self,
        work: Callable[[], object],
        ready: CountDownLatch,
        gate: StartGate,
        done: CountDownLatch,
        failures: list,
        recorder: TimelineRecorder | None,
    ) -> None:
        self._work = work
        self._ready = ready
        self._gate = gate
        self._done = done
        self._failures = failures
        self._recorder = recorder

    def __call__(self, index: int) -> None:
        try:
            self._mark(index, READY)
            self._ready.count_down()
            if not self._gate.wait():
                self._failures.append(WorkerInterrupted(index))
                return
            self._mark(index, START)
            try:
                self._work()
            except Exception as exc:
                self._failures.append(WorkFailure(index, exc))
            except BaseException as exc:
                self._failures.append(WorkFailure(index, exc))
                raise
            finally:
                self._mark(index, FINISH)
        finally:
            self._done.count_down()

    def _mark(self, index: int, phase: str) -> None:
        if self._recorder is not None:
            self._recorder.record(index, phase)


def measure(
    pool: Executor,
    concurrency: int,
    work: Callable[[], object],
    *,
    timeout: float | None = None,
    clock: Callable[[], int] = time.perf_counter_ns,
    recorder: TimelineRecorder | None = None,
) -> Measurement:
    """Run *work* *concurrency* times on *pool* and time the parallel section.

    Failures raised by *work* are collected on the returned
    :class:`Measurement`, they never abort the run. *timeout* (seconds)
    bounds each of the two coordinator waits. *recorder* should use the
    same clock as *clock* so its events line up with the gate opening.

    Raises :class:`CoordinationError` if the calling thread is interrupted
    while dispatching or waiting, the pool rejects a worker, or a bounded
    wait expires. The pool is left running either way.
    """
    if concurrency < 1:
        raise ValueError("concurrency must be >= 1")

    ready = CountDownLatch(concurrency)
    gate = StartGate()
    done = CountDownLatch(concurrency)
    failures: list[WorkFailure | WorkerInterrupted] = []
    worker = _Worker(work, ready, gate, done, failures, recorder)

    try:
        for index in range(concurrency):
            try:
                pool.submit(worker, index)
            except Exception as exc:
                gate.abort()
                _log.warning("worker_submit_failed", worker=index, error=str(exc))
                raise CoordinationError(
                    f"pool rejected worker {index} of {concurrency}"
                ) from exc

        if not ready.wait(timeout):
            arrived = concurrency - ready.count
            gate.abort()
            raise InsufficientCapacity(concurrency, arrived, timeout)
        started = clock()
        gate.open()
        if not done.wait(timeout):
            raise CoordinationError(
                f"{done.count} of {concurrency} workers still running after {timeout:g}s"
            )
        finished = clock()
    except KeyboardInterrupt as exc:
        gate.abort()
        _log.warning("measurement_interrupted", concurrency=concurrency)
        raise CoordinationError(
            "interrupted while dispatching or waiting for workers"
        ) from exc

    if recorder is not None:
        recorder.record(COORDINATOR, GATE_OPEN, at_ns=started)
        recorder.record(COORDINATOR, ALL_DONE, at_ns=finished)

    failures.sort(key=lambda f: f.worker)
    for failure in failures:
        _log.warning("work_failed", worker=failure.worker, error=str(failure))

    result = Measurement(
        concurrency=concurrency,
        elapsed_ns=finished - started,
        failures=tuple(failures),
        events=tuple(recorder.events()) if recorder is not None else (),
    )
    _log.info(
        "measurement_complete",
        concurrency=concurrency,
        elapsed_ms=round(result.elapsed_ms, 3),
        failures=len(failures),
    )
    return result
