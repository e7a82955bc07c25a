"""Per-worker statistics for a single measurement (stdlib only)."""

from __future__ import annotations

import math
from dataclasses import dataclass

from barrier_timer.common.console import fmt_ns
from barrier_timer.runner.timeline import (
    COORDINATOR,
    FINISH,
    GATE_OPEN,
    READY,
    START,
    Measurement,
)


def mean(v: list[float | int]) -> float:
    return sum(v) / len(v) if v else 0.0


def stdev(v: list[float | int]) -> float:
    if len(v) < 2:
        return 0.0
    m = mean(v)
    return math.sqrt(sum((x - m) ** 2 for x in v) / (len(v) - 1))


def median(v: list[float | int]) -> float:
    if not v:
        return 0.0
    s = sorted(v)
    n = len(s)
    return float(s[n // 2]) if n % 2 == 1 else (s[n // 2 - 1] + s[n // 2]) / 2.0


def fmt_stat(v: list[float | int]) -> str:
    """Nanosecond stats: mean +/- sigma  [min, med, max]  (n=...)."""
    if not v:
        return "—"
    return (
        f"{fmt_ns(mean(v))} ± {fmt_ns(stdev(v))}"
        f"  [min={fmt_ns(min(v))}, med={fmt_ns(median(v))}, max={fmt_ns(max(v))}]"
        f"  (n={len(v)})"
    )


@dataclass(frozen=True)
class WorkerStats:
    """Offsets (ns) of each worker relative to the gate opening."""

    ready_lead: list[int]     # gate_open - ready; how long each worker waited at the gate
    start_skew: list[int]     # start - gate_open; wake-up latency after the gate opened
    run_time: list[int]       # finish - start

    @property
    def max_start_skew(self) -> int:
        return max(self.start_skew, default=0)


def worker_stats(measurement: Measurement) -> WorkerStats:
    """Derive per-worker offsets from the timeline of *measurement*.

    Returns empty lists when the measurement carries no events.
    """
    by_phase: dict[str, dict[int, int]] = {}
    for event in measurement.events:
        by_phase.setdefault(event.phase, {})[event.worker] = event.at_ns

    gate = by_phase.get(GATE_OPEN, {}).get(COORDINATOR)
    if gate is None:
        return WorkerStats([], [], [])

    ready = by_phase.get(READY, {})
    start = by_phase.get(START, {})
    finish = by_phase.get(FINISH, {})
    return WorkerStats(
        ready_lead=[gate - ready[w] for w in sorted(ready)],
        start_skew=[start[w] - gate for w in sorted(start)],
        run_time=[finish[w] - start[w] for w in sorted(start) if w in finish],
    )
