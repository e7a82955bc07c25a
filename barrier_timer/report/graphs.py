"""Per-worker timeline chart for one measurement (matplotlib)."""

from __future__ import annotations

from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np

from barrier_timer.runner.timeline import (
    ALL_DONE,
    COORDINATOR,
    FINISH,
    GATE_OPEN,
    READY,
    START,
    Measurement,
)

# Palette
COLOR_WAIT = "#bdc3c7"    # grey: parked at the start gate
COLOR_RUN = "#2980b9"     # blue: running the work
COLOR_GATE = "#27ae60"
COLOR_DONE = "#e74c3c"


def _offsets_ms(times: dict[int, int], workers: np.ndarray, origin: int) -> np.ndarray:
    """Milliseconds relative to *origin* for each worker, NaN where missing."""
    return np.array(
        [(times[w] - origin) / 1e6 if w in times else np.nan for w in workers],
        dtype=float,
    )


def plot_timeline(measurement: Measurement, path: Path, title: str | None = None) -> Path:
    """Draw one bar per worker: gate wait, then work, with the timed window marked.

    Time zero is the gate opening (T0). Raises ``ValueError`` when the
    measurement was taken without a timeline recorder.
    """
    by_phase: dict[str, dict[int, int]] = {}
    for event in measurement.events:
        by_phase.setdefault(event.phase, {})[event.worker] = event.at_ns

    coordinator = {p: t[COORDINATOR] for p, t in by_phase.items() if COORDINATOR in t}
    if GATE_OPEN not in coordinator:
        raise ValueError("measurement has no timeline events")
    origin = coordinator[GATE_OPEN]

    workers = np.arange(measurement.concurrency)
    ready = _offsets_ms(by_phase.get(READY, {}), workers, origin)
    start = _offsets_ms(by_phase.get(START, {}), workers, origin)
    finish = _offsets_ms(by_phase.get(FINISH, {}), workers, origin)

    fig, ax = plt.subplots(figsize=(10, max(3.0, 0.35 * len(workers) + 1.5)))

    waited = ~np.isnan(ready) & ~np.isnan(start)
    ax.barh(
        workers[waited], (start - ready)[waited], left=ready[waited],
        color=COLOR_WAIT, edgecolor="black", linewidth=0.3, label="waiting at gate",
    )
    ran = ~np.isnan(start) & ~np.isnan(finish)
    ax.barh(
        workers[ran], (finish - start)[ran], left=start[ran],
        color=COLOR_RUN, edgecolor="black", linewidth=0.3, label="running work",
    )

    ax.axvline(0.0, color=COLOR_GATE, linewidth=1.5, linestyle="--", label="gate open (T0)")
    if ALL_DONE in coordinator:
        ax.axvline(
            (coordinator[ALL_DONE] - origin) / 1e6,
            color=COLOR_DONE, linewidth=1.5, linestyle="--", label="all done (T1)",
        )

    ax.set_xlabel("Time relative to gate opening (ms)", fontsize=11)
    ax.set_ylabel("Worker", fontsize=11)
    ax.set_yticks(workers)
    ax.invert_yaxis()
    ax.set_title(
        title or f"{measurement.concurrency} workers — {measurement.elapsed_ms:,.3f} ms",
        fontsize=13,
    )
    ax.legend(fontsize=9, loc="lower right")
    ax.grid(True, axis="x", alpha=0.3)

    path.parent.mkdir(parents=True, exist_ok=True)
    fig.tight_layout()
    fig.savefig(path, dpi=150, bbox_inches="tight")
    plt.close(fig)
    return path
