"""CLI entrypoint for the barrier timer demonstration.

Flow:
  1. Build a thread pool (sized to the concurrency unless --pool-size)
  2. Time N concurrent sleeps behind the start gate
  3. Print the measured interval and per-worker offsets
  4. Optionally write artefacts (JSON, JSONL events, timeline chart)
     and store the record in Redis
  5. Shut the pool down
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import textwrap
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

from barrier_timer.common.console import C, banner, fail, fmt_ns, info, ok, warn
from barrier_timer.common.constants import (
    DEFAULT_CONCURRENCY,
    DEFAULT_WORK_MS,
    EVENTS_FILE,
    MEASUREMENT_FILE,
    PROJECT_ROOT,
    TIMELINE_FILE,
)
from barrier_timer.common.logging import (
    close_file_logger,
    configure_structlog,
    get_json_file_logger,
)
from barrier_timer.report.stats import fmt_stat, worker_stats
from barrier_timer.runner.timeline import Measurement, TimelineRecorder
from barrier_timer.runner.timer import measure


def _load_dotenv() -> None:
    """Load variables from .env file into os.environ (no overwrite)."""
    env_path = PROJECT_ROOT / ".env"
    if not env_path.is_file():
        return
    info(f"Loading environment from {env_path}")
    with open(env_path) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, _, value = line.partition("=")
            key = key.strip()
            value = value.strip().strip("\"'")
            os.environ.setdefault(key, value)


def sleep_work(ms: float) -> Callable[[], None]:
    """Work unit that sleeps for *ms* milliseconds."""
    seconds = ms / 1000.0

    def work() -> None:
        time.sleep(seconds)

    return work


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="barrier-timer",
        description="Time N concurrent executions of a sleep behind a start gate.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""\
            examples:
              barrier-timer                           # 10 workers x 200 ms
              barrier-timer -n 50 --work-ms 20        # 50 workers x 20 ms
              barrier-timer -n 8 --pool-size 4 --timeout 2
                                                      # pool too small -> InsufficientCapacity
              barrier-timer --results-dir results/run1 --store-redis
        """),
    )
    parser.add_argument(
        "-n", "--concurrency", type=int, default=DEFAULT_CONCURRENCY,
        help=f"Number of workers released together. Default: {DEFAULT_CONCURRENCY}",
    )
    parser.add_argument(
        "--work-ms", type=float, default=DEFAULT_WORK_MS,
        help=f"How long each worker sleeps, in milliseconds. Default: {DEFAULT_WORK_MS}",
    )
    parser.add_argument(
        "--pool-size", type=int, default=None,
        help="Thread pool size. Default: same as --concurrency",
    )
    parser.add_argument(
        "--timeout", type=float, default=None,
        help="Give up on each coordinator wait after this many seconds",
    )
    parser.add_argument(
        "--results-dir", type=Path, default=None,
        help="Write measurement.json, events.jsonl and timeline.png here",
    )
    parser.add_argument(
        "--store-redis", action="store_true", default=False,
        help="Store the measurement record in Redis (REDIS_* env vars)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", default=False,
        help="Debug-level logging",
    )
    return parser


def _write_artefacts(measurement: Measurement, record: dict, results_dir: Path) -> None:
    from barrier_timer.report.graphs import plot_timeline

    results_dir.mkdir(parents=True, exist_ok=True)

    meta_file = results_dir / MEASUREMENT_FILE
    meta_file.write_text(json.dumps(record, indent=2))
    ok(f"Measurement saved to {meta_file}")

    events_file = results_dir / EVENTS_FILE
    events_log = get_json_file_logger(events_file)
    for event in measurement.events:
        events_log.info(event.phase, worker=event.worker, at_ns=event.at_ns)
    close_file_logger(events_file)
    ok(f"Timeline events saved to {events_file}")

    chart = plot_timeline(measurement, results_dir / TIMELINE_FILE)
    ok(f"Timeline chart saved to {chart}")


def _store_redis(run_id: str, record: dict) -> None:
    from barrier_timer.common.redis import store_measurement

    _load_dotenv()
    try:
        store_measurement(run_id, {**record, "events": len(record["events"])})
        ok(f"Measurement stored in Redis as measurement:{run_id}")
    except Exception as exc:
        warn(f"Redis store failed (non-fatal): {exc}")


def run(argv: list[str] | None = None) -> Measurement:
    """Parse *argv*, take one measurement and report it."""
    args = _build_parser().parse_args(argv)
    n = args.concurrency
    pool_size = args.pool_size if args.pool_size is not None else n

    if n < 1:
        fail("--concurrency must be at least 1.")
    if pool_size < 1:
        fail("--pool-size must be at least 1.")
    if args.work_ms < 0:
        fail("--work-ms cannot be negative.")
    if args.timeout is not None and args.timeout <= 0:
        fail("--timeout must be positive.")

    configure_structlog(logging.DEBUG if args.verbose else logging.INFO)

    banner("Barrier Timer — Concurrent Execution")
    info(f"Workers: {n}  (pool size {pool_size})")
    info(f"Work:    sleep {args.work_ms:g} ms each")
    if pool_size < n:
        if args.timeout is None:
            warn("Pool is smaller than the concurrency and no --timeout is set: this will hang.")
        else:
            warn("Pool is smaller than the concurrency: expect InsufficientCapacity.")
    print()

    recorder = TimelineRecorder()
    with ThreadPoolExecutor(max_workers=pool_size, thread_name_prefix="barrier-worker") as pool:
        measurement = measure(
            pool, n, sleep_work(args.work_ms),
            timeout=args.timeout,
            recorder=recorder,
        )

    # ── Summary ──────────────────────────────────────────────────────────
    print()
    print(f"cost time: {measurement.elapsed_ns} ns ({measurement.elapsed_ms:,.3f} ms)")
    print()
    stats = worker_stats(measurement)
    info(f"Gate wait:   {fmt_stat(stats.ready_lead)}")
    info(f"Start skew:  {fmt_stat(stats.start_skew)}")
    info(f"Run time:    {fmt_stat(stats.run_time)}")
    overhead = measurement.elapsed_ns - args.work_ms * 1_000_000
    info(f"Overhead vs. one sleep: {fmt_ns(overhead)}")
    if measurement.ok:
        ok(f"All {n} workers completed.")
    else:
        warn(f"{len(measurement.failures)} of {n} workers failed:")
        for failure in measurement.failures:
            print(f"    {C.RED}{failure}{C.NC}")

    run_id = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
    record = {
        "run_id": run_id,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "timestamp_unix": time.time(),
        "work_ms": args.work_ms,
        "pool_size": pool_size,
        **measurement.to_dict(),
    }

    if args.results_dir is not None:
        print()
        _write_artefacts(measurement, record, args.results_dir)
    if args.store_redis:
        _store_redis(run_id, record)

    return measurement


def main(argv: list[str] | None = None) -> None:
    run(argv)
