"""Defaults for the barrier timer demo and its artefacts."""

from pathlib import Path

# Project root = barrier-timer/
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

# ── Demo workload (single source of truth) ──────────────────────────────────
DEFAULT_CONCURRENCY = 10        # workers released by the start gate
DEFAULT_WORK_MS = 200           # each worker sleeps this long

# Artefact names inside a run directory
MEASUREMENT_FILE = "measurement.json"
EVENTS_FILE = "events.jsonl"
TIMELINE_FILE = "timeline.png"
