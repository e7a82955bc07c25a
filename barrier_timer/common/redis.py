"""Redis connection and write helper for a run's measurement record."""

from __future__ import annotations

import json
import os

import redis


_client: redis.Redis | None = None


def get_redis() -> redis.Redis:
    """Return a shared Redis client (lazy singleton).

    Connection settings come from ``REDIS_HOST``, ``REDIS_PORT``,
    ``REDIS_DB`` and ``REDIS_PASSWORD``, read on first use.
    """
    global _client
    if _client is None:
        _client = redis.Redis(
            host=os.environ.get("REDIS_HOST", "localhost"),
            port=int(os.environ.get("REDIS_PORT", "6379")),
            db=int(os.environ.get("REDIS_DB", "0")),
            password=os.environ.get("REDIS_PASSWORD") or None,
            decode_responses=True,
        )
    return _client


def store_measurement(run_id: str, record: dict) -> None:
    """Persist one measurement record as the hash ``measurement:<run_id>``."""
    get_redis().hset(f"measurement:{run_id}", mapping={
        k: json.dumps(v) if isinstance(v, (dict, list)) else str(v)
        for k, v in record.items()
    })
