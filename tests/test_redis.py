import json

import pytest

from barrier_timer.common import redis as store
from tests.fakes import FakeRedis


@pytest.fixture
def fake_redis(monkeypatch: pytest.MonkeyPatch) -> FakeRedis:
    client = FakeRedis()
    monkeypatch.setattr(store, "_client", client)
    return client


def test_store_measurement_writes_one_hash(fake_redis: FakeRedis) -> None:
    store.store_measurement("run-1", {
        "concurrency": 10,
        "elapsed_ns": 200_123_456,
        "failures": [{"worker": 1}],
    })

    assert list(fake_redis.hashes) == ["measurement:run-1"]
    saved = fake_redis.hashes["measurement:run-1"]
    assert saved["concurrency"] == "10"
    assert saved["elapsed_ns"] == "200123456"
    assert json.loads(saved["failures"]) == [{"worker": 1}]


def test_get_redis_reads_connection_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(store, "_client", None)
    monkeypatch.setenv("REDIS_HOST", "cache.internal")
    monkeypatch.setenv("REDIS_PORT", "6390")
    monkeypatch.setenv("REDIS_DB", "3")
    monkeypatch.delenv("REDIS_PASSWORD", raising=False)

    client = store.get_redis()
    kwargs = client.connection_pool.connection_kwargs

    assert kwargs["host"] == "cache.internal"
    assert kwargs["port"] == 6390
    assert kwargs["db"] == 3
    assert store.get_redis() is client
