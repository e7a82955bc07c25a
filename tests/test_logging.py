import json
import logging

import structlog

from barrier_timer.common.logging import (
    close_file_logger,
    configure_structlog,
    get_json_file_logger,
)


def test_configure_structlog_sets_global_config() -> None:
    configure_structlog(logging.DEBUG)

    assert structlog.is_configured()
    assert structlog.get_config()["cache_logger_on_first_use"] is True


def test_json_file_logger_writes_one_object_per_line(tmp_path) -> None:
    path = tmp_path / "logs" / "events.jsonl"

    log = get_json_file_logger(path)
    log.info("ready", worker=3, at_ns=42)
    log.warning("work_failed", worker=1)
    close_file_logger(path)

    records = [json.loads(line) for line in path.read_text().splitlines()]
    assert records[0] == {"event": "ready", "worker": 3, "at_ns": 42, "level": "info"}
    assert records[1]["level"] == "warning"
