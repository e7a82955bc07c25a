import threading
import time

import pytest

from barrier_timer.runner.latch import CountDownLatch, StartGate


def test_latch_rejects_negative_count() -> None:
    with pytest.raises(ValueError):
        CountDownLatch(-1)


def test_latch_at_zero_does_not_block() -> None:
    assert CountDownLatch(0).wait(timeout=0) is True


def test_latch_wait_times_out_while_count_positive() -> None:
    latch = CountDownLatch(2)
    latch.count_down()

    assert latch.wait(timeout=0.05) is False
    assert latch.count == 1


def test_latch_count_down_below_zero_is_noop() -> None:
    latch = CountDownLatch(1)
    latch.count_down()
    latch.count_down()

    assert latch.count == 0
    assert latch.wait(timeout=0) is True


def test_latch_releases_every_waiter() -> None:
    latch = CountDownLatch(3)
    released: list[bool] = []

    def waiter() -> None:
        released.append(latch.wait(timeout=5))

    threads = [threading.Thread(target=waiter) for _ in range(4)]
    for t in threads:
        t.start()
    for _ in range(3):
        latch.count_down()
    for t in threads:
        t.join(timeout=5)

    assert released == [True] * 4


def test_gate_starts_closed() -> None:
    gate = StartGate()

    assert not gate.is_open
    assert not gate.is_aborted
    assert gate.wait(timeout=0.01) is False


def test_gate_opens_exactly_once() -> None:
    gate = StartGate()

    assert gate.open() is True
    assert gate.open() is False
    assert gate.abort() is False
    assert gate.is_open
    assert gate.wait(timeout=0) is True


def test_aborted_gate_releases_without_permission() -> None:
    gate = StartGate()

    assert gate.abort() is True
    assert gate.open() is False
    assert gate.is_aborted
    assert not gate.is_open
    assert gate.wait(timeout=0) is False


def test_gate_releases_blocked_threads_together() -> None:
    gate = StartGate()
    woke: list[float] = []
    lock = threading.Lock()

    def waiter() -> None:
        if gate.wait(timeout=5):
            with lock:
                woke.append(time.perf_counter())

    threads = [threading.Thread(target=waiter) for _ in range(5)]
    for t in threads:
        t.start()
    time.sleep(0.05)
    assert woke == []

    opened_at = time.perf_counter()
    gate.open()
    for t in threads:
        t.join(timeout=5)

    assert len(woke) == 5
    assert all(w >= opened_at for w in woke)
