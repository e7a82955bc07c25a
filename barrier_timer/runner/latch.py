"""Count-down latch and one-shot start gate built on :mod:`threading`."""

from __future__ import annotations

import threading


class CountDownLatch:
    """Blocks waiters until :meth:`count_down` has been called *count* times.

    Usage::

        ready = CountDownLatch(3)
        # in each worker:
        ready.count_down()
        # in the coordinator:
        ready.wait()
    """

    def __init__(self, count: int) -> None:
        if count < 0:
            raise ValueError("count must be >= 0")
        self._count = count
        self._cond = threading.Condition()

    @property
    def count(self) -> int:
        with self._cond:
            return self._count

    def count_down(self) -> None:
        with self._cond:
            if self._count == 0:
                return
            self._count -= 1
            if self._count == 0:
                self._cond.notify_all()

    def wait(self, timeout: float | None = None) -> bool:
        """Wait for the count to reach zero; False if *timeout* expired first."""
        with self._cond:
            return self._cond.wait_for(lambda: self._count == 0, timeout=timeout)

    def __repr__(self) -> str:
        return f"<CountDownLatch count={self.count}>"


class StartGate:
    """Closed gate that is either opened or aborted, exactly once.

    Opening lets every waiter proceed to the timed work. Aborting releases
    the waiters too, but :meth:`wait` then returns False so they skip it.
    """

    def __init__(self) -> None:
        self._released = threading.Event()
        self._lock = threading.Lock()
        self._aborted = False

    @property
    def is_open(self) -> bool:
        return self._released.is_set() and not self._aborted

    @property
    def is_aborted(self) -> bool:
        return self._aborted

    def open(self) -> bool:
        return self._release(aborted=False)

    def abort(self) -> bool:
        return self._release(aborted=True)

    def _release(self, *, aborted: bool) -> bool:
        with self._lock:
            if self._released.is_set():
                return False
            self._aborted = aborted
            self._released.set()
            return True

    def wait(self, timeout: float | None = None) -> bool:
        """Block until released. True only if the gate was opened."""
        if not self._released.wait(timeout=timeout):
            return False
        return not self._aborted

    def __repr__(self) -> str:
        state = "aborted" if self._aborted else ("open" if self._released.is_set() else "closed")
        return f"<StartGate {state}>"


__all__ = ["CountDownLatch", "StartGate"]
