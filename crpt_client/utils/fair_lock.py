"""FIFO mutual exclusion for threads.

``threading.Lock`` gives no ordering guarantee: a thread that just released
the lock can grab it again ahead of threads that have been waiting. Under
sustained contention that lets newcomers overtake old waiters indefinitely.
``FairLock`` hands out tickets and serves them strictly in order.
"""

from __future__ import annotations

import threading
from types import TracebackType


class FairLock:
    """Non-reentrant ticket lock granting access in request order."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._next_ticket = 0
        self._serving = 0
        self._abandoned: set[int] = set()

    def acquire(self) -> None:
        with self._cond:
            ticket = self._next_ticket
            self._next_ticket += 1
            try:
                while ticket != self._serving:
                    self._cond.wait()
            except BaseException:
                # Interrupted while queued: give the ticket up so the queue keeps moving
                self._abandoned.add(ticket)
                self._skip_abandoned_locked()
                self._cond.notify_all()
                raise

    def release(self) -> None:
        with self._cond:
            self._serving += 1
            self._skip_abandoned_locked()
            self._cond.notify_all()

    def queued(self) -> int:
        """Number of threads holding or waiting for the lock."""

        with self._cond:
            return self._next_ticket - self._serving - len(self._abandoned)

    def _skip_abandoned_locked(self) -> None:
        while self._serving in self._abandoned:
            self._abandoned.discard(self._serving)
            self._serving += 1

    def __enter__(self) -> "FairLock":
        self.acquire()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()
