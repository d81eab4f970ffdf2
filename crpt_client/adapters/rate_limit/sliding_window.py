"""Sliding-window rate gate with lazy eviction.

Notes:
- Per-process only: two processes sharing an endpoint quota each enforce
  their own limit.
- Thread-safe: admission decisions run under a FIFO lock, and the lock is
  never held while a caller waits.
"""

from __future__ import annotations

import itertools
import logging
import threading
import time
from collections import deque
from typing import Callable

from crpt_client.adapters.rate_limit.base import AbstractRateGate, WindowSpec, resolve_window_millis
from crpt_client.core.errors import ConfigurationAppError, InterruptedAppError
from crpt_client.utils.fair_lock import FairLock

logger = logging.getLogger(__name__)


def monotonic_millis() -> int:
    return time.monotonic_ns() // 1_000_000


class SlidingWindowRateGate(AbstractRateGate):
    """Admit at most ``request_limit`` actions in any rolling window.

    The gate keeps the timestamps of admissions still inside the window,
    oldest first, and a queue of callers not yet admitted, in arrival order.
    A caller at queue position ``k`` is admitted only when ``k`` is below
    the number of free slots, so later arrivals cannot take a slot ahead of
    it. Otherwise it sleeps, outside the lock, until the admission whose
    expiry frees its slot leaves the window, then evaluates again.

    If that admission has not happened yet (more callers ahead than the
    limit), the earliest possible slot is one full window away.

    Re-evaluation is not capped: a caller keeps waiting for as long as the
    window stays full.
    """

    def __init__(
        self,
        request_limit: int,
        window: WindowSpec,
        *,
        clock: Callable[[], int] = monotonic_millis,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the gate.

        Args:
            request_limit: Maximum admissions per window, must be > 0.
            window: Window length (TimeUnit, timedelta or unit name).
            clock: Monotonic time source returning milliseconds.
            sleep: Blocking sleep taking seconds.

        Raises:
            ConfigurationAppError: If the limit or the window is not positive.
        """
        if isinstance(request_limit, bool) or not isinstance(request_limit, int) or request_limit <= 0:
            raise ConfigurationAppError(
                code="rate_gate_invalid_limit",
                message="Request limit must be a positive integer",
                details={"request_limit": request_limit},
            )

        self._request_limit = request_limit
        self._window_ms = resolve_window_millis(window)
        self._clock = clock
        self._sleep = sleep
        self._lock = FairLock()
        self._timestamps: deque[int] = deque(maxlen=request_limit)
        self._waiters: deque[int] = deque()
        self._tickets = itertools.count()

    @property
    def request_limit(self) -> int:
        return self._request_limit

    @property
    def time_window_millis(self) -> int:
        return self._window_ms

    def in_flight(self) -> int:
        """Count admissions still inside the current window."""
        with self._lock:
            self._evict_expired_locked(self._clock())
            return len(self._timestamps)

    def queued(self) -> int:
        """Count callers waiting for admission."""
        with self._lock:
            return len(self._waiters)

    def acquire(self, *, cancel_event: threading.Event | None = None) -> int:
        """Block until admitted and record the admission.

        Args:
            cancel_event: When set, a pending wait is aborted.

        Returns:
            The admission timestamp in milliseconds.

        Raises:
            InterruptedAppError: If ``cancel_event`` was set before admission.
        """
        if cancel_event is not None and cancel_event.is_set():
            raise self._interrupted()

        with self._lock:
            ticket = next(self._tickets)
            self._waiters.append(ticket)

        try:
            while True:
                with self._lock:
                    now = self._clock()
                    self._evict_expired_locked(now)
                    wait_ms = self._admit_or_wait_locked(ticket, now)
                    if wait_ms is None:
                        return now

                logger.debug(
                    "rate_gate.waiting",
                    extra={
                        "limit": self._request_limit,
                        "window_ms": self._window_ms,
                        "wait_ms": wait_ms,
                    },
                )
                self._wait(wait_ms / 1000, cancel_event)
        except BaseException:
            with self._lock:
                if ticket in self._waiters:
                    self._waiters.remove(ticket)
            raise

    def _admit_or_wait_locked(self, ticket: int, now: int) -> int | None:
        """Admit ``ticket`` and return None, or return milliseconds to wait."""
        position = self._waiters.index(ticket)
        free = self._request_limit - len(self._timestamps)

        if position < free:
            self._waiters.remove(ticket)
            self._timestamps.append(now)
            logger.debug(
                "rate_gate.admitted",
                extra={
                    "limit": self._request_limit,
                    "in_window": len(self._timestamps),
                    "queued": len(self._waiters),
                    "window_ms": self._window_ms,
                },
            )
            return None

        # Expiry of the (position - free)th admission frees this caller's slot
        blocking = position - free
        if blocking < len(self._timestamps):
            return self._window_ms - (now - self._timestamps[blocking])
        return self._window_ms

    def _wait(self, seconds: float, cancel_event: threading.Event | None) -> None:
        if cancel_event is None:
            self._sleep(seconds)
        elif cancel_event.wait(seconds):
            raise self._interrupted()

    def _evict_expired_locked(self, now: int) -> None:
        while self._timestamps and now - self._timestamps[0] >= self._window_ms:
            self._timestamps.popleft()

    def _interrupted(self) -> InterruptedAppError:
        logger.warning(
            "rate_gate.interrupted",
            extra={"limit": self._request_limit, "window_ms": self._window_ms},
        )
        return InterruptedAppError(
            code="rate_gate_interrupted",
            message="Wait for rate gate admission was interrupted",
        )
