"""Rate gate interfaces.

The submitter depends on this abstraction (not the concrete implementation)
so tests and alternative pacing strategies can be plugged in.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from datetime import timedelta
from enum import Enum

from crpt_client.core.errors import ConfigurationAppError


class TimeUnit(str, Enum):
    """Window length expressed as one unit of time."""

    MILLISECONDS = "milliseconds"
    SECONDS = "seconds"
    MINUTES = "minutes"
    HOURS = "hours"
    DAYS = "days"

    def to_millis(self, amount: int = 1) -> int:
        return amount * _UNIT_MILLIS[self]


_UNIT_MILLIS = {
    TimeUnit.MILLISECONDS: 1,
    TimeUnit.SECONDS: 1_000,
    TimeUnit.MINUTES: 60_000,
    TimeUnit.HOURS: 3_600_000,
    TimeUnit.DAYS: 86_400_000,
}


WindowSpec = TimeUnit | timedelta | str


def resolve_window_millis(window: WindowSpec) -> int:
    """Resolve a window value to whole milliseconds.

    Args:
        window: A TimeUnit (one unit long), a timedelta, or a unit name.

    Returns:
        Window length in milliseconds.

    Raises:
        ConfigurationAppError: If the window is unknown or not positive.
    """
    if isinstance(window, timedelta):
        millis = window // timedelta(milliseconds=1)
    else:
        try:
            unit = window if isinstance(window, TimeUnit) else TimeUnit(str(window).lower())
        except ValueError as exc:
            raise ConfigurationAppError(
                code="rate_gate_invalid_window",
                message=f"Unknown time unit: {window!r}",
                details={"window": str(window)},
            ) from exc
        millis = unit.to_millis()

    if millis <= 0:
        raise ConfigurationAppError(
            code="rate_gate_invalid_window",
            message="Time window must be positive",
            details={"window": str(window)},
        )
    return millis


class AbstractRateGate(ABC):
    """Interface for blocking admission controllers."""

    @abstractmethod
    def acquire(self, *, cancel_event: threading.Event | None = None) -> int:
        """Block until one action may proceed, then record the admission.

        Args:
            cancel_event: Optional event; when set, a pending wait is aborted.

        Returns:
            Admission timestamp in milliseconds of the gate's clock.

        Raises:
            InterruptedAppError: If the wait was aborted before admission.
        """
        raise NotImplementedError
