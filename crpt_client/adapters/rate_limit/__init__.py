"""Rate gate adapters.

A small abstraction layer so the submitter depends on ``AbstractRateGate``
rather than on the in-process sliding window implementation.
"""

from crpt_client.adapters.rate_limit.base import AbstractRateGate, TimeUnit, resolve_window_millis
from crpt_client.adapters.rate_limit.sliding_window import SlidingWindowRateGate

__all__ = [
    "AbstractRateGate",
    "SlidingWindowRateGate",
    "TimeUnit",
    "resolve_window_millis",
]
