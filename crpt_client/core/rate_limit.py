"""Process-wide rate gate wiring.

Every submitter built from settings shares one gate, so the configured
limit holds for the whole process no matter how many submitters exist.
"""

from __future__ import annotations

import logging
import threading

from crpt_client.adapters.rate_limit.base import AbstractRateGate
from crpt_client.adapters.rate_limit.sliding_window import SlidingWindowRateGate
from crpt_client.core.config import CrptSettings, settings

logger = logging.getLogger(__name__)


_gate: AbstractRateGate | None = None
_gate_config: tuple[int, str] | None = None
_gate_lock = threading.Lock()


def get_rate_gate(crpt_settings: CrptSettings | None = None) -> AbstractRateGate:
    """Return the process-wide rate gate.

    The instance is cached in-module to preserve admissions across calls.
    If configuration changes (primarily in tests), the gate is rebuilt.

    Args:
        crpt_settings: Settings to build from; defaults to the global settings.

    Returns:
        AbstractRateGate: Configured gate instance.

    Raises:
        ConfigurationAppError: If the configured window is invalid.
    """

    global _gate, _gate_config

    cfg = crpt_settings or settings.crpt
    config = (cfg.request_limit, cfg.time_unit.lower())

    with _gate_lock:
        if _gate is None or _gate_config != config:
            _gate = SlidingWindowRateGate(cfg.request_limit, cfg.time_unit)
            _gate_config = config
            logger.info(
                "rate_gate.configured",
                extra={"limit": cfg.request_limit, "time_unit": cfg.time_unit},
            )
        return _gate


def reset_rate_gate() -> None:
    """Drop the cached gate so the next call rebuilds it."""

    global _gate, _gate_config

    with _gate_lock:
        _gate = None
        _gate_config = None
