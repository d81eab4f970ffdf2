"""Logging helpers for the client.

Library modules only call ``logging.getLogger(__name__)``; nothing here
touches the root logger. Applications that want the client's records as
JSON lines call ``configure_logging``, which attaches one handler to the
``crpt_client`` package logger.

Each ``DocumentSubmitter.submit`` call binds a submission id in a context
variable so every record emitted during that call can be correlated.
"""

from __future__ import annotations

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, TextIO

from crpt_client.core.config import LogSettings, settings

PACKAGE_LOGGER = "crpt_client"
REDACTED = "[REDACTED]"

# Signatures are detached CMS blobs; never let them reach a log sink
REDACTED_KEYS: frozenset[str] = frozenset({"signature", "authorization", "token", "cookie"})

_submission_id: ContextVar[str | None] = ContextVar("submission_id", default=None)

# Attributes every LogRecord carries; anything else came from ``extra=``
_RECORD_ATTRS = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime"}


def set_submission_id(submission_id: str | None) -> None:
    _submission_id.set(submission_id)


def get_submission_id() -> str | None:
    return _submission_id.get()


def clear_submission_id() -> None:
    _submission_id.set(None)


def _redact(value: Any, keys: frozenset[str]) -> Any:
    if isinstance(value, Mapping):
        return {k: REDACTED if str(k).lower() in keys else _redact(v, keys) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return type(value)(_redact(v, keys) for v in value)
    return value


def record_extras(record: logging.LogRecord) -> dict[str, Any]:
    """Return the fields a caller attached to ``record`` via ``extra=``."""
    return {k: v for k, v in record.__dict__.items() if k not in _RECORD_ATTRS}


class SubmissionIdFilter(logging.Filter):
    """Stamp records with the submission id bound in the current context."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        if getattr(record, "submission_id", None) is None:
            submission_id = get_submission_id()
            if submission_id:
                record.submission_id = submission_id
        return True


class RedactingFilter(logging.Filter):
    """Replace values of sensitive extra fields, at any nesting depth."""

    def __init__(self, keys: Iterable[str] = REDACTED_KEYS) -> None:
        super().__init__()
        self.keys = frozenset(k.lower() for k in keys)

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        for key, value in record_extras(record).items():
            if key.lower() in self.keys:
                setattr(record, key, REDACTED)
            else:
                setattr(record, key, _redact(value, self.keys))
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per record: fixed header fields plus the extras."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        data.update(record_extras(record))
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data, default=str, ensure_ascii=False)


def configure_logging(
    log_settings: LogSettings | None = None,
    *,
    stream: TextIO | None = None,
) -> logging.Handler:
    """Send the client's records to ``stream`` (stdout by default).

    Calling it again replaces the handler installed by the previous call.

    Args:
        log_settings: Level and format; defaults to the global settings.
        stream: Destination stream.

    Returns:
        The installed handler.
    """
    cfg = log_settings or settings.log
    package_logger = logging.getLogger(PACKAGE_LOGGER)

    for existing in list(package_logger.handlers):
        if getattr(existing, "_crpt_client_handler", False):
            package_logger.removeHandler(existing)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler._crpt_client_handler = True  # type: ignore[attr-defined]
    handler.addFilter(SubmissionIdFilter())
    handler.addFilter(RedactingFilter())
    if cfg.format.lower() == "plain":
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    else:
        handler.setFormatter(JsonFormatter())

    package_logger.addHandler(handler)
    package_logger.setLevel(getattr(logging, cfg.level.upper(), logging.INFO))
    package_logger.propagate = False
    return handler
