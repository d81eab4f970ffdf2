"""Client-level exception types.

Every failure the client reports derives from ``AppError`` so callers can
catch one base class, and branch on ``code`` for the specific kind.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and callers."""

    code: str
    message: str
    hint: str
    http_status: int
    response_body: str
    url: str
    request_limit: Any
    window: Any
    field: str
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for client failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when caller input fails validation."""


class ConfigurationAppError(ValidationAppError):
    """Raised at construction time for a non-positive limit or window."""


class InterruptedAppError(AppError):
    """Raised when a rate gate wait was aborted before admission."""


class TransportAppError(AppError):
    """Raised when the HTTP call could not be completed."""


class RemoteRejectionAppError(AppError):
    """Raised when the endpoint answers with a status code >= 400."""

    @classmethod
    def from_response(cls, status_code: int, body: str) -> "RemoteRejectionAppError":
        return cls(
            code="remote_rejection",
            message=f"Remote endpoint rejected the document: {status_code} - {body}",
            details={"http_status": status_code, "response_body": body},
        )

    @property
    def status_code(self) -> int:
        return (self.details or {}).get("http_status", 0)

    @property
    def body(self) -> str:
        return (self.details or {}).get("response_body", "")
