"""Document submission service.

Pairs a document with its signature, waits for rate gate admission, sends
one POST and maps the response status to success or failure. There is no
retry, caching or batching: every failure is reported to the caller as-is.
"""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass
from typing import Any, Mapping

from pydantic import ValidationError

from crpt_client.adapters.http.base import AbstractHttpTransport
from crpt_client.adapters.rate_limit.base import AbstractRateGate
from crpt_client.core.errors import RemoteRejectionAppError, TransportAppError, ValidationAppError
from crpt_client.core.logging import clear_submission_id, set_submission_id
from crpt_client.schemas.document import Document, SubmissionRequest

logger = logging.getLogger(__name__)

JSON_HEADERS = {"Content-Type": "application/json"}


@dataclass(frozen=True)
class SubmissionResult:
    """Outcome of an accepted submission.

    Attributes:
        status_code: HTTP status returned by the endpoint (< 400).
        submission_id: Correlation id used in the logs for this call.
    """

    status_code: int
    submission_id: str


def _build_request(document: Document | Mapping[str, Any], signature: str) -> SubmissionRequest:
    """Validate inputs into a SubmissionRequest.

    Raises:
        ValidationAppError: If the document is malformed or the signature empty.
    """
    try:
        return SubmissionRequest(document=document, signature=signature)
    except ValidationError as exc:
        raise ValidationAppError(
            code="invalid_submission",
            message=f"Invalid document or signature: {exc.error_count()} validation error(s)",
            details={"context": {"errors": exc.errors(include_input=False, include_url=False)}},
        ) from exc


class DocumentSubmitter:
    """Rate-limited sender of commissioning documents.

    Safe to share between threads: the gate serializes admissions and the
    transport is expected to be thread-safe.
    """

    def __init__(
        self,
        rate_gate: AbstractRateGate,
        transport: AbstractHttpTransport,
        *,
        api_url: str,
    ) -> None:
        self.rate_gate = rate_gate
        self.transport = transport
        self.api_url = api_url

    def submit(
        self,
        document: Document | Mapping[str, Any],
        signature: str,
        *,
        cancel_event: threading.Event | None = None,
    ) -> SubmissionResult:
        """Submit one document once the rate gate admits it.

        Inputs are validated before admission so a malformed call does not
        consume a slot in the window.

        Args:
            document: Document value (or a mapping validating into one).
            signature: Non-empty opaque signature token.
            cancel_event: When set, aborts a pending rate gate wait.

        Returns:
            SubmissionResult for status codes below 400.

        Raises:
            ValidationAppError: If the document or signature is malformed.
            InterruptedAppError: If the rate gate wait was aborted.
            TransportAppError: If the HTTP call could not be completed.
            RemoteRejectionAppError: If the endpoint answered with status >= 400.
        """
        request = _build_request(document, signature)

        submission_id = uuid.uuid4().hex
        set_submission_id(submission_id)
        try:
            self.rate_gate.acquire(cancel_event=cancel_event)
            return self._send(request, submission_id)
        finally:
            clear_submission_id()

    def _send(self, request: SubmissionRequest, submission_id: str) -> SubmissionResult:
        body = request.to_json()

        try:
            response = self.transport.post(self.api_url, content=body, headers=JSON_HEADERS)
        except TransportAppError as exc:
            logger.warning(
                "submission.transport_failed",
                extra={"error_code": exc.code, "error_message": exc.message},
            )
            raise

        if response.status_code >= 400:
            logger.warning(
                "submission.rejected",
                extra={"status": response.status_code, "body_chars": len(response.text)},
            )
            raise RemoteRejectionAppError.from_response(response.status_code, response.text)

        logger.info(
            "submission.sent",
            extra={"status": response.status_code, "doc_id": request.document.doc_id},
        )
        return SubmissionResult(status_code=response.status_code, submission_id=submission_id)
