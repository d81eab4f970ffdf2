"""Client entry points: the ``CrptApi`` facade and the settings-based factory."""

from __future__ import annotations

from types import TracebackType
from typing import Any, Mapping

from crpt_client.adapters.http.base import AbstractHttpTransport
from crpt_client.adapters.http.httpx_transport import HttpxTransport
from crpt_client.adapters.rate_limit.base import WindowSpec
from crpt_client.adapters.rate_limit.sliding_window import SlidingWindowRateGate
from crpt_client.core.config import DEFAULT_API_URL, Settings, settings as default_settings
from crpt_client.core.rate_limit import get_rate_gate
from crpt_client.schemas.document import Document
from crpt_client.services.document_submitter import DocumentSubmitter, SubmissionResult


class CrptApi:
    """Thread-safe client allowing ``request_limit`` submissions per ``time_unit``.

    Owns its own rate gate, so two instances do not share a budget. Use
    ``create_submitter()`` for a process-wide budget.

    Example:
        with CrptApi(TimeUnit.SECONDS, 5) as api:
            api.create_document(Document(doc_id="42"), signature="...")
    """

    def __init__(
        self,
        time_unit: WindowSpec,
        request_limit: int,
        *,
        api_url: str = DEFAULT_API_URL,
        transport: AbstractHttpTransport | None = None,
        timeout_seconds: float = 30.0,
    ) -> None:
        self._owns_transport = transport is None
        self._gate = SlidingWindowRateGate(request_limit, time_unit)
        self.submitter = DocumentSubmitter(
            self._gate,
            transport or HttpxTransport(timeout_seconds=timeout_seconds),
            api_url=api_url,
        )

    @property
    def rate_gate(self) -> SlidingWindowRateGate:
        return self._gate

    def create_document(
        self,
        document: Document | Mapping[str, Any],
        signature: str,
    ) -> SubmissionResult:
        """Register a commissioning document; see ``DocumentSubmitter.submit``."""
        return self.submitter.submit(document, signature)

    def close(self) -> None:
        if self._owns_transport:
            self.submitter.transport.close()

    def __enter__(self) -> "CrptApi":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


def create_submitter(
    settings: Settings | None = None,
    *,
    transport: AbstractHttpTransport | None = None,
) -> DocumentSubmitter:
    """Factory building a DocumentSubmitter from configuration.

    The submitter uses the process-wide rate gate from ``get_rate_gate``.

    Args:
        settings: Settings to use; defaults to the global settings.
        transport: Optional transport; an ``HttpxTransport`` is built otherwise.

    Returns:
        DocumentSubmitter: Configured submitter.

    Raises:
        ConfigurationAppError: If the configured window is invalid.
    """
    cfg = (settings or default_settings).crpt

    return DocumentSubmitter(
        get_rate_gate(cfg),
        transport or HttpxTransport(timeout_seconds=cfg.timeout_seconds),
        api_url=cfg.api_url,
    )
