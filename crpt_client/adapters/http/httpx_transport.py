"""httpx-backed HTTP transport."""

import logging
from typing import Mapping

import httpx

from crpt_client.adapters.http.base import AbstractHttpTransport, TransportResponse
from crpt_client.core.errors import TransportAppError

logger = logging.getLogger(__name__)


class HttpxTransport(AbstractHttpTransport):
    """Transport wrapping a shared, thread-safe ``httpx.Client``.

    No retries are configured: a failed request is reported once.
    """

    def __init__(
        self,
        timeout_seconds: float = 30.0,
        client: httpx.Client | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            timeout_seconds: Timeout applied to connect/read/write/pool.
            client: Pre-built client (e.g. with a MockTransport in tests).
                The transport closes it on ``close()`` either way.
        """
        self.client = client or httpx.Client(timeout=timeout_seconds)

    def post(
        self,
        url: str,
        *,
        content: str | bytes,
        headers: Mapping[str, str],
    ) -> TransportResponse:
        """POST ``content`` to ``url``.

        Raises:
            TransportAppError: On connection errors, timeouts, protocol or decoding
                errors and redirect loops.
        """
        try:
            response = self.client.post(url, content=content, headers=dict(headers))
        except httpx.RequestError as exc:
            logger.warning(
                "transport.failed",
                extra={"url": url, "error_type": type(exc).__name__},
            )
            raise TransportAppError(
                code="transport_failure",
                message=f"HTTP request failed: {exc}",
                details={"url": url, "hint": type(exc).__name__},
            ) from exc

        return TransportResponse(status_code=response.status_code, text=response.text)

    def close(self) -> None:
        self.client.close()
