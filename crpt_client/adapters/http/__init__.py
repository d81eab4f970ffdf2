"""HTTP transport adapter layer - isolates the submitter from the HTTP library."""

from crpt_client.adapters.http.base import AbstractHttpTransport, TransportResponse
from crpt_client.adapters.http.httpx_transport import HttpxTransport

__all__ = [
    "AbstractHttpTransport",
    "HttpxTransport",
    "TransportResponse",
]
