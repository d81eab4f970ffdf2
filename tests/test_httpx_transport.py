"""Tests for the httpx transport adapter."""

import httpx
import pytest

from crpt_client.adapters.http import HttpxTransport, TransportResponse
from crpt_client.core.errors import TransportAppError


def test_post_forwards_body_and_headers() -> None:
    seen: list[httpx.Request] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201, text="created")

    transport = HttpxTransport(client=httpx.Client(transport=httpx.MockTransport(_handler)))

    response = transport.post(
        "https://crpt.test/create",
        content='{"a": 1}',
        headers={"Content-Type": "application/json"},
    )

    assert response == TransportResponse(status_code=201, text="created")
    assert seen[0].content == b'{"a": 1}'
    assert seen[0].headers["content-type"] == "application/json"


def test_error_status_is_returned_not_raised() -> None:
    transport = HttpxTransport(
        client=httpx.Client(
            transport=httpx.MockTransport(lambda request: httpx.Response(500, text="oops"))
        )
    )

    response = transport.post("https://crpt.test/create", content="{}", headers={})

    assert response.status_code == 500
    assert response.text == "oops"


def test_connect_error_maps_to_transport_error() -> None:
    def _refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    transport = HttpxTransport(client=httpx.Client(transport=httpx.MockTransport(_refuse)))

    with pytest.raises(TransportAppError, match="connection refused") as exc:
        transport.post("https://crpt.test/create", content="{}", headers={})

    assert exc.value.details["url"] == "https://crpt.test/create"


def test_default_client_uses_configured_timeout() -> None:
    transport = HttpxTransport(timeout_seconds=2.5)

    assert transport.client.timeout == httpx.Timeout(2.5)
    transport.close()
    assert transport.client.is_closed


@pytest.mark.parametrize(
    "error_cls",
    [httpx.DecodingError, httpx.TooManyRedirects, httpx.UnsupportedProtocol, httpx.WriteError],
)
def test_every_request_error_maps_to_transport_error(error_cls) -> None:
    def _fail(request: httpx.Request) -> httpx.Response:
        raise error_cls("request failed", request=request)

    transport = HttpxTransport(client=httpx.Client(transport=httpx.MockTransport(_fail)))

    with pytest.raises(TransportAppError) as exc:
        transport.post("https://crpt.test/create", content="{}", headers={})

    assert exc.value.code == "transport_failure"
    assert isinstance(exc.value.__cause__, error_cls)
