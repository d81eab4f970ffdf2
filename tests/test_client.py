"""Tests for the CrptApi facade, the settings factory and configuration."""

from unittest.mock import Mock

import httpx
import pytest
from pydantic import ValidationError

from crpt_client import CrptApi, Document, TimeUnit, create_submitter
from crpt_client.adapters.http import HttpxTransport, TransportResponse
from crpt_client.core.config import DEFAULT_API_URL, CrptSettings, LogSettings, Settings
from crpt_client.core.errors import ConfigurationAppError
from crpt_client.core.rate_limit import get_rate_gate


def _settings(**crpt) -> Settings:
    return Settings(crpt=CrptSettings(**crpt), log=LogSettings())


def test_create_document_goes_through_injected_transport() -> None:
    transport = Mock()
    transport.post.return_value = TransportResponse(status_code=200, text="")

    with CrptApi(TimeUnit.MINUTES, 3, transport=transport) as api:
        result = api.create_document(Document(doc_id="doc-1"), "sig")

    assert result.status_code == 200
    url = transport.post.call_args.args[0]
    assert url == DEFAULT_API_URL
    assert transport.post.call_args.kwargs["headers"] == {"Content-Type": "application/json"}
    assert api.rate_gate.request_limit == 3
    assert api.rate_gate.time_window_millis == 60_000
    assert api.rate_gate.in_flight() == 1
    transport.close.assert_not_called()


def test_owned_transport_is_closed_on_exit() -> None:
    with CrptApi(TimeUnit.SECONDS, 1, timeout_seconds=5.0) as api:
        transport = api.submitter.transport
        assert isinstance(transport, HttpxTransport)

    assert transport.client.is_closed


@pytest.mark.parametrize("limit", [0, -1])
def test_rejects_non_positive_limit(limit: int) -> None:
    with pytest.raises(ConfigurationAppError):
        CrptApi(TimeUnit.SECONDS, limit, transport=Mock())


def test_instances_do_not_share_a_budget() -> None:
    first = CrptApi(TimeUnit.HOURS, 1, transport=Mock())
    second = CrptApi(TimeUnit.HOURS, 1, transport=Mock())

    first.rate_gate.acquire()

    assert second.rate_gate.in_flight() == 0


def test_create_submitter_uses_settings_and_shared_gate() -> None:
    settings = _settings(api_url="https://crpt.test/create", request_limit=4, time_unit="minutes")
    transport = Mock()

    first = create_submitter(settings, transport=transport)
    second = create_submitter(settings, transport=transport)

    assert first.api_url == "https://crpt.test/create"
    assert first.rate_gate is second.rate_gate
    assert first.rate_gate.request_limit == 4
    assert first.rate_gate.time_window_millis == 60_000


def test_gate_is_rebuilt_when_configuration_changes() -> None:
    before = get_rate_gate(CrptSettings(request_limit=2, time_unit="seconds"))
    same = get_rate_gate(CrptSettings(request_limit=2, time_unit="SECONDS"))
    after = get_rate_gate(CrptSettings(request_limit=3, time_unit="seconds"))

    assert before is same
    assert after is not before
    assert after.request_limit == 3


def test_create_submitter_builds_httpx_transport_with_timeout() -> None:
    submitter = create_submitter(_settings(timeout_seconds=7.0))

    assert isinstance(submitter.transport, HttpxTransport)
    assert submitter.transport.client.timeout == httpx.Timeout(7.0)
    submitter.transport.close()


def test_unknown_time_unit_fails_at_gate_construction() -> None:
    with pytest.raises(ConfigurationAppError):
        create_submitter(_settings(time_unit="fortnight"), transport=Mock())


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CRPT_REQUEST_LIMIT", "25")
    monkeypatch.setenv("CRPT_TIME_UNIT", "minutes")
    monkeypatch.setenv("LOG_FORMAT", "plain")

    assert CrptSettings().request_limit == 25
    assert CrptSettings().time_unit == "minutes"
    assert LogSettings().format == "plain"


def test_settings_reject_non_positive_limit(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CRPT_REQUEST_LIMIT", "0")

    with pytest.raises(ValidationError):
        CrptSettings()
