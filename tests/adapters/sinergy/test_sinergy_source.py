from __future__ import annotations

import time
from typing import TYPE_CHECKING

import httpx
import pytest

from hrsync.adapters.diagnostics import PayloadDumper
from hrsync.adapters.sinergy import ACTIVE_LIST, SinergyAuthoritativeSource, SinergyClient
from hrsync.config import NO_RETRY, RateLimit, SinergyConfig
from hrsync.config.http_resilience import ResilienceConfig
from hrsync.config.sinergy import SOAP_ACTION_ACTIVE, SOAP_ACTION_BY_CPF
from hrsync.domain.errors import TransportError
from hrsync.domain.reconciliation import (
    DecodeEmpty,
    DecodeFailure,
    DecodeFailureReason,
    DecodeSuccess,
    DecodeSuccessList,
)
from tests.helpers.employees import SAMPLE_CPF_DIGITS, SAMPLE_CPF_MASKED
from tests.helpers.http import make_client_factory
from tests.helpers.soap import escaped_records_response, soap_result

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

ENDPOINT = "https://sinergy.example.com/ws.asmx"
MARIA = {"func_nom": "Maria Silva", "func_num_cpf": SAMPLE_CPF_MASKED, "func_sts": "Ativo"}


def _config() -> SinergyConfig:
    return SinergyConfig(
        endpoint=ENDPOINT,
        user="integration",
        password="s3cret",  # noqa: S106
        resilience=ResilienceConfig(name="sinergy-test", retry=NO_RETRY),
    )


def _source(
    handler: Callable[[httpx.Request], httpx.Response],
    dumper: PayloadDumper | None = None,
) -> SinergyAuthoritativeSource:
    config = _config()
    client = SinergyClient(config, client_factory=make_client_factory(handler))
    if dumper is None:
        return SinergyAuthoritativeSource(client, config)
    return SinergyAuthoritativeSource(client, config, dumper=dumper)


def test_lookup_posts_envelope_and_decodes_the_record() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, text=escaped_records_response([MARIA]))

    outcome = _source(handler).lookup(SAMPLE_CPF_DIGITS)

    assert outcome == DecodeSuccess(MARIA)
    [request] = requests
    assert request.method == "POST"
    assert str(request.url) == ENDPOINT
    assert request.headers["SOAPAction"] == SOAP_ACTION_BY_CPF
    assert f"<cpf>{SAMPLE_CPF_MASKED}</cpf>" in request.content.decode("utf-8")


def test_list_active_uses_the_list_action() -> None:
    actions: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        actions.append(request.headers["SOAPAction"])
        return httpx.Response(200, text=escaped_records_response([MARIA], ACTIVE_LIST))

    outcome = _source(handler).list_active()

    assert outcome == DecodeSuccessList((MARIA,))
    assert actions == [SOAP_ACTION_ACTIVE]


def test_http_error_status_raises_transport_error() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="<html>Internal error</html>")

    with pytest.raises(TransportError) as exc:
        _source(handler).lookup(SAMPLE_CPF_DIGITS)

    assert exc.value.status_code == 500
    assert "Internal error" in exc.value.body


def test_connection_failure_raises_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TransportError, match="connection refused"):
        _source(handler).lookup(SAMPLE_CPF_DIGITS)


def test_unusable_payloads_are_dumped_when_debugging(tmp_path: Path) -> None:
    html = "<!DOCTYPE html><html><body>blocked</body></html>"

    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text=html)

    outcome = _source(handler, PayloadDumper(tmp_path)).lookup(SAMPLE_CPF_DIGITS)

    assert isinstance(outcome, DecodeFailure)
    assert outcome.reason is DecodeFailureReason.HTML_RESPONSE
    [dumped] = list(tmp_path.iterdir())
    assert dumped.name.startswith("sinergy_getDadosFuncionariosPorCpf_html-response_")
    assert dumped.suffix == ".html"
    assert dumped.read_text(encoding="utf-8") == html


def test_empty_results_are_dumped_as_xml(tmp_path: Path) -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text=soap_result(""))

    outcome = _source(handler, PayloadDumper(tmp_path)).lookup(SAMPLE_CPF_DIGITS)

    assert isinstance(outcome, DecodeEmpty)
    [dumped] = list(tmp_path.iterdir())
    assert "empty-result" in dumped.name
    assert dumped.suffix == ".xml"


def test_successful_payloads_are_not_dumped(tmp_path: Path) -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text=escaped_records_response([MARIA]))

    _source(handler, PayloadDumper(tmp_path)).lookup(SAMPLE_CPF_DIGITS)

    assert list(tmp_path.iterdir()) == []


def test_consecutive_calls_share_one_rate_limit() -> None:
    sent_at: list[float] = []

    def handler(_: httpx.Request) -> httpx.Response:
        sent_at.append(time.monotonic())
        return httpx.Response(200, text=escaped_records_response([MARIA]))

    config = SinergyConfig(
        endpoint=ENDPOINT,
        user="integration",
        password="s3cret",  # noqa: S106
        resilience=ResilienceConfig(
            name="sinergy-test",
            retry=NO_RETRY,
            ratelimit=RateLimit(max_calls=1, per_seconds=0.3),
        ),
    )
    with SinergyAuthoritativeSource(
        SinergyClient(config, client_factory=make_client_factory(handler)), config
    ) as source:
        source.lookup(SAMPLE_CPF_DIGITS)
        source.lookup(SAMPLE_CPF_DIGITS)

    first, second = sent_at
    assert second - first >= 0.25
