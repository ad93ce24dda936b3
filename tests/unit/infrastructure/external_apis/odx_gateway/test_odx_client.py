from __future__ import annotations

import json
import logging
from typing import Any

import httpx
import pytest
import respx

from odxproxy.application.schemas.dto.requests import (
    ClientInfo,
    InstanceInfo,
    KeywordOptions,
    RequestEnvelope,
)
from odxproxy.domain.enums.action import OdooAction
from odxproxy.domain.exceptions.gateway import (
    DecodingError,
    InvalidResponseError,
    InvalidUrlError,
    NetworkError,
    NotConfiguredError,
    ServerError,
)
from odxproxy.domain.value_objects.json_value import from_native
from odxproxy.infrastructure.external_apis.odx_gateway.client import (
    OdxProxyClient,
    get_default_client,
)
from odxproxy.infrastructure.logging.logger import set_request_context

GATEWAY_URL = "https://gateway.test"
EXECUTE_URL = f"{GATEWAY_URL}/api/odoo/execute"
_OK = {"jsonrpc": "2.0", "id": "REQ1", "result": [1, 2]}


def _envelope(instance: InstanceInfo) -> RequestEnvelope:
    return RequestEnvelope(
        id="REQ1",
        action=OdooAction.SEARCH,
        model_id="res.partner",
        keyword=KeywordOptions(),
        params=from_native([[["is_company", "=", True]]]),
        odoo_instance=instance,
    )


@pytest.mark.asyncio
@respx.mock
async def test_unconfigured_dispatch_sends_nothing(
    http: httpx.AsyncClient, instance: InstanceInfo
) -> None:
    odx = OdxProxyClient(http=http)
    route = respx.post(EXECUTE_URL).mock(return_value=httpx.Response(200, json=_OK))

    assert not odx.is_configured
    with pytest.raises(NotConfiguredError):
        await odx.dispatch(_envelope(instance))
    with pytest.raises(NotConfiguredError):
        _ = odx.instance

    assert route.call_count == 0
    assert len(respx.calls) == 0


@pytest.mark.asyncio
@respx.mock
async def test_dispatch_posts_envelope_with_headers(
    client: OdxProxyClient, instance: InstanceInfo
) -> None:
    route = respx.post(EXECUTE_URL).mock(return_value=httpx.Response(200, json=_OK))

    envelope = await client.dispatch(_envelope(instance), list[int])

    assert envelope.result == [1, 2]
    assert envelope.error is None
    request = route.calls.last.request
    assert request.method == "POST"
    assert request.headers["x-api-key"] == "gw-key"
    assert request.headers["accept"] == "application/json"
    assert request.headers["content-type"] == "application/json"
    assert request.headers["accept-encoding"] == "gzip,deflate,br"
    assert request.headers["user-agent"].startswith("odxproxy-python/")
    assert client.timeout_s == 60.0

    body = json.loads(request.content)
    assert body["action"] == "search"
    assert body["odoo_instance"]["db"] == "prod"
    assert "fn_name" not in body


@pytest.mark.asyncio
@respx.mock
async def test_trailing_slash_is_stripped(
    http: httpx.AsyncClient, client_info: ClientInfo, instance: InstanceInfo
) -> None:
    odx = OdxProxyClient(http=http)
    odx.configure(client_info.model_copy(update={"gateway_url": f"{GATEWAY_URL}/"}), timeout_s=5)
    route = respx.post(EXECUTE_URL).mock(return_value=httpx.Response(200, json=_OK))

    await odx.dispatch(_envelope(instance))

    assert odx.gateway_url == GATEWAY_URL
    assert str(route.calls.last.request.url) == "https://gateway.test/api/odoo/execute"
    assert odx.timeout_s == 5.0


@pytest.mark.asyncio
async def test_default_gateway_url(http: httpx.AsyncClient, client_info: ClientInfo) -> None:
    odx = OdxProxyClient(http=http)
    odx.configure(client_info.model_copy(update={"gateway_url": None}))
    assert odx.gateway_url == "https://gateway.odxproxy.io"


@pytest.mark.asyncio
@pytest.mark.parametrize("bad_url", ["not a url", "ftp://gateway.test", "https://"])
async def test_invalid_url_keeps_previous_state(
    client: OdxProxyClient, client_info: ClientInfo, bad_url: str
) -> None:
    with pytest.raises(InvalidUrlError) as excinfo:
        client.configure(client_info.model_copy(update={"gateway_url": bad_url}))

    assert excinfo.value.code == "INVALID_URL"
    assert client.is_configured
    assert client.gateway_url == GATEWAY_URL


@pytest.mark.asyncio
async def test_invalid_url_on_fresh_client_stays_unconfigured(
    http: httpx.AsyncClient, client_info: ClientInfo
) -> None:
    odx = OdxProxyClient(http=http)
    with pytest.raises(InvalidUrlError):
        odx.configure(client_info.model_copy(update={"gateway_url": "not a url"}))
    assert not odx.is_configured


@pytest.mark.asyncio
@respx.mock
async def test_404_with_unparseable_body(client: OdxProxyClient, instance: InstanceInfo) -> None:
    respx.post(EXECUTE_URL).mock(return_value=httpx.Response(404, text="Not Found"))

    with pytest.raises(ServerError) as excinfo:
        await client.dispatch(_envelope(instance))

    err = excinfo.value
    assert err.error_code == 404
    assert err.error_message == "Unknown server error"
    assert err.data is None
    assert err.status_code == 404


@pytest.mark.asyncio
@respx.mock
async def test_non_2xx_with_error_body(client: OdxProxyClient, instance: InstanceInfo) -> None:
    respx.post(EXECUTE_URL).mock(
        return_value=httpx.Response(
            401, json={"code": 4010, "message": "Invalid API key", "data": {"hint": "rotate"}}
        )
    )

    with pytest.raises(ServerError) as excinfo:
        await client.dispatch(_envelope(instance))

    err = excinfo.value
    assert (err.error_code, err.error_message) == (4010, "Invalid API key")
    assert err.data is not None and err.data.to_native() == {"hint": "rotate"}
    assert err.status_code == 401


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "exc",
    [
        httpx.ConnectError("connection refused"),
        httpx.ReadTimeout("timed out"),
    ],
)
@respx.mock
async def test_transport_errors_become_network_errors(
    client: OdxProxyClient, instance: InstanceInfo, exc: Exception
) -> None:
    respx.post(EXECUTE_URL).mock(side_effect=exc)

    with pytest.raises(NetworkError) as excinfo:
        await client.dispatch(_envelope(instance))

    assert excinfo.value.cause is exc
    assert excinfo.value.__cause__ is exc


@pytest.mark.asyncio
@respx.mock
async def test_content_decoding_failure_is_invalid_response(
    client: OdxProxyClient, instance: InstanceInfo
) -> None:
    respx.post(EXECUTE_URL).mock(side_effect=httpx.DecodingError("bad gzip stream"))

    with pytest.raises(InvalidResponseError):
        await client.dispatch(_envelope(instance))


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [b"<html>maintenance</html>", b'{"id": 1, "result": []}'])
@respx.mock
async def test_2xx_non_envelope_is_decoding_error(
    client: OdxProxyClient, instance: InstanceInfo, body: bytes
) -> None:
    respx.post(EXECUTE_URL).mock(return_value=httpx.Response(200, content=body))

    with pytest.raises(DecodingError):
        await client.dispatch(_envelope(instance))


@pytest.mark.asyncio
@respx.mock
async def test_embedded_rpc_error_is_returned_not_raised(
    client: OdxProxyClient, instance: InstanceInfo
) -> None:
    respx.post(EXECUTE_URL).mock(
        return_value=httpx.Response(
            200,
            json={"jsonrpc": "2.0", "id": 5, "error": {"code": 200, "message": "Odoo Server Error"}},
        )
    )

    envelope = await client.dispatch(_envelope(instance), Any)

    assert envelope.id == "5"
    assert envelope.result is None
    assert envelope.error is not None
    with pytest.raises(ServerError):
        envelope.raise_for_error()


@pytest.mark.asyncio
@respx.mock
async def test_request_id_is_propagated(client: OdxProxyClient, instance: InstanceInfo) -> None:
    route = respx.post(EXECUTE_URL).mock(return_value=httpx.Response(200, json=_OK))
    set_request_context(request_id="corr-123")

    await client.dispatch(_envelope(instance))

    assert route.calls.last.request.headers["X-Request-ID"] == "corr-123"


@pytest.mark.asyncio
@respx.mock
async def test_failures_are_logged(
    client: OdxProxyClient, instance: InstanceInfo, caplog: pytest.LogCaptureFixture
) -> None:
    respx.post(EXECUTE_URL).mock(return_value=httpx.Response(503, text="unavailable"))

    with caplog.at_level(logging.WARNING), pytest.raises(ServerError):
        await client.dispatch(_envelope(instance))

    failed = [r for r in caplog.records if r.getMessage() == "odx.dispatch.failed"]
    assert failed
    assert failed[-1].extra["reason"] == "ServerError"  # type: ignore[attr-defined]
    assert "odoo-key" not in caplog.text
    assert "gw-key" not in caplog.text


@pytest.mark.asyncio
async def test_owned_transport_is_closed(client_info: ClientInfo) -> None:
    async with OdxProxyClient() as odx:
        odx.configure(client_info)
        http = odx._http
        assert http is not None
    assert http.is_closed


@pytest.mark.asyncio
async def test_shared_transport_is_left_open(
    http: httpx.AsyncClient, client_info: ClientInfo
) -> None:
    odx = OdxProxyClient(http=http)
    odx.configure(client_info)
    await odx.aclose()
    assert not http.is_closed
    assert not odx.is_configured


@pytest.mark.asyncio
@respx.mock
async def test_closed_client_is_unconfigured_until_reconfigured(
    client_info: ClientInfo, instance: InstanceInfo
) -> None:
    route = respx.post(EXECUTE_URL).mock(return_value=httpx.Response(200, json=_OK))
    odx = OdxProxyClient()
    odx.configure(client_info)
    first = odx._http
    await odx.aclose()

    assert not odx.is_configured
    with pytest.raises(NotConfiguredError):
        await odx.dispatch(_envelope(instance))
    assert route.call_count == 0

    odx.configure(client_info)
    assert odx._http is not None
    assert odx._http is not first
    assert not odx._http.is_closed

    resp = await odx.dispatch(_envelope(instance))
    assert resp.result == [1, 2]
    assert route.call_count == 1
    await odx.aclose()


@pytest.mark.asyncio
@respx.mock
async def test_externally_closed_shared_transport_is_not_configured(
    http: httpx.AsyncClient, client_info: ClientInfo, instance: InstanceInfo
) -> None:
    route = respx.post(EXECUTE_URL).mock(return_value=httpx.Response(200, json=_OK))
    odx = OdxProxyClient(http=http)
    odx.configure(client_info)
    await http.aclose()

    with pytest.raises(NotConfiguredError):
        await odx.dispatch(_envelope(instance))
    assert route.call_count == 0


@pytest.mark.asyncio
async def test_reconfigure_updates_instance(client: OdxProxyClient, client_info: ClientInfo) -> None:
    other = client_info.instance.model_copy(update={"db": "staging"})
    client.configure(client_info.model_copy(update={"instance": other}))
    assert client.instance.db == "staging"


@pytest.mark.asyncio
async def test_new_request_id_uses_factory(client: OdxProxyClient) -> None:
    assert client.new_request_id() == "01TESTREQUESTID"


def test_default_client_is_a_singleton() -> None:
    assert get_default_client() is get_default_client()
