from __future__ import annotations

import httpx
import pytest
import respx
from prometheus_client import REGISTRY

from odxproxy.application.schemas.dto.requests import InstanceInfo, KeywordOptions, RequestEnvelope
from odxproxy.domain.enums.action import OdooAction
from odxproxy.domain.exceptions.gateway import ServerError
from odxproxy.domain.value_objects.json_value import JsonArray
from odxproxy.infrastructure.external_apis.odx_gateway.client import OdxProxyClient
from odxproxy.infrastructure.observability.metrics_gateway import (
    get_gateway_errors_total,
    get_gateway_latency_seconds,
)

EXECUTE_URL = "https://gateway.test/api/odoo/execute"


def _sample(name: str, labels: dict[str, str]) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


def _envelope(instance: InstanceInfo) -> RequestEnvelope:
    return RequestEnvelope(
        id="M1",
        action=OdooAction.FIELDS_GET,
        model_id="res.partner",
        keyword=KeywordOptions(),
        params=JsonArray(),
        odoo_instance=instance,
    )


def test_metric_singletons_are_stable() -> None:
    assert get_gateway_latency_seconds() is get_gateway_latency_seconds()
    assert get_gateway_errors_total() is get_gateway_errors_total()


@pytest.mark.asyncio
@respx.mock
async def test_dispatch_records_status_latency_and_errors(
    client: OdxProxyClient, instance: InstanceInfo
) -> None:
    ok_labels = {"action": "fields_get", "outcome": "success"}
    err_labels = {"action": "fields_get", "reason": "ServerError"}
    status_labels = {"action": "fields_get", "status": "500"}
    ok_before = _sample("odx_gateway_latency_seconds_count", ok_labels)
    err_before = _sample("odx_gateway_errors_total", err_labels)
    status_before = _sample("odx_gateway_http_status_total", status_labels)

    respx.post(EXECUTE_URL).mock(
        side_effect=[
            httpx.Response(200, json={"jsonrpc": "2.0", "id": "M1", "result": {}}),
            httpx.Response(500, text="boom"),
        ]
    )

    await client.dispatch(_envelope(instance))
    with pytest.raises(ServerError):
        await client.dispatch(_envelope(instance))

    assert _sample("odx_gateway_latency_seconds_count", ok_labels) == ok_before + 1
    assert _sample("odx_gateway_errors_total", err_labels) == err_before + 1
    assert _sample("odx_gateway_http_status_total", status_labels) == status_before + 1
