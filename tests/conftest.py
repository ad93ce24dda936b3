# tests/conftest.py
from __future__ import annotations

from collections.abc import AsyncIterator

import httpx
import pytest

from odxproxy.application.schemas.dto.requests import ClientInfo, InstanceInfo
from odxproxy.infrastructure.external_apis.odx_gateway.client import OdxProxyClient
from odxproxy.infrastructure.logging.logger import set_request_context

GATEWAY_URL = "https://gateway.test"
EXECUTE_URL = f"{GATEWAY_URL}/api/odoo/execute"


@pytest.fixture
def instance() -> InstanceInfo:
    return InstanceInfo(url="https://erp.example.com", user_id=2, db="prod", api_key="odoo-key")


@pytest.fixture
def client_info(instance: InstanceInfo) -> ClientInfo:
    return ClientInfo(instance=instance, odx_api_key="gw-key", gateway_url=GATEWAY_URL)


@pytest.fixture
async def http() -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient() as client:
        yield client


@pytest.fixture
def client(http: httpx.AsyncClient, client_info: ClientInfo) -> OdxProxyClient:
    """Configured client with deterministic request ids."""
    odx = OdxProxyClient(http=http, id_factory=lambda: "01TESTREQUESTID")
    odx.configure(client_info)
    return odx


@pytest.fixture(autouse=True)
def _clear_request_context() -> None:
    set_request_context(request_id=None)
