# Copyright (c)
# SPDX-License-Identifier: MIT
"""ODX Proxy client.

Purpose:
    Async Python client for the ODX gateway, a hosted HTTPS proxy in front of
    Odoo's JSON-RPC API. This module re-exports the public surface: the
    transport client, per-action wrappers, request/response DTOs, JSON value
    model, Odoo field normalizers and the error taxonomy.

Example:
    client = OdxProxyClient()
    client.configure_from_settings(OdxProxySettings())
    odoo = OdooGateway(client)
    resp = await odoo.search_count("res.partner", [[["is_company", "=", True]]])
"""

from __future__ import annotations

from odxproxy._version import __version__
from odxproxy.adapters.gateways.odoo_gateway import OdooGateway
from odxproxy.application.schemas.dto.requests import (
    ClientInfo,
    InstanceInfo,
    KeywordOptions,
    RequestContext,
    RequestEnvelope,
)
from odxproxy.application.schemas.dto.responses import ResponseEnvelope, RpcError
from odxproxy.domain.enums.action import OdooAction
from odxproxy.domain.exceptions.base import OdxProxyError
from odxproxy.domain.exceptions.gateway import (
    DecodingError,
    InvalidResponseError,
    InvalidUrlError,
    NetworkError,
    NotConfiguredError,
    ServerError,
)
from odxproxy.domain.value_objects.decoded_json import DecodedJsonValue, UnsupportedJsonError
from odxproxy.domain.value_objects.json_value import (
    JSON_NULL,
    JsonArray,
    JsonBool,
    JsonNull,
    JsonNumber,
    JsonObject,
    JsonString,
    JsonValue,
    encode,
    from_native,
    to_native,
)
from odxproxy.domain.value_objects.odoo_fields import (
    OptionalEntityValue,
    RelationalReference,
    default_or_false,
)
from odxproxy.infrastructure.external_apis.odx_gateway.client import (
    OdxProxyClient,
    get_default_client,
)
from odxproxy.infrastructure.external_apis.odx_gateway.settings import OdxProxySettings

__all__ = [
    "__version__",
    # Transport
    "OdxProxyClient",
    "OdxProxySettings",
    "OdooGateway",
    "get_default_client",
    # DTOs
    "ClientInfo",
    "InstanceInfo",
    "KeywordOptions",
    "OdooAction",
    "RequestContext",
    "RequestEnvelope",
    "ResponseEnvelope",
    "RpcError",
    # JSON values
    "DecodedJsonValue",
    "JSON_NULL",
    "JsonArray",
    "JsonBool",
    "JsonNull",
    "JsonNumber",
    "JsonObject",
    "JsonString",
    "JsonValue",
    "UnsupportedJsonError",
    "encode",
    "from_native",
    "to_native",
    # Odoo fields
    "OptionalEntityValue",
    "RelationalReference",
    "default_or_false",
    # Errors
    "DecodingError",
    "InvalidResponseError",
    "InvalidUrlError",
    "NetworkError",
    "NotConfiguredError",
    "OdxProxyError",
    "ServerError",
]
