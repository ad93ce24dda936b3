from __future__ import annotations

import json
from typing import Any

import pytest
from pydantic import ValidationError

from odxproxy.application.schemas.dto.requests import (
    InstanceInfo,
    KeywordOptions,
    RequestEnvelope,
)
from odxproxy.domain.enums.action import OdooAction
from odxproxy.domain.value_objects.json_value import from_native
from odxproxy.infrastructure.external_apis.odx_gateway.codec import (
    decode_error,
    decode_response,
    decode_response_async,
    encode_request,
    encode_request_async,
)


def _envelope(instance: InstanceInfo) -> RequestEnvelope:
    return RequestEnvelope(
        id="REQ1",
        action=OdooAction.SEARCH_COUNT,
        model_id="res.partner",
        keyword=KeywordOptions(),
        params=from_native([[["name", "ilike", "Société"]]]),
        odoo_instance=instance,
    )


def test_encode_request_is_compact_utf8(instance: InstanceInfo) -> None:
    body = encode_request(_envelope(instance))

    assert b" " not in body
    assert "Société".encode() in body
    assert json.loads(body)["params"] == [[["name", "ilike", "Société"]]]


async def test_encode_request_async_matches_sync(instance: InstanceInfo) -> None:
    envelope = _envelope(instance)
    assert await encode_request_async(envelope) == encode_request(envelope)


def test_decode_response_typed_result() -> None:
    envelope = decode_response(b'{"jsonrpc":"2.0","id":1,"result":[3,4]}', list[int])
    assert envelope.result == [3, 4]
    assert envelope.id == "1"


async def test_decode_response_async() -> None:
    envelope = await decode_response_async(b'{"jsonrpc":"2.0","id":"a","result":12}', int)
    assert envelope.result == 12


@pytest.mark.parametrize("body", [b"", b"<html>oops</html>", b'{"id": 1}'])
def test_decode_response_rejects_non_envelopes(body: bytes) -> None:
    with pytest.raises(ValidationError):
        decode_response(body, Any)


def test_decode_error() -> None:
    error = decode_error(b'{"code": 401, "message": "Invalid API key"}')
    assert error is not None
    assert (error.code, error.message, error.data) == (401, "Invalid API key", None)


@pytest.mark.parametrize("body", [b"", b"Not Found", b'{"message": "no code"}'])
def test_decode_error_returns_none_for_unusable_bodies(body: bytes) -> None:
    assert decode_error(body) is None
