# Copyright (c)
# SPDX-License-Identifier: MIT
"""Wire codec for the ODX gateway.

Request bodies and response envelopes can be large (hundreds of records with
nested relational fields). The ``*_async`` variants run the CPU-bound work in
a worker thread so the caller's event loop keeps serving other tasks.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any

from pydantic import ValidationError

from odxproxy.application.schemas.dto.requests import RequestEnvelope
from odxproxy.application.schemas.dto.responses import ResponseEnvelope, RpcError

__all__ = [
    "decode_error",
    "decode_response",
    "decode_response_async",
    "encode_request",
    "encode_request_async",
]


def encode_request(envelope: RequestEnvelope) -> bytes:
    """Serialize a request envelope to compact UTF-8 JSON."""
    return json.dumps(envelope.to_wire(), separators=(",", ":"), ensure_ascii=False).encode(
        "utf-8"
    )


def decode_response(body: bytes, result_type: Any = Any) -> ResponseEnvelope[Any]:
    """Decode a 2xx body into ``ResponseEnvelope[result_type]``.

    Raises:
        pydantic.ValidationError: If the body is not JSON or lacks ``jsonrpc``.
    """
    return ResponseEnvelope[result_type].model_validate_json(body)  # type: ignore[valid-type]


def decode_error(body: bytes) -> RpcError | None:
    """Decode a non-2xx body as an :class:`RpcError`, or ``None`` if it is not one."""
    try:
        return RpcError.model_validate_json(body)
    except ValidationError:
        return None


async def encode_request_async(envelope: RequestEnvelope) -> bytes:
    """Run :func:`encode_request` in a worker thread."""
    return await asyncio.to_thread(encode_request, envelope)


async def decode_response_async(body: bytes, result_type: Any = Any) -> ResponseEnvelope[Any]:
    """Run :func:`decode_response` in a worker thread."""
    return await asyncio.to_thread(decode_response, body, result_type)
