# Copyright (c)
# SPDX-License-Identifier: MIT
"""Type-Erased Decode Container (Domain Layer).

Purpose:
    Decode arbitrary, backend-controlled JSON (e.g. the free-form ``data`` of an
    RPC error) into the same variant tree as the outbound JSON Value Model.

Design:
    - Variants are tried in a fixed precedence:
      ``null -> string -> number -> bool -> array -> object``.
      A numeric-looking string stays a string, and ``true`` is only ever a
      bool, never a number.
    - Arrays and objects decode eagerly and recursively.
    - Input outside the JSON grammar raises :class:`UnsupportedJsonError` for
      that subtree; there is no fallback to ``null``.
    - Usable directly as a pydantic field type.

Layer:
    domain/value_objects
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from typing import Any

from pydantic import GetCoreSchemaHandler, GetJsonSchemaHandler
from pydantic.json_schema import JsonSchemaValue
from pydantic_core import CoreSchema, core_schema

from odxproxy.domain.value_objects.json_value import (
    JSON_NULL,
    JsonArray,
    JsonBool,
    JsonNumber,
    JsonObject,
    JsonString,
    JsonValue,
    encode,
    to_native,
)
from odxproxy.types import NativeJson

__all__ = ["DecodedJsonValue", "UnsupportedJsonError"]


class UnsupportedJsonError(ValueError):
    """Raised when a value matches none of the six JSON variants."""


def _reject_constant(token: str) -> float:
    raise UnsupportedJsonError(f"Unsupported JSON constant: {token}")


def _decode_node(node: object) -> JsonValue:
    if node is None:
        return JSON_NULL
    if isinstance(node, str):
        return JsonString(node)
    if isinstance(node, (int, float)) and not isinstance(node, bool):
        try:
            number = float(node)
        except OverflowError as exc:
            raise UnsupportedJsonError("JSON number out of range") from exc
        if not math.isfinite(number):
            raise UnsupportedJsonError("JSON number out of range")
        return JsonNumber(number)
    if isinstance(node, bool):
        return JsonBool(node)
    if isinstance(node, list):
        return JsonArray(tuple(_decode_node(item) for item in node))
    if isinstance(node, dict):
        members: dict[str, JsonValue] = {}
        for key, item in node.items():
            if not isinstance(key, str):
                raise UnsupportedJsonError("JSON object keys must be strings")
            members[key] = _decode_node(item)
        return JsonObject(members)
    raise UnsupportedJsonError(f"Unsupported JSON type: {type(node).__name__}")


@dataclass(frozen=True, slots=True)
class DecodedJsonValue:
    """A decoded JSON document of unknown shape.

    Attributes:
        value: The decoded variant tree.
    """

    value: JsonValue

    @classmethod
    def decode(cls, raw: bytes | str) -> DecodedJsonValue:
        """Parse raw JSON text and decode it with the fixed precedence.

        Raises:
            UnsupportedJsonError: If the text is not standard JSON.
        """
        try:
            parsed = json.loads(raw, parse_constant=_reject_constant)
        except json.JSONDecodeError as exc:
            raise UnsupportedJsonError(f"Corrupted JSON: {exc.msg}") from exc
        return cls.from_parsed(parsed)

    @classmethod
    def from_parsed(cls, parsed: object) -> DecodedJsonValue:
        """Decode an already-parsed Python value (``json.loads`` output)."""
        return cls(_decode_node(parsed))

    def to_native(self) -> NativeJson:
        return to_native(self.value)

    def encode(self) -> bytes:
        return encode(self.value)

    # -- pydantic integration ------------------------------------------------

    @classmethod
    def _validate(cls, value: Any) -> DecodedJsonValue:
        if isinstance(value, cls):
            return value
        return cls.from_parsed(value)

    @classmethod
    def __get_pydantic_core_schema__(
        cls, _source: Any, _handler: GetCoreSchemaHandler
    ) -> CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls._validate,
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda decoded: decoded.to_native()
            ),
        )

    @classmethod
    def __get_pydantic_json_schema__(
        cls, _core_schema: CoreSchema, _handler: GetJsonSchemaHandler
    ) -> JsonSchemaValue:
        return {}
