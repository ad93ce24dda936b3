# Copyright (c)
# SPDX-License-Identifier: MIT
"""JSON Value Model (Domain Layer).

Purpose:
    A closed, immutable variant tree used to build outbound RPC parameters.
    Odoo calls mix domains, nested dicts, empty lists and scalars in a single
    ``params`` array; this model lets callers describe those shapes without
    falling back to untyped ``Any`` at the transport boundary.

Design:
    - Six frozen dataclass variants: :class:`JsonString`, :class:`JsonNumber`,
      :class:`JsonBool`, :class:`JsonNull`, :class:`JsonArray`,
      :class:`JsonObject`. ``JsonValue`` is their union; consumers use
      exhaustive ``match`` statements.
    - :func:`from_native` never fails. Inputs that have no standard JSON
      representation collapse to :data:`JSON_NULL`.
    - Numbers are double precision. Integral values serialize without a
      fractional part so record ids stay integers on the wire.

Example:
    params = from_native([[["is_company", "=", True]], {"limit": 80}])
    body = encode(params)  # b'[[["is_company","=",true]],{"limit":80}]'

Layer:
    domain/value_objects
"""

from __future__ import annotations

import json
import math
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import assert_never

from odxproxy.types import NativeJson

__all__ = [
    "JSON_NULL",
    "JsonArray",
    "JsonBool",
    "JsonNull",
    "JsonNumber",
    "JsonObject",
    "JsonString",
    "JsonValue",
    "encode",
    "from_native",
    "to_native",
]

# Largest integer a double represents exactly (2**53).
_MAX_EXACT_INT = 9_007_199_254_740_992


@dataclass(frozen=True, slots=True)
class JsonString:
    """JSON string."""

    value: str


@dataclass(frozen=True, slots=True)
class JsonNumber:
    """JSON number stored as a double."""

    value: float


@dataclass(frozen=True, slots=True)
class JsonBool:
    """JSON ``true`` / ``false``."""

    value: bool


@dataclass(frozen=True, slots=True)
class JsonNull:
    """JSON ``null``."""


@dataclass(frozen=True, slots=True)
class JsonArray:
    """Ordered JSON array."""

    items: tuple[JsonValue, ...] = ()

    def __iter__(self) -> Iterator[JsonValue]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


@dataclass(frozen=True, slots=True)
class JsonObject:
    """JSON object with unique string keys. The mapping is read-only."""

    members: Mapping[str, JsonValue] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "members", MappingProxyType(dict(self.members)))

    def __hash__(self) -> int:
        return hash(frozenset(self.members.items()))

    def __getitem__(self, key: str) -> JsonValue:
        return self.members[key]

    def __len__(self) -> int:
        return len(self.members)


type JsonValue = JsonString | JsonNumber | JsonBool | JsonNull | JsonArray | JsonObject

JSON_NULL = JsonNull()

_VARIANTS = (JsonString, JsonNumber, JsonBool, JsonNull, JsonArray, JsonObject)


def from_native(value: object) -> JsonValue:
    """Build a :data:`JsonValue` from a plain Python value.

    Strings, booleans, ints, floats, ``None``, lists/tuples and string-keyed
    mappings are converted recursively. Existing variants pass through
    unchanged. Anything else (sets, bytes, ``Decimal``, arbitrary objects,
    NaN/infinity, mappings with non-string keys, ints too large for a double)
    becomes :data:`JSON_NULL`.

    Args:
        value: Any Python value.

    Returns:
        The equivalent variant tree. This function never raises.
    """
    if isinstance(value, _VARIANTS):
        return value
    match value:
        case None:
            return JSON_NULL
        case str():
            return JsonString(value)
        # bool is a subclass of int; it must be matched first.
        case bool():
            return JsonBool(value)
        case int():
            try:
                return JsonNumber(float(value))
            except OverflowError:
                return JSON_NULL
        case float():
            return JsonNumber(value) if math.isfinite(value) else JSON_NULL
        case list() | tuple():
            return JsonArray(tuple(from_native(item) for item in value))
        case Mapping():
            if not all(isinstance(key, str) for key in value):
                return JSON_NULL
            return JsonObject({key: from_native(item) for key, item in value.items()})
        case _:
            return JSON_NULL


def _native_number(number: float) -> int | float:
    if number.is_integer() and abs(number) <= _MAX_EXACT_INT:
        return int(number)
    return number


def to_native(value: JsonValue) -> NativeJson:
    """Convert a variant tree back into plain Python JSON values."""
    match value:
        case JsonString(value=text):
            return text
        case JsonNumber(value=number):
            return _native_number(number)
        case JsonBool(value=flag):
            return flag
        case JsonNull():
            return None
        case JsonArray(items=items):
            return [to_native(item) for item in items]
        case JsonObject(members=members):
            return {key: to_native(item) for key, item in members.items()}
        case _:
            assert_never(value)


def encode(value: JsonValue) -> bytes:
    """Serialize a variant tree to compact UTF-8 JSON bytes."""
    return json.dumps(to_native(value), separators=(",", ":"), ensure_ascii=False).encode("utf-8")
