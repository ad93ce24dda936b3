# Copyright (c)
# SPDX-License-Identifier: MIT
"""Odoo field normalizers (Domain Layer).

Purpose:
    Decode policies for the backend's inconsistent field encodings:

    * :class:`RelationalReference`: Many2One fields, sent as ``[id, name]``,
      ``false``, ``null`` or ``[]``.
    * :class:`OptionalEntityValue`: scalar fields where ``false`` and
      ``null`` both mean "no value".
    * :func:`default_or_false`: write-side helper mapping empty strings and
      empty lists to ``False``, Odoo's "unset" marker.

Example:
    class Product(BaseModel):
        name: str
        categ_id: RelationalReference
        barcode: OptionalEntityValue[str]

    Product.model_validate_json(
        '{"name": "Apple", "categ_id": [4, "Fruit"], "barcode": false}'
    )

Layer:
    domain/value_objects
"""

from __future__ import annotations

from collections.abc import Mapping
from functools import lru_cache
from typing import Any, Generic, Optional, Self, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    ModelWrapValidatorHandler,
    RootModel,
    TypeAdapter,
    ValidationError,
    model_serializer,
    model_validator,
)
from pydantic_core import PydanticSerializationError, to_json

__all__ = [
    "OptionalEntityValue",
    "RelationalReference",
    "decode_exact",
    "default_or_false",
]

T = TypeVar("T")


def _int_or_none(token: object) -> int | None:
    if isinstance(token, bool):
        return None
    if isinstance(token, int):
        return token
    if isinstance(token, float) and token.is_integer():
        return int(token)
    return None


@lru_cache(maxsize=128)
def _adapter(annotation: Any) -> TypeAdapter[Any]:
    return TypeAdapter(annotation)


def decode_exact(annotation: Any, data: Any) -> Any:
    """Validate already-parsed JSON ``data`` as ``annotation`` without coercion.

    The value is checked under strict JSON rules, so ``true`` is not an
    ``int`` and ``"5"`` is not a number, while ISO strings still decode to
    dates and datetimes.

    Raises:
        ValidationError: If ``data`` does not have the requested shape.
        PydanticSerializationError: If ``data`` is not JSON-serializable.
    """
    return _adapter(annotation).validate_json(to_json(data), strict=True)


class RelationalReference(BaseModel):
    """A Many2One link to another record.

    ``id`` and ``name`` decode independently: a payload such as ``[42]`` or
    ``[42, false]`` yields ``id=42, name=None``. Only the absence forms
    (``false``, ``null``, ``[]``, ``[null, ...]``) force both to ``None``.

    Serialization follows the two shapes Odoo accepts on write: ``null`` when
    ``id`` is ``None``, otherwise ``[id, name]`` (``name`` may be ``null``).

    Attributes:
        id: Related record id.
        name: Display name of the related record.
    """

    model_config = ConfigDict(frozen=True)

    id: int | None = None
    name: str | None = None

    @model_validator(mode="wrap")
    @classmethod
    def _from_odoo_shape(cls, data: Any, handler: ModelWrapValidatorHandler[Self]) -> Self:
        if isinstance(data, (cls, Mapping)):
            return handler(data)
        if data is None or data is False:
            return handler({})
        if isinstance(data, (list, tuple)):
            if not data or data[0] is None:
                return handler({})
            name = data[1] if len(data) > 1 else None
            return handler(
                {
                    "id": _int_or_none(data[0]),
                    "name": name if isinstance(name, str) else None,
                }
            )
        raise ValueError("relational reference must be false, null or [id, name]")

    @model_serializer(mode="plain")
    def _to_odoo_shape(self) -> list[int | str | None] | None:
        if self.id is None:
            return None
        return [self.id, self.name]


class OptionalEntityValue(RootModel[Optional[T]], Generic[T]):  # noqa: UP007
    """A value where ``false``, ``null`` and undecodable payloads mean absent.

    ``null`` and ``false`` become ``None``. Anything else is decoded as ``T``
    with JSON types taken literally (``true`` or ``"5"`` are not an ``int``);
    if that fails the value silently becomes ``None`` so schema drift on the
    backend never fails the enclosing record.

    Note:
        For ``OptionalEntityValue[bool]`` a literal ``false`` is
        indistinguishable from "absent".
    """

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="wrap")
    @classmethod
    def _absent_on_falsy(cls, data: Any, handler: ModelWrapValidatorHandler[Self]) -> Self:
        if isinstance(data, cls):
            return data
        if data is None or data is False:
            return handler(None)
        try:
            value = decode_exact(cls.model_fields["root"].annotation, data)
        except (ValidationError, PydanticSerializationError):
            value = None
        return handler(value)

    @property
    def value(self) -> T | None:
        """The decoded value, or ``None`` when absent."""
        return self.root


def default_or_false(value: str | list[Any] | tuple[Any, ...]) -> Any:
    """Return ``False`` for an empty string or sequence, else the value itself.

    Useful when writing Char or x2many fields, where Odoo expects ``False``
    rather than ``""`` or ``[]`` to clear a value.
    """
    return value if value else False
