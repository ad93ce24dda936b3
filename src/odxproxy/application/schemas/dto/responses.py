# Copyright (c)
# SPDX-License-Identifier: MIT
"""Response DTOs (Application Layer).

Purpose:
    Decode the gateway's JSON-RPC-like envelope. The backend is not under our
    control, so decoding is deliberately lenient:

    * ``id`` may arrive as a JSON integer or string; it always decodes to a
      string and never fails (``""`` when unusable).
    * ``result`` and ``error`` each degrade to ``None`` when they are missing or
      do not match the expected shape, instead of failing the whole envelope.
    * ``result`` is matched against its type without coercion: ``true`` is
      not a ``1`` and ``"5"`` is not a ``5``.
    * Only ``jsonrpc`` is structurally required.

Layer: application/schemas/dto
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    ValidationError,
    ValidatorFunctionWrapHandler,
    field_validator,
)
from pydantic_core import PydanticSerializationError

from odxproxy.domain.exceptions.gateway import ServerError
from odxproxy.domain.value_objects.decoded_json import DecodedJsonValue
from odxproxy.domain.value_objects.odoo_fields import decode_exact

__all__ = ["ResponseEnvelope", "RpcError"]

T = TypeVar("T")


class RpcError(BaseModel):
    """Error object reported by the gateway or the backend.

    Attributes:
        code: Numeric error code (HTTP status when synthesized locally).
        message: Human-readable message.
        data: Free-form diagnostic payload, if any.
    """

    model_config = ConfigDict(frozen=True)

    code: int
    message: str
    data: DecodedJsonValue | None = None

    def to_exception(self, *, status_code: int | None = None) -> ServerError:
        """Build the raisable :class:`ServerError` carrying this payload."""
        return ServerError(self.code, self.message, data=self.data, status_code=status_code)


class ResponseEnvelope(BaseModel, Generic[T]):
    """Gateway response envelope, generic over the expected result shape.

    ``result`` and ``error`` may both be present or both be absent; callers
    must check the envelope's ``error`` even when dispatch succeeded.
    """

    model_config = ConfigDict(frozen=True)

    jsonrpc: str
    id: str = ""
    result: T | None = None
    error: RpcError | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str:
        if isinstance(value, bool):
            return ""
        if isinstance(value, int):
            return str(value)
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        if isinstance(value, str):
            return value
        return ""

    @field_validator("result", mode="wrap")
    @classmethod
    def _exact_result(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        if value is None:
            return None
        try:
            return decode_exact(cls.model_fields["result"].annotation, value)
        except (ValidationError, PydanticSerializationError):
            return None

    @field_validator("error", mode="wrap")
    @classmethod
    def _absent_on_mismatch(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        try:
            return handler(value)
        except ValidationError:
            return None

    def raise_for_error(self) -> None:
        """Raise :class:`ServerError` if the envelope carries an RPC error."""
        if self.error is not None:
            raise self.error.to_exception()
