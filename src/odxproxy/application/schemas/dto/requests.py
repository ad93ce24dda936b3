# Copyright (c)
# SPDX-License-Identifier: MIT
"""Request DTOs (Application Layer).

Purpose:
    Typed shapes for everything the client sends to the gateway: the Odoo
    instance descriptor, execution context, keyword options and the request
    envelope itself. Wire names are snake_case and part of the contract.

Layer: application/schemas/dto
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import Field

from odxproxy.application.schemas.dto.base import BaseDTO
from odxproxy.domain.enums.action import OdooAction
from odxproxy.domain.value_objects.json_value import JsonValue, to_native

__all__ = [
    "ClientInfo",
    "InstanceInfo",
    "KeywordOptions",
    "RequestContext",
    "RequestEnvelope",
]


class InstanceInfo(BaseDTO):
    """Connection details of the Odoo instance behind the gateway."""

    url: str = Field(..., description="Base URL of the Odoo instance.")
    user_id: int = Field(..., description="Odoo user id the API key belongs to.")
    db: str = Field(..., description="Odoo database name.")
    api_key: str = Field(..., repr=False, description="Odoo user API key.")


class ClientInfo(BaseDTO):
    """Everything ``OdxProxyClient.configure`` needs."""

    instance: InstanceInfo
    odx_api_key: str = Field(..., repr=False, description="Gateway API key.")
    gateway_url: str | None = Field(
        default=None,
        description="Gateway base URL; the public gateway is used when omitted.",
    )


class RequestContext(BaseDTO):
    """Odoo execution context sent with every call."""

    allowed_company_ids: list[int] | None = None
    default_company_id: int | None = None
    tz: str = "UTC"


class KeywordOptions(BaseDTO):
    """Secondary call parameters: projection, ordering, paging and context."""

    fields: list[str] | None = None
    order: str | None = None
    limit: int | None = None
    offset: int | None = None
    context: RequestContext = Field(default_factory=RequestContext)

    def without_paging(self) -> KeywordOptions:
        """Return a copy with ``fields/order/limit/offset`` cleared.

        Every action except ``search_read`` structurally cannot use them.
        """
        return self.model_copy(update={"fields": None, "order": None, "limit": None, "offset": None})


@dataclass(frozen=True, slots=True)
class RequestEnvelope:
    """A single RPC call, created per call and consumed once by dispatch.

    Attributes:
        id: Caller-supplied or generated request id.
        action: RPC verb.
        model_id: Odoo model name (e.g. ``"res.partner"``).
        keyword: Keyword options.
        params: Positional parameters.
        odoo_instance: Target Odoo instance.
        fn_name: Method name; only set for ``call_method``.
    """

    id: str
    action: OdooAction
    model_id: str
    keyword: KeywordOptions
    params: JsonValue
    odoo_instance: InstanceInfo
    fn_name: str | None = None

    def to_wire(self) -> dict[str, Any]:
        """Return the JSON-ready request body."""
        body: dict[str, Any] = {
            "id": self.id,
            "action": self.action.value,
            "model_id": self.model_id,
            "keyword": self.keyword.to_wire(),
            "params": to_native(self.params),
            "odoo_instance": self.odoo_instance.to_wire(),
        }
        if self.fn_name is not None:
            body["fn_name"] = self.fn_name
        return body
