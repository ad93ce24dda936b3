# src/odxproxy/adapters/gateways/odoo_gateway.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Adapter Gateway: Odoo RPC verbs on top of the ODX transport client.

Each method is the same composition:

* Resolve the configured Odoo instance (``NotConfiguredError`` if absent).
* Clear ``fields/order/limit/offset`` unless the action is ``search_read``.
* Build a :class:`RequestEnvelope` with the caller's id or a generated one.
* Dispatch and return the decoded :class:`ResponseEnvelope`.

Example:
    gateway = OdooGateway(client)
    resp = await gateway.search_read(
        "res.partner",
        [[["is_company", "=", True]]],
        KeywordOptions(fields=["name", "parent_id"], limit=10),
        result_type=list[Partner],
    )
    resp.raise_for_error()
"""

from __future__ import annotations

from typing import Any

from odxproxy.application.interfaces.dispatcher import EnvelopeDispatcher
from odxproxy.application.schemas.dto.requests import KeywordOptions, RequestEnvelope
from odxproxy.application.schemas.dto.responses import ResponseEnvelope
from odxproxy.domain.enums.action import OdooAction
from odxproxy.domain.value_objects.json_value import JsonArray, from_native
from odxproxy.infrastructure.external_apis.odx_gateway.client import get_default_client

__all__ = ["OdooGateway"]


class OdooGateway:
    """Per-action convenience wrappers over an :class:`EnvelopeDispatcher`."""

    def __init__(self, client: EnvelopeDispatcher | None = None) -> None:
        """Initialize the gateway.

        Args:
            client: Transport to dispatch through. Defaults to the
                process-wide client from ``get_default_client()``.
        """
        self._client: EnvelopeDispatcher = client if client is not None else get_default_client()

    # --------------------------------------------------------------------- #
    # Private helpers
    # --------------------------------------------------------------------- #
    async def _call(
        self,
        action: OdooAction,
        model: str,
        params: Any,
        keyword: KeywordOptions | None,
        *,
        id: str | None,
        result_type: Any,
        fn_name: str | None = None,
    ) -> ResponseEnvelope[Any]:
        instance = self._client.instance
        options = keyword if keyword is not None else KeywordOptions()
        if not action.uses_paging:
            options = options.without_paging()

        envelope = RequestEnvelope(
            id=id or self._client.new_request_id(),
            action=action,
            model_id=model,
            keyword=options,
            params=from_native(params),
            odoo_instance=instance,
            fn_name=fn_name,
        )
        return await self._client.dispatch(envelope, result_type)

    # --------------------------------------------------------------------- #
    # Read verbs
    # --------------------------------------------------------------------- #
    async def search(
        self,
        model: str,
        params: Any,
        keyword: KeywordOptions | None = None,
        *,
        id: str | None = None,
        result_type: Any = list[int],
    ) -> ResponseEnvelope[Any]:
        """Return the ids of records matching the domain in ``params``."""
        return await self._call(
            OdooAction.SEARCH, model, params, keyword, id=id, result_type=result_type
        )

    async def search_read(
        self,
        model: str,
        params: Any,
        keyword: KeywordOptions | None = None,
        *,
        id: str | None = None,
        result_type: Any = list[dict[str, Any]],
    ) -> ResponseEnvelope[Any]:
        """Search and read in one call.

        The only verb that honours ``fields``, ``order``, ``limit`` and
        ``offset``. Pass e.g. ``result_type=list[Partner]`` to decode typed
        records.
        """
        return await self._call(
            OdooAction.SEARCH_READ, model, params, keyword, id=id, result_type=result_type
        )

    async def read(
        self,
        model: str,
        params: Any,
        keyword: KeywordOptions | None = None,
        *,
        id: str | None = None,
        result_type: Any = Any,
    ) -> ResponseEnvelope[Any]:
        """Read records by id (``params`` is typically ``[[1, 2, 3]]``)."""
        return await self._call(
            OdooAction.READ, model, params, keyword, id=id, result_type=result_type
        )

    async def fields_get(
        self,
        model: str,
        keyword: KeywordOptions | None = None,
        *,
        id: str | None = None,
        result_type: Any = Any,
    ) -> ResponseEnvelope[Any]:
        """Describe the fields of ``model``. Always sends ``params: []``."""
        return await self._call(
            OdooAction.FIELDS_GET, model, JsonArray(), keyword, id=id, result_type=result_type
        )

    async def search_count(
        self,
        model: str,
        params: Any,
        keyword: KeywordOptions | None = None,
        *,
        id: str | None = None,
        result_type: Any = int,
    ) -> ResponseEnvelope[Any]:
        return await self._call(
            OdooAction.SEARCH_COUNT, model, params, keyword, id=id, result_type=result_type
        )

    # --------------------------------------------------------------------- #
    # Write verbs
    # --------------------------------------------------------------------- #
    async def create(
        self,
        model: str,
        params: Any,
        keyword: KeywordOptions | None = None,
        *,
        id: str | None = None,
        result_type: Any = Any,
    ) -> ResponseEnvelope[Any]:
        """Create one or more records; the backend returns the new id(s)."""
        return await self._call(
            OdooAction.CREATE, model, params, keyword, id=id, result_type=result_type
        )

    async def write(
        self,
        model: str,
        params: Any,
        keyword: KeywordOptions | None = None,
        *,
        id: str | None = None,
        result_type: Any = Any,
    ) -> ResponseEnvelope[Any]:
        """Update records; ``params`` is ``[[ids...], {field: value}]``."""
        return await self._call(
            OdooAction.WRITE, model, params, keyword, id=id, result_type=result_type
        )

    async def update(
        self,
        model: str,
        params: Any,
        keyword: KeywordOptions | None = None,
        *,
        id: str | None = None,
        result_type: Any = Any,
    ) -> ResponseEnvelope[Any]:
        """Alias of :meth:`write`."""
        return await self.write(model, params, keyword, id=id, result_type=result_type)

    async def unlink(
        self,
        model: str,
        params: Any,
        keyword: KeywordOptions | None = None,
        *,
        id: str | None = None,
        result_type: Any = Any,
    ) -> ResponseEnvelope[Any]:
        """Delete records by id."""
        return await self._call(
            OdooAction.UNLINK, model, params, keyword, id=id, result_type=result_type
        )

    async def remove(
        self,
        model: str,
        params: Any,
        keyword: KeywordOptions | None = None,
        *,
        id: str | None = None,
        result_type: Any = Any,
    ) -> ResponseEnvelope[Any]:
        """Alias of :meth:`unlink`."""
        return await self.unlink(model, params, keyword, id=id, result_type=result_type)

    async def call_method(
        self,
        model: str,
        fn_name: str,
        params: Any,
        keyword: KeywordOptions | None = None,
        *,
        id: str | None = None,
        result_type: Any = Any,
    ) -> ResponseEnvelope[Any]:
        """Invoke an arbitrary public model method (e.g. ``action_confirm``)."""
        return await self._call(
            OdooAction.CALL_METHOD,
            model,
            params,
            keyword,
            id=id,
            result_type=result_type,
            fn_name=fn_name,
        )
