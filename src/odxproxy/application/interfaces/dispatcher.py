# src/odxproxy/application/interfaces/dispatcher.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Application-level dispatcher interface.

Synopsis:
    The narrow surface the per-action wrappers need from a transport:
    the configured Odoo instance, a request id source and ``dispatch``.
    ``OdxProxyClient`` satisfies it structurally; tests may pass fakes.

Layer:
    application/interfaces
"""

from __future__ import annotations

from typing import Any, Protocol

from odxproxy.application.schemas.dto.requests import InstanceInfo, RequestEnvelope
from odxproxy.application.schemas.dto.responses import ResponseEnvelope


class EnvelopeDispatcher(Protocol):
    """Transport capable of sending one request envelope."""

    @property
    def instance(self) -> InstanceInfo:
        """Configured Odoo instance; raises ``NotConfiguredError`` when absent."""
        ...

    def new_request_id(self) -> str:
        """Return a fresh request id."""
        ...

    async def dispatch(
        self, envelope: RequestEnvelope, result_type: Any = Any
    ) -> ResponseEnvelope[Any]:
        """Send ``envelope`` and decode the response as ``result_type``."""
        ...
