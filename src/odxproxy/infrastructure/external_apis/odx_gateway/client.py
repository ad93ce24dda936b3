# src/odxproxy/infrastructure/external_apis/odx_gateway/client.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""ODX Gateway Transport Client (async, instrumented).

This transport owns the connection state shared by every call and runs the
dispatch pipeline:

* ``Unconfigured -> Configured`` via an explicit :meth:`OdxProxyClient.configure`.
* Off-thread request serialization and response decoding.
* A single POST to ``{gateway}/api/odoo/execute`` per call; no retries.
* Deterministic mapping of failures onto the gateway exception taxonomy.
* Prometheus metrics and structured JSON logs.

Notes:
    * Caller-facing exceptions are always :class:`OdxProxyError` subclasses;
      httpx and pydantic types never cross the boundary unwrapped.
    * A successful dispatch may still carry ``envelope.error``.
    * Reconfiguring while calls are in flight is not supported.
    * ``aclose`` returns the client to ``Unconfigured``.
"""

from __future__ import annotations

import time
from contextlib import suppress
from dataclasses import dataclass
from functools import lru_cache
from types import TracebackType
from typing import Any, Final, Self

import httpx
from pydantic import ValidationError

from odxproxy._version import __version__
from odxproxy.application.schemas.dto.requests import ClientInfo, InstanceInfo, RequestEnvelope
from odxproxy.application.schemas.dto.responses import ResponseEnvelope, RpcError
from odxproxy.domain.exceptions.base import OdxProxyError
from odxproxy.domain.exceptions.gateway import (
    DecodingError,
    InvalidResponseError,
    InvalidUrlError,
    NetworkError,
    NotConfiguredError,
)
from odxproxy.infrastructure.external_apis.odx_gateway.codec import (
    decode_error,
    decode_response_async,
    encode_request_async,
)
from odxproxy.infrastructure.external_apis.odx_gateway.settings import (
    DEFAULT_GATEWAY_URL,
    OdxProxySettings,
)
from odxproxy.infrastructure.ids import RequestIdFactory, new_request_id
from odxproxy.infrastructure.logging.logger import get_json_logger, get_request_id
from odxproxy.infrastructure.observability.metrics_gateway import (
    get_gateway_errors_total,
    get_gateway_http_status_total,
    get_gateway_latency_seconds,
)

__all__ = ["OdxProxyClient", "get_default_client"]

logger = get_json_logger(__name__)

_DEFAULT_TIMEOUT: Final[float] = 60.0
_EXECUTE_PATH: Final[str] = "/api/odoo/execute"
_UNKNOWN_SERVER_ERROR: Final[str] = "Unknown server error"


def _build_headers(api_key: str) -> dict[str, str]:
    return {
        "accept": "application/json",
        "content-type": "application/json",
        "x-api-key": api_key,
        "user-agent": f"odxproxy-python/{__version__}",
        "accept-encoding": "gzip,deflate,br",
    }


def _normalize_gateway_url(url: str | None) -> str:
    """Strip one trailing slash and validate an absolute http(s) URL.

    Raises:
        InvalidUrlError: If the URL cannot be used as a gateway base.
    """
    raw = url or DEFAULT_GATEWAY_URL
    if raw.endswith("/"):
        raw = raw[:-1]
    try:
        parsed = httpx.URL(raw)
    except httpx.InvalidURL as exc:
        raise InvalidUrlError(raw) from exc
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise InvalidUrlError(raw)
    return raw


@dataclass(frozen=True, slots=True)
class _ConnectionState:
    """Immutable snapshot of a successful ``configure`` call."""

    gateway_url: str
    instance: InstanceInfo
    timeout_s: float

    @property
    def endpoint(self) -> str:
        return f"{self.gateway_url}{_EXECUTE_PATH}"


class OdxProxyClient:
    """Async transport client for the ODX gateway."""

    def __init__(
        self,
        *,
        http: httpx.AsyncClient | None = None,
        id_factory: RequestIdFactory = new_request_id,
    ) -> None:
        """Create an unconfigured client.

        Args:
            http: Optional shared ``httpx.AsyncClient``. If omitted, a client
                is created on first ``configure`` and owned by this instance.
            id_factory: Callable producing request ids for callers that do
                not supply their own.
        """
        self._http = http
        self._owns_http = http is None
        self._id_factory = id_factory
        self._state: _ConnectionState | None = None

        self._latency = get_gateway_latency_seconds()
        self._errors = get_gateway_errors_total()
        self._status_total = get_gateway_http_status_total()

    # ---------------------------- Lifecycle ------------------------------ #

    def configure(self, info: ClientInfo, *, timeout_s: float | None = None) -> None:
        """Move the client to the configured state.

        The gateway URL defaults to the public gateway and loses one trailing
        slash. On :class:`InvalidUrlError` the previous state is kept. An existing
        HTTP client is reused with new headers; after :meth:`aclose` an owned
        client is created afresh.

        Args:
            info: Gateway credentials and Odoo instance.
            timeout_s: Per-request timeout in seconds (default 60).

        Raises:
            InvalidUrlError: If the gateway URL is malformed.
        """
        gateway_url = _normalize_gateway_url(info.gateway_url)
        timeout = float(timeout_s) if timeout_s is not None else _DEFAULT_TIMEOUT
        headers = _build_headers(info.odx_api_key)

        if self._http is None:
            self._http = httpx.AsyncClient(timeout=timeout, headers=headers)
        else:
            self._http.headers.update(headers)
            self._http.timeout = httpx.Timeout(timeout)

        self._state = _ConnectionState(
            gateway_url=gateway_url,
            instance=info.instance,
            timeout_s=timeout,
        )
        logger.info(
            "odx.client.configured",
            extra={"extra": {"gateway_url": gateway_url, "timeout_s": timeout}},
        )

    def configure_from_settings(self, settings: OdxProxySettings) -> None:
        """Configure from environment-backed :class:`OdxProxySettings`."""
        self.configure(settings.to_client_info(), timeout_s=settings.timeout_s)

    async def aclose(self) -> None:
        """Return to the unconfigured state.

        The underlying HTTP client is closed only if this instance owns it.
        Calling ``configure`` again afterwards is supported.
        """
        self._state = None
        if self._owns_http and self._http is not None:
            http, self._http = self._http, None
            if not http.is_closed:
                await http.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    # ---------------------------- Accessors ------------------------------ #

    @property
    def is_configured(self) -> bool:
        return self._state is not None

    @property
    def gateway_url(self) -> str | None:
        return self._state.gateway_url if self._state else None

    @property
    def timeout_s(self) -> float | None:
        return self._state.timeout_s if self._state else None

    @property
    def instance(self) -> InstanceInfo:
        """Return the configured Odoo instance.

        Raises:
            NotConfiguredError: If ``configure`` was never called.
        """
        return self._require_state().instance

    def new_request_id(self) -> str:
        return self._id_factory()

    # ---------------------------- Dispatch ------------------------------- #

    async def dispatch(
        self, envelope: RequestEnvelope, result_type: Any = Any
    ) -> ResponseEnvelope[Any]:
        """Send one request envelope and decode the response envelope.

        Args:
            envelope: The request to send.
            result_type: Expected shape of ``result`` (e.g. ``list[int]`` or a
                pydantic model). Mismatches degrade ``result`` to ``None``.

        Returns:
            The decoded envelope. Check ``envelope.error`` as well.

        Raises:
            NotConfiguredError: Before ``configure``, after ``aclose`` or when a
                shared HTTP client was closed; no request is sent.
            NetworkError: On transport failure (connect, DNS, TLS, timeout).
            InvalidResponseError: If the response body cannot be decoded by
                the transport (e.g. corrupt content encoding).
            ServerError: On any status outside 200-299.
            DecodingError: If a 2xx body is not a valid envelope.
        """
        state = self._require_state()
        action = envelope.action.value
        log_fields = {"action": action, "model": envelope.model_id, "rpc_id": envelope.id}
        logger.debug("odx.dispatch.start", extra={"extra": log_fields})

        start = time.perf_counter()
        error_reason: str | None = None
        try:
            body = await encode_request_async(envelope)
            response = await self._post(state, body)

            with suppress(Exception):
                self._status_total.labels(action, str(response.status_code)).inc()

            if not 200 <= response.status_code <= 299:
                error = decode_error(response.content) or RpcError(
                    code=response.status_code, message=_UNKNOWN_SERVER_ERROR
                )
                raise error.to_exception(status_code=response.status_code)

            try:
                decoded = await decode_response_async(response.content, result_type)
            except ValidationError as exc:
                raise DecodingError(exc) from exc
        except OdxProxyError as exc:
            error_reason = type(exc).__name__
            logger.warning(
                "odx.dispatch.failed",
                extra={"extra": {**log_fields, "reason": error_reason, "error": str(exc)}},
            )
            raise
        finally:
            elapsed = time.perf_counter() - start
            with suppress(Exception):
                outcome = "error" if error_reason else "success"
                self._latency.labels(action=action, outcome=outcome).observe(elapsed)
                if error_reason:
                    self._errors.labels(action=action, reason=error_reason).inc()

        logger.debug(
            "odx.dispatch.complete",
            extra={
                "extra": {
                    **log_fields,
                    "elapsed_ms": round(elapsed * 1000, 3),
                    "rpc_error": decoded.error is not None,
                }
            },
        )
        return decoded

    # --------------------------- Internal helpers ------------------------ #

    def _require_state(self) -> _ConnectionState:
        if self._state is None or self._http is None or self._http.is_closed:
            raise NotConfiguredError()
        return self._state

    async def _post(self, state: _ConnectionState, body: bytes) -> httpx.Response:
        """Issue the single POST for a dispatch and wrap transport failures."""
        assert self._http is not None
        headers: dict[str, str] = {}
        request_id = get_request_id()
        if request_id:
            headers["X-Request-ID"] = request_id
        try:
            return await self._http.post(
                state.endpoint,
                content=body,
                headers=headers,
                timeout=state.timeout_s,
            )
        except httpx.DecodingError as exc:
            raise InvalidResponseError(exc) from exc
        except httpx.HTTPError as exc:
            raise NetworkError(exc) from exc


@lru_cache(maxsize=1)
def get_default_client() -> OdxProxyClient:
    """Return the process-wide default client (created unconfigured).

    Host applications configure it once at startup; tests should build their
    own :class:`OdxProxyClient` instances instead.
    """
    return OdxProxyClient()
