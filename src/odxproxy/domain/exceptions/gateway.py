# Copyright (c)
# SPDX-License-Identifier: MIT
"""
Gateway Exceptions

Purpose:
    Closed taxonomy of failures produced by the dispatch pipeline. Every kind
    carries enough structure (code, message, original cause) to render a
    human-readable description without inspecting client internals.

Layer: domain/exceptions
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from .base import OdxProxyError

if TYPE_CHECKING:
    from odxproxy.domain.value_objects.decoded_json import DecodedJsonValue


class NotConfiguredError(OdxProxyError):
    """The client was used before a successful ``configure`` call."""

    code = "NOT_CONFIGURED"

    def __init__(self) -> None:
        super().__init__(
            "OdxProxyClient has not been configured. Call configure() before use."
        )


class InvalidUrlError(OdxProxyError):
    """The gateway URL could not be parsed into an absolute http(s) URL."""

    code = "INVALID_URL"

    def __init__(self, url: str) -> None:
        super().__init__("The gateway URL is invalid.", details={"url": url})
        self.url = url


class NetworkError(OdxProxyError):
    """Transport-level failure (connect, DNS, TLS, timeout, ...)."""

    code = "NETWORK_ERROR"

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"Network error: {cause}", details={"cause": type(cause).__name__})
        self.cause = cause


class ServerError(OdxProxyError):
    """Non-2xx HTTP status, or an RPC error reported by the backend."""

    code = "SERVER_ERROR"

    def __init__(
        self,
        error_code: int,
        message: str,
        *,
        data: DecodedJsonValue | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(
            f"Server error: {error_code} - {message}",
            details={"code": error_code, "status": status_code},
        )
        self.error_code = error_code
        self.error_message = message
        self.data = data
        self.status_code = status_code


class InvalidResponseError(OdxProxyError):
    """The transport returned something that is not a usable HTTP response."""

    code = "INVALID_RESPONSE"

    def __init__(self, raw: object | None = None) -> None:
        super().__init__("Invalid response from the server.")
        self.raw = raw


class DecodingError(OdxProxyError):
    """A 2xx body did not match the expected envelope/result shape."""

    code = "DECODING_ERROR"

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"Failed to decode response: {cause}")
        self.cause = cause


__all__ = [
    "DecodingError",
    "InvalidResponseError",
    "InvalidUrlError",
    "NetworkError",
    "NotConfiguredError",
    "ServerError",
]
