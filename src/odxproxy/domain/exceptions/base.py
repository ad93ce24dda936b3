# Copyright (c)
# SPDX-License-Identifier: MIT
"""
Base Domain Exceptions.

Summary:
    Canonical base class for every failure the client surfaces, so callers can
    catch a single type and still branch on a stable ``code``.

Layer:
    domain/exceptions
"""
from __future__ import annotations

from typing import Any


class OdxProxyError(Exception):
    """Base class for all odxproxy exceptions."""

    code: str = "ODX_PROXY_ERROR"

    def __init__(self, message: str = "", *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details: dict[str, Any] = details or {}
