# Copyright (c)
# SPDX-License-Identifier: MIT
"""
Odoo RPC action verbs.

Layer: domain/enums
"""
from __future__ import annotations

from enum import Enum


class OdooAction(str, Enum):
    """RPC verb selecting backend behavior.

    ``UPDATE`` is an alias of ``WRITE`` and serializes as ``"write"``.
    """

    SEARCH = "search"
    SEARCH_READ = "search_read"
    READ = "read"
    FIELDS_GET = "fields_get"
    SEARCH_COUNT = "search_count"
    CREATE = "create"
    WRITE = "write"
    UPDATE = "write"
    UNLINK = "unlink"
    CALL_METHOD = "call_method"

    @property
    def uses_paging(self) -> bool:
        """Whether ``fields/order/limit/offset`` keyword options apply."""
        return self is OdooAction.SEARCH_READ
