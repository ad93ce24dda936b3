# Copyright (c)
# SPDX-License-Identifier: MIT
"""Request id generation.

Ids are 27 upper-case hex characters: 11 digits of epoch milliseconds
followed by 16 random digits, so they sort roughly by creation time.
"""

from __future__ import annotations

import secrets
import time
from collections.abc import Callable

__all__ = ["RequestIdFactory", "new_request_id"]

type RequestIdFactory = Callable[[], str]


def new_request_id() -> str:
    """Return a new time-ordered request id."""
    millis = int(time.time() * 1000)
    return f"{millis:011X}{secrets.token_hex(8).upper()}"
