# Copyright (c)
# SPDX-License-Identifier: MIT
"""Base DTO (Application Layer).

Purpose:
    Canonical Pydantic base for the wire DTOs exchanged with the gateway.
    Transport-agnostic.

Layer: application/schemas/dto
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class BaseDTO(BaseModel):
    """Base class for application-layer DTOs.

    Notes:
        - Immutable once built (``frozen=True``).
        - Accepts both field names and wire aliases (``populate_by_name``).
        - Strings are sent verbatim; credentials and domain values are never
          trimmed.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
    )

    def to_wire(self) -> dict[str, Any]:
        """Dump with wire aliases, omitting absent optional fields."""
        return self.model_dump(by_alias=True, exclude_none=True)
