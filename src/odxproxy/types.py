"""Project-wide JSON typing helpers.

These aliases model plain Python values as produced by ``json.loads`` and
accepted by ``json.dumps``. The tagged variant tree lives in
:mod:`odxproxy.domain.value_objects.json_value`.
"""

from __future__ import annotations

type NativeJsonPrimitive = None | bool | int | float | str
type NativeJson = NativeJsonPrimitive | list[NativeJson] | dict[str, NativeJson]

__all__ = ["NativeJson", "NativeJsonPrimitive"]
