from __future__ import annotations

import re

import pytest

from odxproxy.infrastructure import ids
from odxproxy.infrastructure.ids import new_request_id

_ID_RE = re.compile(r"^[0-9A-F]{27}$")


def test_request_id_shape() -> None:
    assert _ID_RE.match(new_request_id())


def test_request_ids_are_unique() -> None:
    assert len({new_request_id() for _ in range(500)}) == 500


def test_request_ids_sort_by_time(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(ids.time, "time", lambda: 1_700_000_000.0)
    earlier = new_request_id()
    monkeypatch.setattr(ids.time, "time", lambda: 1_700_000_001.0)
    later = new_request_id()

    assert earlier[:11] == "18BCFE56800"
    assert earlier < later
