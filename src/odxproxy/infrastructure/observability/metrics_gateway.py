# Copyright (c)
# SPDX-License-Identifier: MIT
"""ODX gateway metrics.

Purpose:
    Prometheus metrics for calls dispatched through the gateway:
      * Latency histogram by action and outcome.
      * Error counter by action and failure reason.
      * HTTP status distribution.

Design:
    Functions return lazily-created singleton metric instances so importing
    the module never registers collectors twice.
"""

from __future__ import annotations

from prometheus_client import Counter, Histogram

__all__ = [
    "get_gateway_errors_total",
    "get_gateway_http_status_total",
    "get_gateway_latency_seconds",
]

_BUCKETS = (0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0)

_gateway_latency_seconds: Histogram | None = None
_gateway_errors_total: Counter | None = None
_gateway_http_status_total: Counter | None = None


def get_gateway_latency_seconds() -> Histogram:
    """Return (and lazily create) the dispatch latency histogram."""
    global _gateway_latency_seconds
    if _gateway_latency_seconds is None:
        _gateway_latency_seconds = Histogram(
            "odx_gateway_latency_seconds",
            "Latency of ODX gateway dispatches in seconds.",
            ["action", "outcome"],
            buckets=_BUCKETS,
        )
    return _gateway_latency_seconds


def get_gateway_errors_total() -> Counter:
    """Return (and lazily create) the dispatch error counter."""
    global _gateway_errors_total
    if _gateway_errors_total is None:
        _gateway_errors_total = Counter(
            "odx_gateway_errors_total",
            "Total number of failed ODX gateway dispatches.",
            ["action", "reason"],
        )
    return _gateway_errors_total


def get_gateway_http_status_total() -> Counter:
    """Return (and lazily create) the HTTP status counter."""
    global _gateway_http_status_total
    if _gateway_http_status_total is None:
        _gateway_http_status_total = Counter(
            "odx_gateway_http_status_total",
            "ODX gateway HTTP responses by status code.",
            ["action", "status"],
        )
    return _gateway_http_status_total
