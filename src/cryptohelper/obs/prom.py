"""Prometheus instrumentation for the helper endpoints.

Labels stay coarse (result, upstream code) to keep cardinality flat.
"""
from __future__ import annotations

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
    CONTENT_TYPE_LATEST,
)

REGISTRY = CollectorRegistry()

PAYLOADS_COUNTER = Counter(
    "cryptohelper_payloads_total",
    "Signing payload generations by result.",
    ["result"],
    registry=REGISTRY,
)
TSA_FORWARD_COUNTER = Counter(
    "cryptohelper_tsa_forward_total",
    "Timestamp forwards by result and response code.",
    ["result", "code"],
    registry=REGISTRY,
)
TSA_LAT_HIST = Histogram(
    "cryptohelper_tsa_latency_ms",
    "Outbound TSA call latency (ms).",
    buckets=(5, 10, 25, 50, 100, 250, 500, 1000, 2500, 5000, 10000),
    registry=REGISTRY,
)


def observe_payloads(result: str) -> None:
    PAYLOADS_COUNTER.labels(result=result).inc()


def observe_tsa_forward(*, result: str, code: int, latency_ms: float | None = None) -> None:
    TSA_FORWARD_COUNTER.labels(result=result, code=str(code)).inc()
    if latency_ms is not None:
        TSA_LAT_HIST.observe(latency_ms)


def prometheus_latest() -> tuple[bytes, str]:
    return generate_latest(REGISTRY), CONTENT_TYPE_LATEST
