"""Prometheus instrumentation for the encryption pipeline.

Labels stay low-cardinality: result, failure kind and stage name only.
Parameter names and values never reach a label.
"""
from __future__ import annotations
from prometheus_client import (
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
    CONTENT_TYPE_LATEST,
)

# Registry must be created before metric objects reference it.
REGISTRY = CollectorRegistry()

ENCRYPT_COUNTER = Counter(
    "ewp_encrypt_total",
    "encrypt() calls by result.",
    ["result"],
    registry=REGISTRY,
)
FAILURE_COUNTER = Counter(
    "ewp_encrypt_failures_total",
    "encrypt() failures by kind.",
    ["kind"],
    registry=REGISTRY,
)
STAGE_HIST = Histogram(
    "ewp_stage_latency_ms",
    "Per-stage latency of the sign/encrypt pipeline (ms).",
    ["stage"],
    buckets=(0.5,1,2,5,10,25,50,100,250,500,1000),
    registry=REGISTRY,
)
ENVELOPE_HIST = Histogram(
    "ewp_envelope_bytes",
    "Size of produced PKCS7 envelopes (bytes).",
    buckets=(512,1024,2048,3072,4096,6144,8192,16384),
    registry=REGISTRY,
)


def observe_stage(stage: str, latency_ms: float):
    STAGE_HIST.labels(stage=stage).observe(latency_ms)


def observe_success(envelope_bytes: int):
    ENCRYPT_COUNTER.labels(result="ok").inc()
    ENVELOPE_HIST.observe(envelope_bytes)


def observe_failure(kind: str):
    ENCRYPT_COUNTER.labels(result="fail").inc()
    FAILURE_COUNTER.labels(kind=kind).inc()


def prometheus_latest() -> tuple[bytes, str]:
    return generate_latest(REGISTRY), CONTENT_TYPE_LATEST
