"""Prometheus metrics for the NeuroLink demo server."""

from __future__ import annotations

import logging

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

logger = logging.getLogger(__name__)


PROVIDER_ATTEMPTS = Counter(
    "neurolink_demo_provider_attempts_total",
    "Generation attempts by provider and outcome",
    ["provider", "outcome"],
)

GENERATE_REQUESTS = Counter(
    "neurolink_demo_generate_requests_total",
    "Logical generate calls by outcome",
    ["outcome"],
)

ATTEMPT_LATENCY = Histogram(
    "neurolink_demo_attempt_latency_seconds",
    "Latency of a single provider attempt in seconds",
    ["provider"],
    buckets=(0.1, 0.25, 0.5, 1, 2, 5, 10, 20, 30, 60),
)


def record_attempt(provider: str, outcome: str, latency_seconds: float) -> None:
    PROVIDER_ATTEMPTS.labels(provider=provider, outcome=outcome).inc()
    ATTEMPT_LATENCY.labels(provider=provider).observe(latency_seconds)


def record_generate(outcome: str) -> None:
    GENERATE_REQUESTS.labels(outcome=outcome).inc()


def render_metrics() -> tuple[bytes, str]:
    return generate_latest(), CONTENT_TYPE_LATEST
