"""Prometheus metrics for docknet operations.

Tracks Docker API latency and the outcome of docknet create/delete/lookup
calls. Metrics live in the default prometheus_client registry.
"""
from __future__ import annotations

from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, Counter, Histogram, generate_latest

docker_api_duration = Histogram(
    "netmaster_docker_api_seconds",
    "Duration of Docker API calls",
    ["operation", "status"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1, 2, 5, 10, 30, float("inf")),
)

docknet_operations = Counter(
    "netmaster_docknet_operations_total",
    "Total docknet operations",
    ["operation", "result"],
)


def get_metrics() -> tuple[bytes, str]:
    """Generate Prometheus metrics output.

    Returns the exposition body and its content type, for the embedding
    process to serve on its own metrics endpoint.
    """
    return generate_latest(REGISTRY), CONTENT_TYPE_LATEST
