"""Prometheus metrics for cache refreshes, finance service calls and gateway traffic"""

from prometheus_client import Counter, Histogram

# Cache refresh metrics
refresh_counter = Counter(
    "finance_tracker_refresh_total",
    "Cache refresh cycles",
    ["outcome"],  # complete | partial
)

fetch_failures_counter = Counter(
    "finance_tracker_fetch_failures_total",
    "Collections left at their last known value after a failed fetch",
    ["collection"],  # transactions | categories | budgets | overview
)

# Finance service metrics
service_latency_histogram = Histogram(
    "finance_service_latency_seconds",
    "Finance service response time",
    ["operation"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

service_failures_counter = Counter(
    "finance_service_failures_total",
    "Finance service calls that failed",
    ["operation", "kind"],  # kind: connection | rejected
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_refresh(failed_collections: list[str]) -> None:
    """Record one refresh cycle and which collections kept stale data"""
    refresh_counter.labels(outcome="partial" if failed_collections else "complete").inc()
    for collection in failed_collections:
        fetch_failures_counter.labels(collection=collection).inc()
