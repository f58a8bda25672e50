"""
Prometheus metrics, exposed at /metrics.
"""

from fastapi import Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

http_requests = Counter(
    "devevent_http_requests_total",
    "HTTP requests handled",
    ["method", "status_code"],
)

event_creations = Counter(
    "devevent_event_creations_total",
    "Event creation pipeline outcomes",
    ["status"],  # created, or the failing error code
)

asset_upload_latency = Histogram(
    "devevent_asset_upload_latency_seconds",
    "Time spent uploading event images to the asset store",
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

booking_attempts = Counter(
    "devevent_booking_attempts_total",
    "Booking creation outcomes",
    ["status"],  # created, or the failing error code
)

cache_operations = Counter(
    "devevent_cache_operations_total",
    "Event listing cache operations",
    ["operation", "result"],
)


def metrics_endpoint() -> Response:
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


def record_event_creation(status: str):
    event_creations.labels(status=status).inc()


def record_booking_attempt(status: str):
    booking_attempts.labels(status=status).inc()


def record_cache_operation(operation: str, hit: bool):
    cache_operations.labels(operation=operation, result="hit" if hit else "miss").inc()
