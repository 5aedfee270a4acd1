"""
Prometheus metrics and instrumentation helpers.
"""

from __future__ import annotations

import time
from typing import Awaitable, Callable

from prometheus_client import Counter, Histogram
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response


HTTP_REQUESTS_TOTAL = Counter(
    "csrms_http_requests_total",
    "Total count of HTTP requests processed.",
    ["method", "path", "status"],
)

HTTP_REQUEST_DURATION = Histogram(
    "csrms_http_request_duration_seconds",
    "Histogram of HTTP request durations in seconds.",
    ["method", "path"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, 10),
)

HTTP_REQUEST_ERRORS = Counter(
    "csrms_http_request_errors_total",
    "Count of HTTP requests resulting in error responses.",
    ["method", "path", "status"],
)

SERVICE_REQUESTS_SUBMITTED = Counter(
    "csrms_service_requests_submitted_total",
    "Service requests persisted through the submission workflow.",
    ["category"],
)

NOTIFICATIONS_DISPATCHED = Counter(
    "csrms_notifications_dispatched_total",
    "Notification attempts partitioned by type and outcome.",
    ["type", "outcome"],
)

SIDE_EFFECT_FAILURES = Counter(
    "csrms_side_effect_failures_total",
    "Best-effort side effects that failed and were swallowed.",
    ["effect"],
)


def _normalise_path(request: Request) -> str:
    """Prefer route path templates to reduce cardinality in metrics."""
    route = request.scope.get("route")
    if route and hasattr(route, "path_format"):
        return route.path_format
    if route and hasattr(route, "path"):
        return route.path
    return request.url.path


def observe_http_request(method: str, path: str, status_code: int, duration: float) -> None:
    """Record metrics for an HTTP request."""
    status_str = str(status_code)
    HTTP_REQUESTS_TOTAL.labels(method=method, path=path, status=status_str).inc()
    HTTP_REQUEST_DURATION.labels(method=method, path=path).observe(duration)

    if status_code >= 400:
        HTTP_REQUEST_ERRORS.labels(method=method, path=path, status=status_str).inc()


def record_submission(category: str) -> None:
    """Increment the submitted service request counter."""
    SERVICE_REQUESTS_SUBMITTED.labels(category=category).inc()


def record_notification(notification_type: str, outcome: str) -> None:
    """Increment notification counters (outcome: sent, failed, skipped)."""
    NOTIFICATIONS_DISPATCHED.labels(type=notification_type, outcome=outcome).inc()


def record_side_effect_failure(effect: str) -> None:
    """Increment the swallowed side-effect failure counter."""
    SIDE_EFFECT_FAILURES.labels(effect=effect).inc()


class MetricsMiddleware(BaseHTTPMiddleware):
    """ASGI middleware for capturing request metrics."""

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        method = request.method
        start = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            duration = time.perf_counter() - start
            observe_http_request(method, _normalise_path(request), 500, duration)
            raise

        duration = time.perf_counter() - start
        observe_http_request(method, _normalise_path(request), response.status_code, duration)
        return response


__all__ = [
    "MetricsMiddleware",
    "HTTP_REQUESTS_TOTAL",
    "HTTP_REQUEST_DURATION",
    "HTTP_REQUEST_ERRORS",
    "SERVICE_REQUESTS_SUBMITTED",
    "NOTIFICATIONS_DISPATCHED",
    "SIDE_EFFECT_FAILURES",
    "observe_http_request",
    "record_submission",
    "record_notification",
    "record_side_effect_failure",
]
