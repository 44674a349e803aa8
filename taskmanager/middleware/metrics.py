"""Prometheus metrics middleware."""
import time

from fastapi import FastAPI, Request
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

# Metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
)

task_lifecycle_errors_total = Counter(
    "task_lifecycle_errors_total",
    "Task requests rejected with a client error",
    ["method", "endpoint", "status_code"],
)


def _endpoint(request: Request) -> str:
    # Route template keeps label cardinality bounded (no task ids)
    route = request.scope.get("route")
    return getattr(route, "path", request.url.path)


def setup_metrics(app: FastAPI) -> None:
    """Register request instrumentation and the /metrics endpoint."""

    @app.middleware("http")
    async def record_metrics(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        endpoint = _endpoint(request)
        http_request_duration_seconds.labels(request.method, endpoint).observe(
            time.perf_counter() - started
        )
        http_requests_total.labels(request.method, endpoint, str(response.status_code)).inc()
        if 400 <= response.status_code < 500 and "/tasks" in endpoint:
            task_lifecycle_errors_total.labels(
                request.method, endpoint, str(response.status_code)
            ).inc()
        return response

    @app.get("/metrics", include_in_schema=False)
    async def metrics():
        """Prometheus metrics endpoint."""
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
