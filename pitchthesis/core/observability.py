# pitchthesis/core/observability.py
import time
import uuid
from typing import Callable

from fastapi import APIRouter, Request, Response
from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, Counter, Histogram, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware

from pitchthesis.core.logging import get_logger

log = get_logger("obs")

REQUEST_ID_HEADER = "X-Request-ID"

REGISTRY = CollectorRegistry()
REQUEST_COUNT = Counter(
    "http_requests_total",
    "HTTP requests by route template and status",
    ["method", "path", "status_code"],
    registry=REGISTRY,
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "path"],
    # analysis waits on the completion service, hence the long tail
    buckets=(0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, 10, 30, 60),
    registry=REGISTRY,
)
THESIS_PROVENANCE = Counter(
    "thesis_results_total",
    "Thesis narratives produced, by provenance",
    ["provenance"],
    registry=REGISTRY,
)
ADMISSION_DENIED = Counter(
    "admission_denied_total",
    "Pipeline requests refused by the per-IP admission gate",
    registry=REGISTRY,
)


def _route_template(request: Request) -> str:
    # /report/{thesis_id} rather than one series per id
    route = request.scope.get("route")
    return getattr(route, "path", None) or "unmatched"


class ObservabilityMiddleware(BaseHTTPMiddleware):
    """
    Request id, access log and request metrics. Bodies are never logged; decks and
    theses stay out of the logs.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        req_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = req_id
        started = time.perf_counter()
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
            response.headers[REQUEST_ID_HEADER] = req_id
            return response
        except Exception:
            log.exception("unhandled_error", extra={"req_id": req_id, "method": request.method, "path": request.url.path})
            raise
        finally:
            elapsed = time.perf_counter() - started
            route = _route_template(request)
            REQUEST_COUNT.labels(method=request.method, path=route, status_code=str(status)).inc()
            REQUEST_LATENCY.labels(method=request.method, path=route).observe(elapsed)
            log.info(
                "http_request",
                extra={
                    "req_id": req_id,
                    "method": request.method,
                    "path": route,
                    "status": status,
                    "duration_ms": round(elapsed * 1000, 2),
                    "client_ip": request.client.host if request.client else "-",
                },
            )


metrics_router = APIRouter()


@metrics_router.get("/metrics", include_in_schema=False)
def metrics():
    return Response(content=generate_latest(REGISTRY), media_type=CONTENT_TYPE_LATEST)
