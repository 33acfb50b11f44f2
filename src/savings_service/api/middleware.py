import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from savings_service.infrastructure.metrics import HTTP_REQUEST_DURATION, HTTP_REQUESTS_TOTAL


UNMATCHED_PATH = "<unmatched>"
REQUEST_ID_HEADER = "X-Request-ID"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Bind a request id to every log record emitted while handling a request."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        # Stays bound after call_next: the server-error handler logs outside this middleware.
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class MetricsMiddleware(BaseHTTPMiddleware):
    """HTTP middleware that collects Prometheus metrics per route template."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start_time = time.perf_counter()
        status_code = "500"

        try:
            response = await call_next(request)
            status_code = str(response.status_code)
            return response
        finally:
            duration = time.perf_counter() - start_time
            path = _route_path(request)
            HTTP_REQUEST_DURATION.labels(method=request.method, path=path, status_code=status_code).observe(duration)
            HTTP_REQUESTS_TOTAL.labels(method=request.method, path=path, status_code=status_code).inc()


def _route_path(request: Request) -> str:
    """Use the route template rather than the raw URL to keep label cardinality bounded."""
    route = request.scope.get("route")
    return getattr(route, "path", UNMATCHED_PATH)
