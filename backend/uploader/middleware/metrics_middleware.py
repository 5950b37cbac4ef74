"""
ASGI middleware for tracking HTTP request metrics.
Requests are labelled by route template, so object keys in query strings
never become label values.
"""
import time
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from uploader.utils.metrics import http_requests_total, http_request_duration_seconds, errors_total

UNMATCHED_ROUTE = "unmatched"


def route_label(request: Request) -> str:
    """Template of the route that served the request (e.g. /api/aws/aws-post)."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or UNMATCHED_ROUTE


class MetricsMiddleware(BaseHTTPMiddleware):
    """Middleware to track HTTP metrics for Prometheus."""

    async def dispatch(self, request: Request, call_next):
        if request.url.path == "/metrics":
            return await call_next(request)

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            errors_total.labels(error_type="exception").inc()
            raise

        # Router fills scope["route"] during call_next
        path = route_label(request)
        http_requests_total.labels(method=request.method, path=path, status=response.status_code).inc()
        http_request_duration_seconds.labels(method=request.method, path=path).observe(
            time.perf_counter() - start_time
        )

        if response.status_code >= 400:
            errors_total.labels(error_type=f"{response.status_code // 100}xx").inc()

        return response
