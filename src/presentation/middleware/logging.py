"""Access logging and HTTP metrics middleware."""

import time
from typing import Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from src.core.metrics import record_http_request

logger = structlog.get_logger(__name__)

_UNMATCHED_ROUTE = "unmatched"


def _route_template(request: Request) -> str:
    """Route path template, so metric labels stay low-cardinality."""
    route = request.scope.get("route")
    return getattr(route, "path", _UNMATCHED_ROUTE)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request with its outcome and duration and records it in metrics."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()
        method = request.method
        log = logger.bind(method=method, path=request.url.path)

        log.debug("request_started")

        try:
            response = await call_next(request)
        except Exception as e:
            duration = time.perf_counter() - start_time
            record_http_request(method, _route_template(request), 500, duration)
            log.error(
                "request_failed",
                error=str(e),
                error_type=type(e).__name__,
                duration_ms=round(duration * 1000, 2),
            )
            raise

        duration = time.perf_counter() - start_time
        record_http_request(method, _route_template(request), response.status_code, duration)
        log.info(
            "request_completed",
            status_code=response.status_code,
            duration_ms=round(duration * 1000, 2),
        )

        return response
