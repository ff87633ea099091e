"""Request logging middleware."""

import time
from typing import Awaitable, Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = structlog.get_logger()

# Liveness and readiness probes
QUIET_PATHS = frozenset({"/health", "/health/detailed"})


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """One log line per request: info for success, warning for 4xx, error for 5xx."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        start = time.perf_counter()

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=getattr(request.state, "request_id", "unknown"),
            method=request.method,
            path=request.url.path,
        )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error("request_failed", error=str(e), duration_ms=_elapsed_ms(start))
            raise

        status = response.status_code
        if status >= 500:
            logger.error("request_completed", status_code=status, duration_ms=_elapsed_ms(start))
        elif status >= 400:
            logger.warning(
                "request_completed", status_code=status, duration_ms=_elapsed_ms(start)
            )
        elif request.url.path not in QUIET_PATHS:
            logger.info("request_completed", status_code=status, duration_ms=_elapsed_ms(start))
        return response
