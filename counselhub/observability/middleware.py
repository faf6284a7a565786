"""
HTTP middleware for request logging and correlation ids.

Dependencies: fastapi, starlette, counselhub.observability
System role: Request/response observability injection
"""

import logging
import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from counselhub.observability.correlation import (
    clear_correlation_id,
    get_correlation_id,
    set_correlation_id,
)

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"
QUIET_PATHS = frozenset({"/health", "/health/db"})


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log one line per request with status and latency."""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        method = request.method
        path = request.url.path

        try:
            response: Response = await call_next(request)
        except Exception as e:
            logger.exception(
                f"{method} {path} raised",
                extra={
                    "method": method,
                    "path": path,
                    "elapsed_ms": round((time.perf_counter() - started) * 1000, 2),
                    "error_type": type(e).__name__,
                    "correlation_id": get_correlation_id(),
                },
            )
            raise

        # Probes are polled constantly; keep them out of INFO
        level = logging.DEBUG if path in QUIET_PATHS else logging.INFO
        logger.log(
            level,
            f"{method} {path} - {response.status_code}",
            extra={
                "method": method,
                "path": path,
                "status_code": response.status_code,
                "elapsed_ms": round((time.perf_counter() - started) * 1000, 2),
                "correlation_id": get_correlation_id(),
            },
        )
        return response


class CorrelationMiddleware(BaseHTTPMiddleware):
    """Adopt the caller's correlation id or mint one, and echo it back."""

    async def dispatch(self, request: Request, call_next):
        correlation_id = set_correlation_id(request.headers.get(CORRELATION_HEADER))
        try:
            response: Response = await call_next(request)
        finally:
            clear_correlation_id()
        response.headers[CORRELATION_HEADER] = correlation_id
        return response
