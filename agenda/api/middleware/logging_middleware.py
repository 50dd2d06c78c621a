"""
Request logging middleware.

Assigns each request a correlation id, taken from ``X-Correlation-ID`` or
generated, and publishes it through ``correlation_id_var`` for the duration
of the request.
"""

import logging
import time
import uuid
from collections.abc import Awaitable, Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from agenda.core.shared.logger import correlation_id_var

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"
READ_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})

CallNext = Callable[[Request], Awaitable[Response]]


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    One log line per request and one per response, with timing.

    Successful reads (availability polling, appointment lookups) are logged
    at DEBUG, writes at INFO and any 4xx/5xx response at WARNING.
    """

    EXCLUDE_PATHS: tuple[str, ...] = ("/health", "/favicon.ico")

    async def dispatch(self, request: Request, call_next: CallNext) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or uuid.uuid4().hex[:8]
        request.state.correlation_id = correlation_id
        token = correlation_id_var.set(correlation_id)
        try:
            if request.url.path.startswith(self.EXCLUDE_PATHS):
                response = await call_next(request)
            else:
                response = await self._dispatch_logged(request, call_next)
        finally:
            correlation_id_var.reset(token)

        response.headers[CORRELATION_HEADER] = correlation_id
        return response

    async def _dispatch_logged(self, request: Request, call_next: CallNext) -> Response:
        method, path = request.method, request.url.path
        is_read = method in READ_METHODS
        logger.log(logging.DEBUG if is_read else logging.INFO, f"--> {method} {path} from {_client_ip(request)}")

        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(f"<-- {method} {path} ERROR in {_elapsed_ms(start):.2f}ms: {e}")
            raise

        duration_ms = _elapsed_ms(start)
        if response.status_code >= 400:
            level = logging.WARNING
        else:
            level = logging.DEBUG if is_read else logging.INFO
        logger.log(level, f"<-- {method} {path} {response.status_code} in {duration_ms:.2f}ms")

        response.headers["X-Response-Time-Ms"] = f"{duration_ms:.2f}"
        return response


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000


def _client_ip(request: Request) -> str:
    """First address of ``X-Forwarded-For`` when behind a proxy."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"
