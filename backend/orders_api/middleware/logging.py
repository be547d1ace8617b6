"""
Orders API — Access Log Middleware
===================================

What:  One log line per request: method, path, query, status, duration,
       client IP, request ID.
Why:   Status and latency per endpoint are visible without a metrics stack.
How:   Times the downstream call with perf_counter and picks the level from
       the status class (5xx ERROR, 4xx WARNING, otherwise INFO).
Who:   Registered in main.create_app() inside RequestIDMiddleware.
When:  After the downstream app has produced its response.

Bodies are never logged; order payloads carry customer emails and addresses.
/health is skipped entirely since probes hit it every few seconds.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("orders_api.access")

SKIPPED_PATHS = {"/health"}


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in SKIPPED_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
        method = request.method
        query = request.url.query

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code

        logger.log(
            level_for_status(status),
            "%s %s%s %d %.1fms from %s",
            method,
            path,
            f"?{query}" if query else "",
            status,
            duration_ms,
            client_ip,
            extra={
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )
        return response
