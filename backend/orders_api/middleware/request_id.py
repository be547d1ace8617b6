"""
Orders API — Request ID Middleware
===================================

What:  Gives every request a short correlation ID, exposes it to loggers and
       echoes it back in the X-Request-ID response header.
Why:   Log lines from one request can be grouped, and a client reporting an
       error can quote the ID from the response.
How:  Reuses an inbound X-Request-ID when the caller supplies one, else
       generates 8 hex chars. The value lives in a ContextVar (one per
       request coroutine) and on request.state.
Who:   Registered in main.create_app(); RequestIDLogFilter is attached to
       the root handler by main.setup_logging().
When:  Outermost middleware, so every later log line carries the ID.
"""

import logging
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def current_request_id(request: Request) -> str:
    """
    Request ID for error handlers.

    Handlers for bare Exception run outside the middleware stack, where the
    ContextVar is already gone; request.state survives because the scope dict
    is shared.
    """
    return getattr(request.state, "request_id", "") or request_id_var.get("")


class RequestIDLogFilter(logging.Filter):
    """Stamps `record.request_id` so formatters can use %(request_id)s."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get("") or "-"
        return True


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]

        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
