"""
Notely Backend: Request Logging Middleware
==========================================

What:  One access log line per request, tagged with the authentication
       outcome the Auth Guard recorded for it.
When:  Runs inside RequestIDMiddleware, so the request ID is available.

Logged: method, path, status, duration, client IP, request ID, auth outcome.
Never logged: request bodies and the ``Authorization`` header.

Level by status:
    5xx → ERROR, 4xx → WARNING, otherwise INFO

Unexpected exceptions from handlers are turned into the opaque 500 here,
inside the chain, so those responses still get an access line and an
``X-Request-ID`` header.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from notely.middleware.request_id import request_id_var
from notely.responses import INTERNAL_ERROR_MESSAGE, respond_with_error

logger = logging.getLogger("notely.access")

# Probes hit these every few seconds
QUIET_PATHS = {"/v1/healthz"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Access log keyed by request ID and auth outcome."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            response = respond_with_error(500, INTERNAL_ERROR_MESSAGE, log_err=e)
        duration_ms = (time.perf_counter() - start_time) * 1000

        # Unguarded routes leave no outcome
        outcome = getattr(request.state, "auth_outcome", None)
        outcome_label = outcome.value if outcome is not None else "-"
        rid = request_id_var.get("")
        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms auth=%s [%s]",
            request.method,
            request.url.path,
            status,
            duration_ms,
            outcome_label,
            rid,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": request.url.path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": request.client.host if request.client else "unknown",
                "auth_outcome": outcome_label,
            },
        )
        return response
