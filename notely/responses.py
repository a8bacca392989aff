"""
Notely Backend: JSON Response Helpers
=====================================

What:  The one place that writes JSON bodies and ``{"error": ...}`` bodies.
Who:   The Auth Guard, route handlers and the global exception handlers.

Logging rules:
    - A cause passed as ``log_err`` is always logged (with traceback).
    - Every 5XX response is logged at ERROR, whatever the cause.
    - The message in a 5XX body is whatever the caller chose; callers pass
      opaque messages so no internal detail reaches the client.
"""

import logging
from typing import Any, Optional

from pydantic import BaseModel
from starlette.responses import JSONResponse

from notely.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)

# Opaque body for every 5XX that must not reveal its cause
INTERNAL_ERROR_MESSAGE = "internal server error"


def respond_with_json(status_code: int, payload: Any) -> JSONResponse:
    """Serialize ``payload`` (a Pydantic model or JSON-compatible value)."""
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(mode="json")
    return JSONResponse(status_code=status_code, content=payload)


def respond_with_error(
    status_code: int,
    message: str,
    log_err: Optional[BaseException] = None,
) -> JSONResponse:
    """
    Build an ``{"error": message}`` response.

    Args:
        status_code: HTTP status to send
        message: Client-facing message
        log_err: Underlying cause; logged server-side, never sent
    """
    rid = request_id_var.get("")
    if log_err is not None:
        logger.error("[%s] %s", rid, log_err, exc_info=log_err)
    if status_code > 499:
        logger.error("[%s] Responding with %d error: %s", rid, status_code, message)
    return respond_with_json(status_code, {"error": message})
