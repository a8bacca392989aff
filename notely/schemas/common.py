"""
Notely Backend: Shared Response Schemas
=======================================

What:  Error and health payloads used across endpoints.
"""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Error body for every non-2xx response.

    Example:
        {"error": "malformed authorization header"}
    """
    error: str = Field(description="Human-readable error message")


class HealthResponse(BaseModel):
    """Readiness probe payload returned by GET /v1/healthz."""
    status: str = Field(default="ok", description="Always 'ok' while the process serves requests")
