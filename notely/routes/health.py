"""
Notely Backend: Health Check Route
==================================

What:  Readiness endpoint for load balancers and container health checks.
How:   Answers without touching the database; it is registered even when no
       database is configured.
"""

from fastapi import APIRouter

from notely.schemas.common import HealthResponse

router = APIRouter(prefix="/v1", tags=["Health"])


@router.get(
    "/healthz",
    response_model=HealthResponse,
    summary="Readiness probe",
)
async def handler_readiness() -> HealthResponse:
    return HealthResponse(status="ok")
