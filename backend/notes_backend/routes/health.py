"""
Notes Backend: Health Check Route
====================================

What:  Liveness probe for load balancers and container health checks.
How:   No dependencies are probed; the store lives in process memory, so a
       process that answers is a process that can serve requests.
"""

from fastapi import APIRouter

from notes_backend import __version__, utils
from notes_backend.config import settings
from notes_backend.schemas.common import HealthResponse

router = APIRouter(tags=["Health"])


@router.get("/", response_model=HealthResponse, summary="Service health check")
@router.get("/health", response_model=HealthResponse, include_in_schema=False)
async def health_check() -> HealthResponse:
    return HealthResponse(
        status="ok",
        message="Service is healthy",
        timestamp=utils.utcnow().isoformat(),
        environment=settings.environment,
        version=__version__,
    )
