"""Health check endpoint for service monitoring."""

from fastapi import APIRouter
from pydantic import BaseModel

from trustflow import __version__
from trustflow.core.config import settings

health_router = APIRouter()


class HealthResponse(BaseModel):
    status: str = "healthy"
    version: str
    history_backend: str


@health_router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health Check",
    description="Returns the health status of the service and the history backend in use.",
)
async def health_check() -> HealthResponse:
    return HealthResponse(
        status="healthy",
        version=__version__,
        history_backend=settings.history_backend,
    )
