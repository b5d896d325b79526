"""
Health check endpoint.
"""

from fastapi import APIRouter
from pydantic import BaseModel

from commanderforge.config import settings

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    app: str


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """
    Liveness probe.

    Returns healthy if the service is running.
    Does not check the card-data provider.
    """
    return HealthResponse(status="healthy", app=settings.app_name)
