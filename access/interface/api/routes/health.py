"""Health check routes."""

from datetime import datetime, timezone

import logfire
from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel

from access.adapter.error import DirectoryError
from access.config import Settings
from access.domain.repository import IdentityDirectory

router = APIRouter(tags=["health"], route_class=DishkaRoute)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: datetime
    version: str
    git_sha: str


class ReadinessResponse(BaseModel):
    """Readiness check response."""

    status: str
    directory: str


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: FromDishka[Settings]) -> HealthResponse:
    """Liveness check; touches nothing outside the process."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        version="0.1.0",
        git_sha=settings.git_sha,
    )


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check(
    directory: FromDishka[IdentityDirectory],
) -> ReadinessResponse:
    """Readiness check: the identity directory must answer an admin call.

    Raises:
        HTTPException: 503 if the directory is unreachable or rejects us
    """
    try:
        await directory.list_realm_roles()
    except DirectoryError as e:
        logfire.warn("Readiness check failed", status_code=e.status_code, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Identity directory unavailable",
        ) from e

    return ReadinessResponse(status="ready", directory="ok")
