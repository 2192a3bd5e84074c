"""Health endpoints."""

from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from crimemap.config import get_settings
from crimemap.database import get_db
from crimemap.services.incident_repository import count_cases

router = APIRouter(tags=["health"])
settings = get_settings()


class DataSourceStatus(BaseModel):
    """Status of a data source."""

    record_count: int
    located_count: int


class CollaboratorStatus(BaseModel):
    prediction_service_configured: bool
    ai_analysis_configured: bool


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: datetime
    crime_cases: DataSourceStatus
    collaborators: CollaboratorStatus


@router.get("/health", response_model=HealthResponse)
async def health_check(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> HealthResponse:
    """
    Health check endpoint with data status.

    record_count covers every case; located_count only the public cases with
    coordinates, which are the ones risk assessments read.
    """
    total, located = await count_cases(db)

    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(UTC),
        crime_cases=DataSourceStatus(record_count=total, located_count=located),
        collaborators=CollaboratorStatus(
            prediction_service_configured=bool(settings.prediction_service_url),
            ai_analysis_configured=bool(settings.gemini_api_key),
        ),
    )


@router.get("/ready")
async def readiness_check() -> dict:
    """Simple readiness probe for container orchestration."""
    return {"status": "ready"}


@router.get("/live")
async def liveness_check() -> dict:
    """Simple liveness probe for container orchestration."""
    return {"status": "alive"}
