"""API routes for perimeter, route and AI risk assessments."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from crimemap.config import get_settings
from crimemap.database import get_db
from crimemap.dependencies import get_safety_analyst
from crimemap.rate_limit import limiter
from crimemap.schemas.analysis import (
    CrimeTypeInput,
    SafetyAnalysisRequest,
    SafetyAnalysisResponse,
)
from crimemap.schemas.base import Point
from crimemap.schemas.risk import (
    AssessmentMetadata,
    CrimeTypeCountOut,
    PerimeterOut,
    RiskAssessmentResponse,
    RouteAssessmentRequest,
    RouteAssessmentResponse,
    RouteOverallAssessment,
    RouteSegmentOut,
)
from crimemap.services.errors import RiskInputError, UpstreamServiceError
from crimemap.services.filters import IncidentFilters
from crimemap.services.geo import parse_coordinate, validate_coordinate
from crimemap.services.incident_repository import load_incidents
from crimemap.services.perimeter import PerimeterAssessment, assess_perimeter
from crimemap.services.route import assess_route
from crimemap.services.safety_analyst import SafetyAnalyst

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(prefix="/risk", tags=["risk"])


def _summary_for(assessment: PerimeterAssessment) -> SafetyAnalysisRequest:
    """Risk summary handed to the safety analyst."""
    return SafetyAnalysisRequest(
        risk_level=assessment.risk_level,
        crime_count=assessment.crime_count,
        crime_types=[
            CrimeTypeInput(type=entry.type, count=entry.count, percentage=entry.percentage)
            for entry in assessment.crime_type_breakdown
        ],
        coordinates=Point(lat=assessment.center.lat, lng=assessment.center.lng),
    )


@router.get("/assessment", response_model=RiskAssessmentResponse)
@limiter.limit(f"{settings.rate_limit_per_minute}/minute")
async def get_risk_assessment(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    analyst: Annotated[SafetyAnalyst, Depends(get_safety_analyst)],
    lat: str | None = Query(None, description="Latitude in degrees"),
    lng: str | None = Query(None, description="Longitude in degrees"),
    crime_type_ids: str | None = Query(None, alias="crimeTypeIds", description="Comma-separated ids"),
    status_filters: str | None = Query(None, alias="statusFilters", description="Comma-separated statuses"),
    barangay_filters: str | None = Query(
        None, alias="barangayFilters", description="Comma-separated barangay ids or names"
    ),
    date_from: str | None = Query(None, alias="dateFrom", description="Inclusive, YYYY-MM-DD"),
    date_to: str | None = Query(None, alias="dateTo", description="Inclusive, YYYY-MM-DD"),
    include_analysis: bool = Query(False, alias="includeAnalysis"),
) -> RiskAssessmentResponse:
    """
    Classify the risk within 300m of a point.

    With includeAnalysis, an AI safety narrative is attached. A failing AI
    collaborator never fails the assessment; the error is reported in
    analysisError instead.
    """
    center = parse_coordinate(lat, lng)
    filters = IncidentFilters.from_params(
        crime_type_ids, status_filters, barangay_filters, date_from, date_to
    )

    incidents = await load_incidents(db, filters, around=[center])
    assessment = assess_perimeter(center, incidents)
    logger.info(
        f"Risk at ({center.lat:.5f}, {center.lng:.5f}): "
        f"{assessment.risk_level.value} ({assessment.crime_count} incidents)"
    )

    analysis = None
    analysis_error = None
    if include_analysis:
        try:
            analysis, _ = await analyst.analyze(_summary_for(assessment), filters.signature())
        except UpstreamServiceError as e:
            logger.warning(f"AI analysis unavailable: {e}")
            analysis_error = str(e)

    return RiskAssessmentResponse(
        risk_level=assessment.risk_level,
        crime_count=assessment.crime_count,
        perimeter=PerimeterOut(
            radius=assessment.radius_m,
            total_crimes=assessment.crime_count,
            crime_type_breakdown=[
                CrimeTypeCountOut.model_validate(entry)
                for entry in assessment.crime_type_breakdown
            ],
            safety_tips=assessment.safety_tips,
        ),
        metadata=AssessmentMetadata(
            coordinates=Point(lat=center.lat, lng=center.lng),
            grid_cell=Point(lat=round(center.lat, 3), lng=round(center.lng, 3)),
        ),
        analysis=analysis,
        analysis_error=analysis_error,
    )


@router.post("/route", response_model=RouteAssessmentResponse)
@limiter.limit(f"{settings.rate_limit_per_minute}/minute")
async def assess_route_risk(
    request: Request,
    body: RouteAssessmentRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> RouteAssessmentResponse:
    """Assess every segment of a route and roll up a worst-case summary."""
    route = [validate_coordinate(point.lat, point.lng) for point in body.coordinates]
    if len(route) < 2:
        raise RiskInputError("a route requires at least two points")

    filters = None
    if body.filters:
        filters = IncidentFilters.from_params(
            body.filters.crime_type_ids,
            body.filters.status_filters,
            body.filters.barangay_filters,
            body.filters.date_from,
            body.filters.date_to,
        )

    incidents = await load_incidents(db, filters, around=route)
    assessment = assess_route(
        route, incidents, distance=body.distance, duration=body.duration
    )
    logger.info(
        f"Route of {len(assessment.segments)} segments: {assessment.risk_level.value}, "
        f"safety score {assessment.safety_score}"
    )

    return RouteAssessmentResponse(
        segments=[RouteSegmentOut.model_validate(segment) for segment in assessment.segments],
        overall_assessment=RouteOverallAssessment.model_validate(assessment),
    )


@router.post("/analysis", response_model=SafetyAnalysisResponse)
@limiter.limit(f"{settings.analysis_rate_limit_per_minute}/minute")
async def analyze_risk(
    request: Request,
    body: SafetyAnalysisRequest,
    analyst: Annotated[SafetyAnalyst, Depends(get_safety_analyst)],
) -> SafetyAnalysisResponse:
    """
    Generate AI safety analysis for a risk summary.

    Cached per rounded location and crime profile. AI failures return 502.
    """
    validate_coordinate(body.coordinates.lat, body.coordinates.lng)
    analysis, cached = await analyst.analyze(body)
    return SafetyAnalysisResponse(analysis=analysis, cached=cached)
