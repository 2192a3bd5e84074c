"""Pydantic schemas for perimeter and route risk assessments."""

from pydantic import Field

from crimemap.schemas.analysis import AISafetyAnalysis
from crimemap.schemas.base import CamelModel, Point
from crimemap.services.risk_levels import RiskLevel


class CrimeTypeCountOut(CamelModel):
    crime_type_id: int
    type: str
    count: int
    percentage: int


class PerimeterOut(CamelModel):
    radius: float
    total_crimes: int
    crime_type_breakdown: list[CrimeTypeCountOut]
    safety_tips: list[str]


class AssessmentMetadata(CamelModel):
    coordinates: Point
    grid_cell: Point


class RiskAssessmentResponse(CamelModel):
    """Perimeter assessment; analysis fields are only set when requested."""

    risk_level: RiskLevel
    crime_count: int
    perimeter: PerimeterOut
    metadata: AssessmentMetadata
    analysis: AISafetyAnalysis | None = None
    analysis_error: str | None = None


class RouteFilters(CamelModel):
    crime_type_ids: list[int] = []
    status_filters: list[str] = []
    barangay_filters: list[str] = []
    date_from: str | None = None
    date_to: str | None = None


class RouteAssessmentRequest(CamelModel):
    """Ordered route points in travel order, plus routing-provider passthrough."""

    coordinates: list[Point]
    filters: RouteFilters | None = None
    distance: float = Field(0.0, ge=0, description="Route length in metres")
    duration: float = Field(0.0, ge=0, description="Travel time in seconds")


class RouteSegmentOut(CamelModel):
    index: int
    start_index: int
    end_index: int
    start: Point
    end: Point
    midpoint: Point
    risk_level: RiskLevel
    crime_count: int


class RouteOverallAssessment(CamelModel):
    risk_level: RiskLevel
    total_crime_count: int
    route_crime_count: int
    high_risk_segments: int
    medium_risk_segments: int
    low_risk_segments: int
    safety_score: int = Field(..., ge=0, le=100)
    crime_type_breakdown: list[CrimeTypeCountOut]
    recommendations: list[str]
    distance: float
    duration: float


class RouteAssessmentResponse(CamelModel):
    segments: list[RouteSegmentOut]
    overall_assessment: RouteOverallAssessment
