"""Pydantic schemas for API request/response validation."""

from crimemap.schemas.analysis import (
    AISafetyAnalysis,
    SafetyAnalysisRequest,
    SafetyAnalysisResponse,
)
from crimemap.schemas.base import Point
from crimemap.schemas.catalog import BarangayOut, CrimeTypeOut
from crimemap.schemas.heatmap import GridFeatureCollection, HeatmapPredictionsResponse
from crimemap.schemas.risk import (
    RiskAssessmentResponse,
    RouteAssessmentRequest,
    RouteAssessmentResponse,
)

__all__ = [
    "AISafetyAnalysis",
    "BarangayOut",
    "CrimeTypeOut",
    "GridFeatureCollection",
    "HeatmapPredictionsResponse",
    "Point",
    "RiskAssessmentResponse",
    "RouteAssessmentRequest",
    "RouteAssessmentResponse",
    "SafetyAnalysisRequest",
    "SafetyAnalysisResponse",
]
