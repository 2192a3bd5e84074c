"""Pydantic schemas for AI-generated safety analysis."""

from datetime import datetime
from typing import Literal

from pydantic import Field

from crimemap.schemas.base import CamelModel, Point
from crimemap.services.risk_levels import RiskLevel


class RiskExplanation(CamelModel):
    """Why the area has its current risk level."""

    title: str
    description: str
    severity: Literal["low", "medium", "high"]


class SafetyTip(CamelModel):
    """Actionable advice tied to the local crime data."""

    tip: str
    context: str
    priority: Literal["essential", "recommended", "optional"]


class TimePattern(CamelModel):
    period: str
    risk_level: str
    advice: str


class AISafetyAnalysis(CamelModel):
    """Structured analysis returned by the generative model."""

    risk_explanations: list[RiskExplanation]
    safety_tips: list[SafetyTip]
    time_patterns: list[TimePattern] = []
    overall_summary: str
    generated_at: datetime | None = None


class CrimeTypeInput(CamelModel):
    type: str
    count: int = Field(..., ge=0)
    percentage: float = Field(..., ge=0, le=100)


class SafetyAnalysisRequest(CamelModel):
    """Risk summary sent to the analysis endpoint."""

    risk_level: RiskLevel
    crime_count: int = Field(..., ge=0)
    crime_types: list[CrimeTypeInput] = []
    coordinates: Point


class SafetyAnalysisResponse(CamelModel):
    analysis: AISafetyAnalysis
    cached: bool = False
