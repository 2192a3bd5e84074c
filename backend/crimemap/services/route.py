"""Route segment risk aggregator."""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from crimemap.services.errors import RiskInputError
from crimemap.services.filters import IncidentFilters, IncidentRecord
from crimemap.services.geo import Coordinate, midpoint, validate_coordinate
from crimemap.services.perimeter import (
    CrimeTypeCount,
    assess_perimeter,
    build_breakdown,
    dominant_crime_tips,
)
from crimemap.services.risk_levels import SEGMENT_BUCKETS, RiskLevel, SegmentBucket, highest

HIGH_SEGMENT_WEIGHT = 1.0
MEDIUM_SEGMENT_WEIGHT = 0.5
MAX_RECOMMENDATIONS = 4


@dataclass(frozen=True)
class RouteSegment:
    """Section of the route between two consecutive input points."""

    index: int
    start_index: int
    end_index: int
    start: Coordinate
    end: Coordinate
    midpoint: Coordinate
    risk_level: RiskLevel
    crime_count: int


@dataclass(frozen=True)
class RouteAssessment:
    segments: list[RouteSegment]
    risk_level: RiskLevel
    total_crime_count: int
    route_crime_count: int
    high_risk_segments: int
    medium_risk_segments: int
    low_risk_segments: int
    safety_score: int
    crime_type_breakdown: list[CrimeTypeCount]
    recommendations: list[str]
    distance: float
    duration: float


def safety_score(high_segments: int, medium_segments: int, total_segments: int) -> int:
    """0-100, higher is safer; high segments cost twice as much as medium ones."""
    if total_segments <= 0:
        return 100
    penalty = (
        high_segments * HIGH_SEGMENT_WEIGHT + medium_segments * MEDIUM_SEGMENT_WEIGHT
    ) / total_segments
    return max(0, min(100, round(100 - penalty * 100)))


def route_recommendations(
    overall: RiskLevel,
    high_risk_areas: int,
    breakdown: list[CrimeTypeCount],
) -> list[str]:
    recommendations = []

    if overall in (RiskLevel.HIGH, RiskLevel.MEDIUM_HIGH):
        recommendations.append("Consider traveling during daylight hours for increased safety")

    if high_risk_areas > 0:
        plural = "s" if high_risk_areas > 1 else ""
        recommendations.append(
            f"Route passes through {high_risk_areas} high-risk area{plural} - stay alert"
        )

    recommendations.extend(dominant_crime_tips(breakdown))

    if overall in (RiskLevel.LOW, RiskLevel.LOW_MEDIUM):
        recommendations.append("Route appears relatively safe based on recent crime data")

    recommendations.append("Stay on well-lit main roads when possible")

    deduped = list(dict.fromkeys(recommendations))
    return deduped[:MAX_RECOMMENDATIONS]


def assess_route(
    route: Sequence[Coordinate],
    incidents: Iterable[IncidentRecord],
    filters: IncidentFilters | None = None,
    distance: float = 0.0,
    duration: float = 0.0,
    crime_type_names: Mapping[int, str] | None = None,
) -> RouteAssessment:
    """
    Classify every segment at its midpoint and roll up a worst-case assessment.

    Segment counts are not deduplicated against overlapping perimeters; the
    route-level breakdown is, by incident id.
    """
    if len(route) < 2:
        raise RiskInputError("a route requires at least two points")
    points = [validate_coordinate(point.lat, point.lng) for point in route]

    candidates = filters.apply(incidents) if filters else list(incidents)

    segments = []
    route_incidents: dict[int, IncidentRecord] = {}
    for i in range(len(points) - 1):
        center = midpoint(points[i], points[i + 1])
        perimeter = assess_perimeter(center, candidates, crime_type_names=crime_type_names)
        for incident in perimeter.incidents:
            route_incidents.setdefault(incident.id, incident)

        segments.append(
            RouteSegment(
                index=i,
                start_index=i,
                end_index=i + 1,
                start=points[i],
                end=points[i + 1],
                midpoint=center,
                risk_level=perimeter.risk_level,
                crime_count=perimeter.crime_count,
            )
        )

    buckets = [SEGMENT_BUCKETS[segment.risk_level] for segment in segments]
    high = buckets.count(SegmentBucket.HIGH)
    medium = buckets.count(SegmentBucket.MEDIUM)
    low = buckets.count(SegmentBucket.LOW)

    overall = highest(segment.risk_level for segment in segments)
    breakdown = build_breakdown(list(route_incidents.values()), crime_type_names)

    return RouteAssessment(
        segments=segments,
        risk_level=overall,
        total_crime_count=sum(segment.crime_count for segment in segments),
        route_crime_count=len(route_incidents),
        high_risk_segments=high,
        medium_risk_segments=medium,
        low_risk_segments=low,
        safety_score=safety_score(high, medium, len(segments)),
        crime_type_breakdown=breakdown,
        recommendations=route_recommendations(
            overall,
            sum(1 for segment in segments if segment.risk_level == RiskLevel.HIGH),
            breakdown,
        ),
        distance=distance,
        duration=duration,
    )
