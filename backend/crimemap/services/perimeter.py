"""Perimeter risk classifier: nearby incident count -> risk level, breakdown and tips."""

from collections import Counter
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from crimemap.services.filters import IncidentFilters, IncidentRecord
from crimemap.services.geo import Coordinate, haversine_m, validate_coordinate
from crimemap.services.risk_levels import (
    CRIME_TYPE_TIPS,
    DOMINANT_CRIME_PERCENTAGE,
    MAX_SAFETY_TIPS,
    RISK_BANDS,
    RISK_LEVEL_TIPS,
    RiskBand,
    RiskLevel,
    classify_count,
)

PERIMETER_RADIUS_M = 300.0


@dataclass(frozen=True)
class CrimeTypeCount:
    crime_type_id: int
    type: str
    count: int
    percentage: int


@dataclass(frozen=True)
class PerimeterAssessment:
    """Risk computed for one query point."""

    center: Coordinate
    risk_level: RiskLevel
    crime_count: int
    crime_type_breakdown: list[CrimeTypeCount]
    safety_tips: list[str]
    radius_m: float = PERIMETER_RADIUS_M
    incidents: list[IncidentRecord] = field(default_factory=list, repr=False)


def incidents_within(
    center: Coordinate,
    incidents: Iterable[IncidentRecord],
    radius_m: float = PERIMETER_RADIUS_M,
) -> list[IncidentRecord]:
    """Incidents with coordinates no further than radius_m from center."""
    nearby = []
    for incident in incidents:
        point = incident.coordinate
        if point is None:
            continue
        if haversine_m(center, point) <= radius_m:
            nearby.append(incident)
    return nearby


def build_breakdown(
    incidents: list[IncidentRecord],
    crime_type_names: Mapping[int, str] | None = None,
) -> list[CrimeTypeCount]:
    """
    Group incidents by crime type.

    Incidents without a crime type still count towards the total used for
    percentages, so the breakdown may sum to less than 100%.
    """
    total = len(incidents)
    if total == 0:
        return []

    counts: Counter[int] = Counter()
    names: dict[int, str] = dict(crime_type_names or {})
    for incident in incidents:
        if incident.crime_type_id is None:
            continue
        counts[incident.crime_type_id] += 1
        if incident.crime_type_name and incident.crime_type_id not in names:
            names[incident.crime_type_id] = incident.crime_type_name

    ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [
        CrimeTypeCount(
            crime_type_id=crime_type_id,
            type=names.get(crime_type_id, f"Crime type {crime_type_id}"),
            count=count,
            percentage=round(100 * count / total),
        )
        for crime_type_id, count in ordered
    ]


def dominant_crime_tips(breakdown: list[CrimeTypeCount]) -> list[str]:
    """Tips for crime types making up at least 15% of incidents, in breakdown order."""
    tips = []
    for entry in breakdown:
        if entry.percentage < DOMINANT_CRIME_PERCENTAGE:
            continue
        tip = CRIME_TYPE_TIPS.get(entry.type)
        if tip and tip not in tips:
            tips.append(tip)
    return tips


def generate_safety_tips(risk_level: RiskLevel, breakdown: list[CrimeTypeCount]) -> list[str]:
    tips = [RISK_LEVEL_TIPS[risk_level]]
    tips.extend(dominant_crime_tips(breakdown))
    return tips[:MAX_SAFETY_TIPS]


def assess_perimeter(
    center: Coordinate,
    incidents: Iterable[IncidentRecord],
    filters: IncidentFilters | None = None,
    crime_type_names: Mapping[int, str] | None = None,
    bands: tuple[RiskBand, ...] = RISK_BANDS,
) -> PerimeterAssessment:
    """
    Classify the risk around center from the incidents within 300m.

    Pure: the incident snapshot is only read. An empty snapshot is a valid
    zero-count LOW assessment.
    """
    center = validate_coordinate(center.lat, center.lng)
    candidates = filters.apply(incidents) if filters else list(incidents)

    nearby = incidents_within(center, candidates)
    crime_count = len(nearby)
    risk_level = classify_count(crime_count, bands)
    breakdown = build_breakdown(nearby, crime_type_names)

    return PerimeterAssessment(
        center=center,
        risk_level=risk_level,
        crime_count=crime_count,
        crime_type_breakdown=breakdown,
        safety_tips=generate_safety_tips(risk_level, breakdown),
        incidents=nearby,
    )
