"""Hotspot-clustered sample crime cases for development databases."""

import random
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from crimemap.services.filters import BARANGAYS, CASE_STATUSES

CRIME_TYPES: tuple[tuple[int, str, int], ...] = (
    # (id, name, weight)
    (1, "Theft", 30),
    (2, "Physical Injury", 20),
    (3, "Domestic Violence", 15),
    (4, "Drug-related", 15),
    (5, "Vandalism", 10),
    (6, "Trespassing", 5),
    (7, "Others", 5),
)

# (start hour, end hour exclusive, weight); evenings dominate
HOUR_WEIGHTS: tuple[tuple[int, int, int], ...] = (
    (0, 6, 5),
    (6, 12, 15),
    (12, 14, 5),
    (14, 18, 15),
    (18, 22, 40),
    (22, 24, 20),
)


@dataclass(frozen=True)
class Hotspot:
    name: str
    barangay_id: int
    lat: float
    lng: float
    crime_count: int
    spread: float  # degrees


HOTSPOTS: tuple[Hotspot, ...] = (
    Hotspot("Near New Bilibid Prison", 1, 14.3850, 121.0420, 10, 0.0004),
    Hotspot("Poblacion Commercial Center", 1, 14.3832, 121.0432, 8, 0.0004),
    Hotspot("Tunasan Market Area", 2, 14.3755, 121.0485, 8, 0.0004),
    Hotspot("Putatan Main Road", 3, 14.3975, 121.0395, 7, 0.0004),
    Hotspot("Bayanan Commercial District", 4, 14.3880, 121.0525, 7, 0.0004),
    Hotspot("Tunasan Highway Junction", 2, 14.3725, 121.0505, 3, 0.0006),
    Hotspot("Putatan East Side", 3, 14.4000, 121.0425, 3, 0.0006),
    Hotspot("Sucat Town Center", 9, 14.4175, 121.0455, 3, 0.0006),
    Hotspot("Alabang Commercial Zone", 5, 14.4225, 121.0345, 3, 0.0006),
    Hotspot("Cupang Main Street", 8, 14.4025, 121.0545, 3, 0.0006),
)


@dataclass(frozen=True)
class SampleCase:
    lat: float
    lng: float
    crime_location: str
    barangay_id: int
    crime_type_id: int
    case_status: str
    visibility: str
    incident_datetime: datetime
    report_datetime: datetime


def _weighted(rng: random.Random, items, weight_index: int):
    return rng.choices(items, weights=[item[weight_index] for item in items], k=1)[0]


def generate_sample_cases(
    seed: int = 42,
    start: datetime = datetime(2024, 6, 1, tzinfo=UTC),
    end: datetime = datetime(2024, 12, 31, tzinfo=UTC),
    public_rate: float = 0.85,
) -> list[SampleCase]:
    """Deterministic for a given seed."""
    rng = random.Random(seed)
    span_days = (end - start).days
    cases = []

    for hotspot in HOTSPOTS:
        for _ in range(hotspot.crime_count):
            start_hour, end_hour, _weight = _weighted(rng, HOUR_WEIGHTS, 2)
            day = start + timedelta(days=rng.randrange(max(span_days, 1)))
            incident_at = day.replace(hour=rng.randrange(start_hour, end_hour), minute=rng.randrange(60))

            cases.append(
                SampleCase(
                    lat=round(hotspot.lat + rng.uniform(-hotspot.spread, hotspot.spread), 6),
                    lng=round(hotspot.lng + rng.uniform(-hotspot.spread, hotspot.spread), 6),
                    crime_location=f"{hotspot.name}, {BARANGAYS[hotspot.barangay_id]}",
                    barangay_id=hotspot.barangay_id,
                    crime_type_id=_weighted(rng, CRIME_TYPES, 2)[0],
                    case_status=rng.choice(CASE_STATUSES),
                    visibility="public" if rng.random() < public_rate else "private",
                    incident_datetime=incident_at,
                    report_datetime=incident_at + timedelta(hours=rng.randrange(25)),
                )
            )

    return cases
