"""Risk level ordering, count thresholds, and safety tip lookup tables."""

from dataclasses import dataclass
from enum import Enum


class RiskLevel(str, Enum):
    """Ordinal perimeter risk level."""

    LOW = "LOW"
    LOW_MEDIUM = "LOW_MEDIUM"
    MEDIUM = "MEDIUM"
    MEDIUM_HIGH = "MEDIUM_HIGH"
    HIGH = "HIGH"

    @property
    def rank(self) -> int:
        return _RANKS[self]


_RANKS = {level: i for i, level in enumerate(RiskLevel)}


def highest(levels) -> RiskLevel:
    """Ordinally highest level; LOW for an empty sequence."""
    return max(levels, key=lambda level: level.rank, default=RiskLevel.LOW)


@dataclass(frozen=True)
class RiskBand:
    """Counts below max_count_exclusive map to level (None means unbounded)."""

    max_count_exclusive: int | None
    level: RiskLevel


# Same thresholds the grid model was trained on: 2 -> LOW_MEDIUM, 3-4 -> MEDIUM,
# 5-7 -> MEDIUM_HIGH, 8+ -> HIGH.
RISK_BANDS: tuple[RiskBand, ...] = (
    RiskBand(2, RiskLevel.LOW),
    RiskBand(3, RiskLevel.LOW_MEDIUM),
    RiskBand(5, RiskLevel.MEDIUM),
    RiskBand(8, RiskLevel.MEDIUM_HIGH),
    RiskBand(None, RiskLevel.HIGH),
)


def validate_bands(bands: tuple[RiskBand, ...] = RISK_BANDS) -> None:
    """Raise ValueError unless bounds and levels both strictly increase."""
    if not bands or bands[-1].max_count_exclusive is not None:
        raise ValueError("Last risk band must be unbounded")

    previous_bound = 0
    previous_rank = -1
    for band in bands:
        if band.level.rank <= previous_rank:
            raise ValueError(f"Risk band levels must increase: {band.level.value}")
        if band.max_count_exclusive is not None:
            if band.max_count_exclusive <= previous_bound:
                raise ValueError(f"Risk band bounds must increase: {band.max_count_exclusive}")
            previous_bound = band.max_count_exclusive
        previous_rank = band.level.rank


def classify_count(crime_count: int, bands: tuple[RiskBand, ...] = RISK_BANDS) -> RiskLevel:
    """Map a perimeter crime count to its risk level."""
    for band in bands:
        if band.max_count_exclusive is None or crime_count < band.max_count_exclusive:
            return band.level
    return bands[-1].level


class SegmentBucket(str, Enum):
    """Coarse tier used when counting route segments."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


SEGMENT_BUCKETS: dict[RiskLevel, SegmentBucket] = {
    RiskLevel.HIGH: SegmentBucket.HIGH,
    RiskLevel.MEDIUM_HIGH: SegmentBucket.HIGH,
    RiskLevel.MEDIUM: SegmentBucket.MEDIUM,
    RiskLevel.LOW_MEDIUM: SegmentBucket.LOW,
    RiskLevel.LOW: SegmentBucket.LOW,
}


RISK_LEVEL_TIPS: dict[RiskLevel, str] = {
    RiskLevel.HIGH: "Exercise extreme caution in this area",
    RiskLevel.MEDIUM_HIGH: "Be extra vigilant when traveling through this area",
    RiskLevel.MEDIUM: "Take standard safety precautions",
    RiskLevel.LOW_MEDIUM: "Generally safe, but remain aware of surroundings",
    RiskLevel.LOW: "Low crime activity reported in this area",
}

RISK_LEVEL_DESCRIPTIONS: dict[RiskLevel, str] = {
    RiskLevel.HIGH: "Very High Risk - Exercise extreme caution",
    RiskLevel.MEDIUM_HIGH: "Elevated Risk - Be vigilant",
    RiskLevel.MEDIUM: "Moderate Risk - Stay aware",
    RiskLevel.LOW_MEDIUM: "Low-Moderate Risk - Standard precautions advised",
    RiskLevel.LOW: "Low Risk - Generally safe area",
}

CRIME_TYPE_TIPS: dict[str, str] = {
    "Theft": "Keep valuables secure and be aware of your surroundings",
    "Physical Injury": "Avoid confrontations and stay in well-lit areas",
    "Domestic Violence": "Community support resources are available - contact local authorities",
    "Drug-related": "Report suspicious activity to authorities",
    "Vandalism": "Report property damage promptly to local authorities",
    "Trespassing": "Secure property boundaries and report unauthorized access",
    "Others": "Stay vigilant and report any suspicious activity",
}

# Crime types at or above this share of a perimeter get a dedicated tip
DOMINANT_CRIME_PERCENTAGE = 15
MAX_SAFETY_TIPS = 4
