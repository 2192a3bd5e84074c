"""Grid prediction filter/transform into a GeoJSON feature collection."""

import math
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from crimemap.services.errors import UpstreamServiceError
from crimemap.services.geo import grid_cell_key

DEFAULT_MIN_RISK_PROBABILITY = 0.5

HIGH_PROBABILITY = 0.7
MEDIUM_PROBABILITY = 0.4


@dataclass(frozen=True)
class GridPredictionCell:
    """One cell of the externally scored grid."""

    latitude: float
    longitude: float
    predicted_high_risk: bool
    risk_probability: float
    historical_crime_count: int = 0

    @property
    def key(self) -> str:
        return grid_cell_key(self.latitude, self.longitude)

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "GridPredictionCell":
        """Validate a scoring-service row (snake_case keys)."""
        try:
            latitude = round(float(row["latitude"]), 3)
            longitude = round(float(row["longitude"]), 3)
            probability = float(row["risk_probability"])
            history = int(row.get("historical_crime_count") or 0)
            predicted = bool(row.get("predicted_is_high_risk", False))
        except (KeyError, TypeError, ValueError) as e:
            raise UpstreamServiceError(f"Malformed grid prediction row: {row!r}") from e

        if not (math.isfinite(latitude) and math.isfinite(longitude)):
            raise UpstreamServiceError(f"Grid prediction row has invalid coordinates: {row!r}")
        if not 0.0 <= probability <= 1.0:
            raise UpstreamServiceError(f"Risk probability out of range in row: {row!r}")

        return cls(
            latitude=latitude,
            longitude=longitude,
            predicted_high_risk=predicted,
            risk_probability=probability,
            historical_crime_count=max(history, 0),
        )


def probability_tier(probability: float) -> str:
    if probability >= HIGH_PROBABILITY:
        return "high"
    if probability >= MEDIUM_PROBABILITY:
        return "medium"
    return "low"


def is_retained(cell: GridPredictionCell, min_risk_probability: float) -> bool:
    """A cell with real incidents on record is never dropped."""
    return (
        cell.risk_probability >= min_risk_probability
        or cell.predicted_high_risk
        or cell.historical_crime_count > 0
    )


def filter_predictions(
    predictions: Iterable[GridPredictionCell],
    min_risk_probability: float = DEFAULT_MIN_RISK_PROBABILITY,
) -> list[GridPredictionCell]:
    """Retained cells, one per grid key, ordered by probability descending."""
    by_key: dict[str, GridPredictionCell] = {}
    for cell in predictions:
        if not is_retained(cell, min_risk_probability):
            continue
        current = by_key.get(cell.key)
        if current is None or (cell.risk_probability, cell.historical_crime_count) > (
            current.risk_probability,
            current.historical_crime_count,
        ):
            by_key[cell.key] = cell

    return sorted(by_key.values(), key=lambda c: (-c.risk_probability, c.key))


def to_feature(cell: GridPredictionCell) -> dict[str, Any]:
    return {
        "type": "Feature",
        "geometry": {
            "type": "Point",
            # GeoJSON order is [lng, lat]
            "coordinates": [cell.longitude, cell.latitude],
        },
        "properties": {
            "latitude": cell.latitude,
            "longitude": cell.longitude,
            "isHighRisk": cell.predicted_high_risk,
            "riskProbability": cell.risk_probability,
            "historicalCrimeCount": cell.historical_crime_count,
            "riskLevel": probability_tier(cell.risk_probability),
            "gridCell": cell.key,
        },
    }


def build_feature_collection(
    predictions: Iterable[GridPredictionCell],
    min_risk_probability: float = DEFAULT_MIN_RISK_PROBABILITY,
    *,
    hour: int,
    day_of_week: str,
    month: int,
    coverage: dict[str, Any] | None = None,
    generated_at: datetime | None = None,
) -> dict[str, Any]:
    """
    Filter, deduplicate and convert grid predictions to a FeatureCollection.

    An empty prediction set yields an empty collection with zero statistics.
    """
    features = [to_feature(cell) for cell in filter_predictions(predictions, min_risk_probability)]
    tiers = [feature["properties"]["riskLevel"] for feature in features]

    metadata: dict[str, Any] = {
        "generatedAt": (generated_at or datetime.now(UTC)).isoformat(),
        "parameters": {
            "hour": hour,
            "dayOfWeek": day_of_week,
            "month": month,
            "minRiskProbability": min_risk_probability,
        },
        "statistics": {
            "totalFeatures": len(features),
            "highRisk": tiers.count("high"),
            "mediumRisk": tiers.count("medium"),
            "lowRisk": tiers.count("low"),
        },
    }
    if coverage is not None:
        metadata["gridCoverage"] = coverage

    return {
        "type": "FeatureCollection",
        "features": features,
        "metadata": metadata,
    }


def summarize_predictions(cells: list[GridPredictionCell]) -> dict[str, Any]:
    """Headline numbers for the raw prediction endpoint."""
    if not cells:
        return {"totalGridCells": 0, "highRiskCells": 0, "averageRiskProbability": 0.0}
    return {
        "totalGridCells": len(cells),
        "highRiskCells": sum(1 for cell in cells if cell.predicted_high_risk),
        "averageRiskProbability": sum(cell.risk_probability for cell in cells) / len(cells),
    }
