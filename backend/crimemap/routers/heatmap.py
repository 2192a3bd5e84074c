"""API routes for grid prediction heatmaps."""

import logging
from datetime import UTC, datetime
from typing import Annotated, Literal
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, Query

from crimemap.config import get_settings
from crimemap.dependencies import get_prediction_client
from crimemap.schemas.heatmap import (
    GridFeatureCollection,
    GridPredictionOut,
    HeatmapPredictionsResponse,
)
from crimemap.services.grid import (
    DEFAULT_MIN_RISK_PROBABILITY,
    build_feature_collection,
    summarize_predictions,
)
from crimemap.services.prediction_client import PredictionClient

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(prefix="/heatmap", tags=["heatmap"])

Weekday = Literal["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


def _time_context(hour: int | None, day: str | None, month: int | None) -> tuple[int, str, int]:
    """Fill unset parameters from the local wall clock."""
    now = datetime.now(ZoneInfo(settings.timezone))
    return (
        now.hour if hour is None else hour,
        now.strftime("%A") if day is None else day,
        now.month if month is None else month,
    )


def _grid_coverage() -> dict:
    return {
        "latRange": [settings.grid_lat_min, settings.grid_lat_max],
        "lngRange": [settings.grid_lng_min, settings.grid_lng_max],
        "gridSize": settings.grid_size,
        "cellSizeMeters": "~110m",
    }


@router.get("/geojson", response_model=GridFeatureCollection)
async def get_heatmap_geojson(
    client: Annotated[PredictionClient, Depends(get_prediction_client)],
    hour: int | None = Query(None, ge=0, le=23, description="Hour of day, default now"),
    day: Weekday | None = Query(None, description="Day of week, default today"),
    month: int | None = Query(None, ge=1, le=12, description="Month, default this month"),
    min_risk: float = Query(DEFAULT_MIN_RISK_PROBABILITY, ge=0, le=1, alias="minRisk"),
) -> GridFeatureCollection:
    """
    Grid risk predictions as a GeoJSON FeatureCollection.

    Cells below minRisk are kept when the model flags them high risk or when
    they have incidents on record.
    """
    hour, day, month = _time_context(hour, day, month)
    predictions = await client.fetch_grid_predictions(hour, day, month)

    collection = build_feature_collection(
        predictions,
        min_risk,
        hour=hour,
        day_of_week=day,
        month=month,
        coverage=_grid_coverage(),
    )
    logger.info(
        f"Heatmap for {day} {hour}:00 month {month}: "
        f"{collection['metadata']['statistics']['totalFeatures']} features"
    )
    return GridFeatureCollection.model_validate(collection)


@router.get("/predictions", response_model=HeatmapPredictionsResponse)
async def get_heatmap_predictions(
    client: Annotated[PredictionClient, Depends(get_prediction_client)],
    hour: int | None = Query(None, ge=0, le=23),
    day: Weekday | None = Query(None),
    month: int | None = Query(None, ge=1, le=12),
) -> HeatmapPredictionsResponse:
    """Raw grid cells for the time context, unfiltered."""
    hour, day, month = _time_context(hour, day, month)
    cells = await client.fetch_grid_predictions(hour, day, month)

    return HeatmapPredictionsResponse(
        predictions=[GridPredictionOut.model_validate(cell) for cell in cells],
        metadata={
            **summarize_predictions(cells),
            "parameters": {"hour": hour, "dayOfWeek": day, "month": month},
            "gridCoverage": _grid_coverage(),
            "generatedAt": datetime.now(UTC).isoformat(),
        },
    )
