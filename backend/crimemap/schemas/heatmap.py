"""Pydantic schemas for grid prediction heatmaps."""

from typing import Any, Literal

from pydantic import BaseModel

from crimemap.schemas.base import CamelModel


class PointGeometry(BaseModel):
    type: Literal["Point"] = "Point"
    coordinates: list[float]  # [lng, lat]


class GridFeatureProperties(CamelModel):
    latitude: float
    longitude: float
    is_high_risk: bool
    risk_probability: float
    historical_crime_count: int
    risk_level: Literal["high", "medium", "low"]
    grid_cell: str


class GridFeature(BaseModel):
    type: Literal["Feature"] = "Feature"
    geometry: PointGeometry
    properties: GridFeatureProperties


class GridFeatureCollection(BaseModel):
    """GeoJSON FeatureCollection with run metadata."""

    type: Literal["FeatureCollection"] = "FeatureCollection"
    features: list[GridFeature]
    metadata: dict[str, Any]


class GridPredictionOut(CamelModel):
    latitude: float
    longitude: float
    predicted_high_risk: bool
    risk_probability: float
    historical_crime_count: int


class HeatmapPredictionsResponse(CamelModel):
    predictions: list[GridPredictionOut]
    metadata: dict[str, Any]
