"""Tests for the grid prediction transform."""

from datetime import UTC, datetime

import pytest

from crimemap.services.errors import UpstreamServiceError
from crimemap.services.grid import (
    GridPredictionCell,
    build_feature_collection,
    filter_predictions,
    probability_tier,
    summarize_predictions,
)


def _collection(cells, min_risk=0.5, **kwargs):
    return build_feature_collection(
        cells, min_risk, hour=20, day_of_week="Friday", month=7, **kwargs
    )


class TestGridPredictionCell:
    """Tests for row validation."""

    def test_from_row(self):
        cell = GridPredictionCell.from_row(
            {
                "latitude": 14.40012,
                "longitude": "121.04049",
                "predicted_is_high_risk": True,
                "risk_probability": 0.81,
                "historical_crime_count": 4,
            }
        )

        assert (cell.latitude, cell.longitude) == (14.4, 121.04)
        assert cell.key == "14.400,121.040"
        assert cell.predicted_high_risk is True
        assert cell.historical_crime_count == 4

    def test_missing_history_defaults_to_zero(self):
        cell = GridPredictionCell.from_row(
            {"latitude": 14.4, "longitude": 121.04, "risk_probability": 0.2}
        )

        assert cell.historical_crime_count == 0
        assert cell.predicted_high_risk is False

    @pytest.mark.parametrize(
        "row",
        [
            {"longitude": 121.04, "risk_probability": 0.2},
            {"latitude": "north", "longitude": 121.04, "risk_probability": 0.2},
            {"latitude": 14.4, "longitude": 121.04, "risk_probability": 1.5},
            {"latitude": 14.4, "longitude": 121.04, "risk_probability": -0.1},
        ],
    )
    def test_malformed_rows_rejected(self, row):
        with pytest.raises(UpstreamServiceError):
            GridPredictionCell.from_row(row)


class TestFeatureCollection:
    """Tests for build_feature_collection."""

    def test_duplicate_cell_emitted_once(self):
        cells = [
            GridPredictionCell(14.400, 121.040, True, 0.8, 3),
            GridPredictionCell(14.400, 121.040, True, 0.75, 3),
        ]

        collection = _collection(cells)

        assert len(collection["features"]) == 1
        props = collection["features"][0]["properties"]
        assert props["gridCell"] == "14.400,121.040"
        assert props["riskLevel"] == "high"
        assert props["riskProbability"] == 0.8

    def test_no_shared_keys(self, sample_grid_cells):
        collection = _collection(sample_grid_cells, min_risk=0.0)

        keys = [f["properties"]["gridCell"] for f in collection["features"]]
        assert len(keys) == len(set(keys))

    def test_cells_with_history_always_retained(self, sample_grid_cells):
        collection = _collection(sample_grid_cells, min_risk=0.99)

        keys = {f["properties"]["gridCell"] for f in collection["features"]}
        assert "14.390,121.050" in keys
        # Flagged high risk by the model
        assert "14.400,121.040" in keys
        assert "14.420,121.060" not in keys

    def test_min_risk_filter(self, sample_grid_cells):
        collection = _collection(sample_grid_cells)

        keys = [f["properties"]["gridCell"] for f in collection["features"]]
        assert keys == ["14.400,121.040", "14.390,121.050"]

    def test_geometry_is_lng_lat(self):
        collection = _collection([GridPredictionCell(14.4, 121.04, True, 0.9, 0)])

        feature = collection["features"][0]
        assert feature["type"] == "Feature"
        assert feature["geometry"] == {"type": "Point", "coordinates": [121.04, 14.4]}

    def test_metadata(self, sample_grid_cells):
        generated_at = datetime(2024, 7, 5, 12, 0, tzinfo=UTC)
        collection = _collection(
            sample_grid_cells,
            min_risk=0.0,
            coverage={"gridSize": 0.001},
            generated_at=generated_at,
        )

        metadata = collection["metadata"]
        assert collection["type"] == "FeatureCollection"
        assert metadata["generatedAt"] == generated_at.isoformat()
        assert metadata["parameters"] == {
            "hour": 20,
            "dayOfWeek": "Friday",
            "month": 7,
            "minRiskProbability": 0.0,
        }
        assert metadata["statistics"] == {
            "totalFeatures": 4,
            "highRisk": 1,
            "mediumRisk": 1,
            "lowRisk": 2,
        }
        assert metadata["gridCoverage"] == {"gridSize": 0.001}

    def test_empty_predictions(self):
        collection = _collection([])

        assert collection["features"] == []
        assert collection["metadata"]["statistics"]["totalFeatures"] == 0
        assert "gridCoverage" not in collection["metadata"]


class TestHelpers:
    """Tests for tiering, filtering and summaries."""

    @pytest.mark.parametrize(
        "probability,tier",
        [(0.0, "low"), (0.39, "low"), (0.4, "medium"), (0.69, "medium"), (0.7, "high"), (1.0, "high")],
    )
    def test_probability_tier(self, probability, tier):
        assert probability_tier(probability) == tier

    def test_filter_orders_by_probability(self, sample_grid_cells):
        retained = filter_predictions(sample_grid_cells, 0.0)

        probabilities = [cell.risk_probability for cell in retained]
        assert probabilities == sorted(probabilities, reverse=True)

    def test_summarize(self, sample_grid_cells):
        summary = summarize_predictions(sample_grid_cells)

        assert summary["totalGridCells"] == 5
        assert summary["highRiskCells"] == 2
        assert summary["averageRiskProbability"] == pytest.approx(0.43)

    def test_summarize_empty(self):
        assert summarize_predictions([])["totalGridCells"] == 0
