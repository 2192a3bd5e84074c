"""Tests for the route segment aggregator."""

import pytest

from crimemap.services.errors import RiskInputError
from crimemap.services.filters import IncidentFilters
from crimemap.services.geo import Coordinate
from crimemap.services.risk_levels import RiskLevel
from crimemap.services.route import assess_route, route_recommendations, safety_score

A = Coordinate(lat=14.370, lng=121.030)
B = Coordinate(lat=14.380, lng=121.030)
C = Coordinate(lat=14.390, lng=121.030)

# Midpoint of the B-C segment
HOTSPOT = Coordinate(lat=14.385, lng=121.030)


@pytest.fixture
def hotspot_incidents(make_incident):
    """Twelve thefts clustered around the B-C midpoint."""
    return [
        make_incident(i, HOTSPOT.lat + (i % 4) * 0.0002, HOTSPOT.lng + (i // 4) * 0.0002, 1)
        for i in range(1, 13)
    ]


class TestAssessRoute:
    """Tests for assess_route."""

    def test_quiet_then_hotspot_segment(self, hotspot_incidents):
        result = assess_route([A, B, C], hotspot_incidents)

        assert [segment.risk_level for segment in result.segments] == [
            RiskLevel.LOW,
            RiskLevel.HIGH,
        ]
        assert result.risk_level == RiskLevel.HIGH
        assert result.high_risk_segments == 1
        assert result.low_risk_segments == 1
        assert result.medium_risk_segments == 0
        assert result.safety_score == 50
        assert result.safety_score < 100

    def test_segment_indices_and_midpoint(self, hotspot_incidents):
        result = assess_route([A, B, C], hotspot_incidents)

        second = result.segments[1]
        assert (second.index, second.start_index, second.end_index) == (1, 1, 2)
        assert second.start == B and second.end == C
        assert second.midpoint.lat == pytest.approx(HOTSPOT.lat)
        assert second.crime_count == 12

    def test_any_high_segment_makes_route_high(self, hotspot_incidents):
        """Worst case wins regardless of how many quiet segments surround it."""
        far = [Coordinate(lat=14.30 + i * 0.01, lng=121.10) for i in range(6)]

        result = assess_route(far + [B, C], hotspot_incidents)

        assert result.high_risk_segments == 1
        assert result.risk_level == RiskLevel.HIGH

    def test_empty_route_area_is_safe(self):
        result = assess_route([A, B, C], [])

        assert result.risk_level == RiskLevel.LOW
        assert result.total_crime_count == 0
        assert result.safety_score == 100
        assert result.crime_type_breakdown == []
        assert "Route appears relatively safe based on recent crime data" in result.recommendations

    def test_route_breakdown_deduplicates_incidents(self, make_incident):
        """An incident near a shared vertex counts once at route level."""
        start = Coordinate(lat=14.400, lng=121.040)
        middle = Coordinate(lat=14.401, lng=121.040)
        end = Coordinate(lat=14.402, lng=121.040)
        incidents = [make_incident(1, 14.401, 121.040, 1)]

        result = assess_route([start, middle, end], incidents)

        assert result.total_crime_count == 2
        assert result.route_crime_count == 1
        assert result.crime_type_breakdown[0].count == 1

    def test_filters_applied(self, hotspot_incidents):
        filters = IncidentFilters(crime_type_ids=frozenset({5}))

        result = assess_route([A, B, C], hotspot_incidents, filters=filters)

        assert result.risk_level == RiskLevel.LOW

    def test_passthrough_distance_and_duration(self):
        result = assess_route([A, B], [], distance=1113.2, duration=840.0)

        assert result.distance == 1113.2
        assert result.duration == 840.0

    @pytest.mark.parametrize("route", [[], [A]])
    def test_requires_two_points(self, route):
        with pytest.raises(RiskInputError, match="at least two points"):
            assess_route(route, [])

    def test_invalid_point(self):
        with pytest.raises(RiskInputError):
            assess_route([A, Coordinate(lat=95.0, lng=121.0)], [])


class TestSafetyScore:
    """Tests for safety_score."""

    @pytest.mark.parametrize(
        "high,medium,total,expected",
        [
            (0, 0, 5, 100),
            (0, 1, 2, 75),
            (1, 0, 2, 50),
            (3, 0, 3, 0),
            (0, 0, 0, 100),
        ],
    )
    def test_values(self, high, medium, total, expected):
        assert safety_score(high, medium, total) == expected

    def test_bounds(self):
        for total in range(1, 8):
            for high in range(total + 1):
                for medium in range(total - high + 1):
                    assert 0 <= safety_score(high, medium, total) <= 100


class TestRecommendations:
    """Tests for route_recommendations."""

    def test_high_route(self):
        recommendations = route_recommendations(RiskLevel.HIGH, 2, [])

        assert recommendations[0] == "Consider traveling during daylight hours for increased safety"
        assert recommendations[1] == "Route passes through 2 high-risk areas - stay alert"

    def test_medium_high_segment_not_reported_as_high_risk_area(self, hotspot_incidents):
        result = assess_route([A, B, C], hotspot_incidents[:6])

        assert result.risk_level == RiskLevel.MEDIUM_HIGH
        assert result.high_risk_segments == 1
        assert not any(r.startswith("Route passes through") for r in result.recommendations)
        assert result.recommendations[0] == (
            "Consider traveling during daylight hours for increased safety"
        )

    def test_high_risk_area_count(self, hotspot_incidents):
        result = assess_route([A, B, C], hotspot_incidents)

        assert "Route passes through 1 high-risk area - stay alert" in result.recommendations

    def test_capped_and_unique(self, hotspot_incidents):
        result = assess_route([A, B, C], hotspot_incidents)

        assert len(result.recommendations) <= 4
        assert len(result.recommendations) == len(set(result.recommendations))
