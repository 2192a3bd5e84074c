"""Small geodesic helpers for perimeter and route computations."""

import math
from dataclasses import dataclass

from crimemap.services.errors import RiskInputError

EARTH_RADIUS_M = 6371000.0

# Metres per degree of latitude on the haversine sphere
METERS_PER_DEGREE = EARTH_RADIUS_M * math.pi / 180

# Bounding boxes are padded slightly wider than the radius so that rounding
# never drops a point the exact distance test would keep
BOX_PAD_FACTOR = 1.01


@dataclass(frozen=True)
class Coordinate:
    """A latitude/longitude pair in degrees."""

    lat: float
    lng: float


def validate_coordinate(lat: float, lng: float) -> Coordinate:
    """Return a Coordinate, rejecting NaN/inf and out-of-range values."""
    try:
        lat = float(lat)
        lng = float(lng)
    except (TypeError, ValueError) as e:
        raise RiskInputError("Invalid coordinates: lat and lng must be numbers") from e

    if not (math.isfinite(lat) and math.isfinite(lng)):
        raise RiskInputError("Invalid coordinates: lat and lng must be finite numbers")
    if not -90.0 <= lat <= 90.0:
        raise RiskInputError(f"Invalid latitude {lat}: must be between -90 and 90")
    if not -180.0 <= lng <= 180.0:
        raise RiskInputError(f"Invalid longitude {lng}: must be between -180 and 180")
    return Coordinate(lat=lat, lng=lng)


def parse_coordinate(lat: str | None, lng: str | None) -> Coordinate:
    """Parse query-string coordinates."""
    if lat is None or lng is None or not lat.strip() or not lng.strip():
        raise RiskInputError("Missing required parameters: lat and lng")
    try:
        lat_value, lng_value = float(lat), float(lng)
    except ValueError as e:
        raise RiskInputError("Invalid coordinates: lat and lng must be numbers") from e
    return validate_coordinate(lat_value, lng_value)


def haversine_m(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance in metres."""
    lat1, lat2 = math.radians(a.lat), math.radians(b.lat)
    dlat = lat2 - lat1
    dlng = math.radians(b.lng - a.lng)

    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    return 2 * EARTH_RADIUS_M * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def midpoint(a: Coordinate, b: Coordinate) -> Coordinate:
    """Planar midpoint; segments are short enough that curvature does not matter."""
    return Coordinate(lat=(a.lat + b.lat) / 2, lng=(a.lng + b.lng) / 2)


def bounding_box(points: list[Coordinate], radius_m: float) -> tuple[float, float, float, float]:
    """
    Degree bounding box (min_lat, max_lat, min_lng, max_lng) padded by radius_m.

    Used to narrow database reads; the exact distance test still runs afterwards.
    """
    min_lat = min(p.lat for p in points)
    max_lat = max(p.lat for p in points)
    min_lng = min(p.lng for p in points)
    max_lng = max(p.lng for p in points)

    pad_m = radius_m * BOX_PAD_FACTOR
    lat_pad = pad_m / METERS_PER_DEGREE
    widest = max(abs(min_lat), abs(max_lat))
    lng_pad = pad_m / (METERS_PER_DEGREE * max(math.cos(math.radians(widest)), 0.01))

    return min_lat - lat_pad, max_lat + lat_pad, min_lng - lng_pad, max_lng + lng_pad


def grid_cell_key(lat: float, lng: float) -> str:
    """Stable 3-decimal (~110m) grid cell key."""
    return f"{lat:.3f},{lng:.3f}"
