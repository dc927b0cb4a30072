"""
Geometry utilities: query point, great-circle distance, unit conversions.
"""
import math
import re
from dataclasses import dataclass
from typing import Any, Tuple

from earthscore.core.api_errors import InvalidPointError

EARTH_RADIUS_KM = 6371.0

_DECIMAL_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")


@dataclass(frozen=True)
class Point:
    """A validated WGS84 coordinate pair."""

    latitude: float
    longitude: float

    def __post_init__(self):
        for name, value, limit in (
            ("latitude", self.latitude, 90.0),
            ("longitude", self.longitude, 180.0),
        ):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidPointError(f"{name} must be a number")
            if not math.isfinite(value):
                raise InvalidPointError(f"{name} must be finite")
            if abs(value) > limit:
                raise InvalidPointError(f"{name} must be within [-{limit:g}, {limit:g}]")

    @classmethod
    def parse(cls, lat: Any, lon: Any) -> "Point":
        """Build a point from loosely typed input (query strings, JSON)."""
        return cls(_coordinate(lat), _coordinate(lon))

    def to_dict(self) -> dict:
        return {"lat": self.latitude, "lon": self.longitude}


def _coordinate(value: Any) -> float:
    if isinstance(value, str) and not _DECIMAL_RE.match(value.strip()):
        raise InvalidPointError("lat and lon must be numbers")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise InvalidPointError("lat and lon must be numbers")


def distance_km(a: Point, b: Point) -> float:
    """
    Haversine great-circle distance in kilometers.

    The square-root argument is clamped to [0, 1] so rounding near antipodal
    points cannot push asin out of its domain.
    """
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    d_lat = lat2 - lat1
    d_lon = math.radians(b.longitude - a.longitude)

    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    )
    h = min(1.0, max(0.0, h))
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(h))


def c_to_f(celsius: float) -> float:
    return celsius * 9.0 / 5.0 + 32.0


def f_to_c(fahrenheit: float) -> float:
    return (fahrenheit - 32.0) * 5.0 / 9.0


def bounding_box(point: Point, radius_km: float) -> Tuple[float, float, float, float]:
    """
    Approximate box around a point.

    Returns:
        (min_lon, min_lat, max_lon, max_lat), clipped to valid ranges
    """
    d_lat = math.degrees(radius_km / EARTH_RADIUS_KM)
    cos_lat = math.cos(math.radians(point.latitude))
    # Near the poles a longitude span is meaningless; take the whole band
    d_lon = 180.0 if cos_lat < 1e-6 else min(180.0, d_lat / cos_lat)

    return (
        max(-180.0, point.longitude - d_lon),
        max(-90.0, point.latitude - d_lat),
        min(180.0, point.longitude + d_lon),
        min(90.0, point.latitude + d_lat),
    )


def finite_or_none(value: Any):
    """Return value as float when it is a finite number, otherwise None."""
    if isinstance(value, bool):
        return None
    try:
        f = float(value)
    except (TypeError, ValueError):
        return None
    return f if math.isfinite(f) else None
