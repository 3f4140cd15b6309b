from __future__ import annotations

import math
from typing import Any

EARTH_RADIUS_KM = 6371.0

LAT_RANGE = (-90.0, 90.0)
LON_RANGE = (-180.0, 180.0)


class InvalidCoordinate(ValueError):
    """Raised when a latitude/longitude pair is non-finite or out of range."""

    def __init__(self, lat: Any, lon: Any, reason: str) -> None:
        self.lat = lat
        self.lon = lon
        self.reason = reason
        super().__init__(f"Invalid coordinate ({lat!r}, {lon!r}): {reason}")


def _as_degrees(value: Any) -> float:
    # bool is an int subclass; a True latitude is always a caller bug.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(type(value).__name__)
    return float(value)


def validate_coordinate(lat: Any, lon: Any) -> tuple[float, float]:
    """Return ``(lat, lon)`` as floats or raise :class:`InvalidCoordinate`.

    Values are never clamped into range.
    """
    try:
        lat_f = _as_degrees(lat)
        lon_f = _as_degrees(lon)
    except TypeError as exc:
        raise InvalidCoordinate(lat, lon, f"expected numbers, got {exc}") from exc

    if not (math.isfinite(lat_f) and math.isfinite(lon_f)):
        raise InvalidCoordinate(lat, lon, "latitude and longitude must be finite")
    if not (LAT_RANGE[0] <= lat_f <= LAT_RANGE[1]):
        raise InvalidCoordinate(lat, lon, "latitude must be within -90 to 90")
    if not (LON_RANGE[0] <= lon_f <= LON_RANGE[1]):
        raise InvalidCoordinate(lat, lon, "longitude must be within -180 to 180")
    return lat_f, lon_f


def is_valid_coordinate(lat: Any, lon: Any) -> bool:
    try:
        validate_coordinate(lat, lon)
    except InvalidCoordinate:
        return False
    return True


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    lat1_rad, lon1_rad = math.radians(lat1), math.radians(lon1)
    lat2_rad, lon2_rad = math.radians(lat2), math.radians(lon2)

    dlat = lat2_rad - lat1_rad
    dlon = lon2_rad - lon1_rad

    a = math.sin(dlat / 2) ** 2 + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlon / 2) ** 2
    # Clamp due to floating-point drift so we never take sqrt of a negative.
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


__all__ = [
    "EARTH_RADIUS_KM",
    "InvalidCoordinate",
    "haversine_distance",
    "is_valid_coordinate",
    "validate_coordinate",
]
