"""Great-circle distance between report coordinates.

Coordinates are ``(longitude, latitude)`` pairs in WGS84 degrees, the
same order GeoJSON points and the reports table use.
"""

from __future__ import annotations

import math

EARTH_RADIUS_M = 6_371_000.0


def haversine_m(coord_a: tuple[float, float], coord_b: tuple[float, float]) -> float:
    """Compute the great-circle distance between two points in metres."""
    lon1, lat1 = coord_a
    lon2, lat2 = coord_b
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)
    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(dlon / 2) ** 2
    )
    # Rounding can push ``a`` a hair past 1.0 for antipodal points
    a = min(1.0, a)
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def _is_real(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def valid_coordinates(coordinates: tuple[float, float] | None) -> bool:
    """Return ``True`` for a finite, in-range ``(lon, lat)`` pair."""
    if not isinstance(coordinates, (tuple, list)) or len(coordinates) != 2:
        return False
    lon, lat = coordinates
    if not (_is_real(lon) and _is_real(lat)):
        return False
    if not (math.isfinite(lon) and math.isfinite(lat)):
        return False
    return -180.0 <= lon <= 180.0 and -90.0 <= lat <= 90.0
