"""Great-circle distance helpers."""

from __future__ import annotations

import math
from typing import Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from .models import Coordinates

LatLon = Tuple[float, float]
Point = Union[Coordinates, LatLon]

_EARTH_RADIUS_M = 6_371_000.0

__all__ = ["distance_meters", "format_distance", "path_length_m"]


def _as_latlon(point: Optional[Point]) -> Optional[LatLon]:
    if point is None:
        return None
    if isinstance(point, Coordinates):
        return point.lat, point.lng
    lat, lng = point
    return lat, lng


def distance_meters(first: Optional[Point], second: Optional[Point]) -> float:
    """Return the haversine distance in metres between two coordinates.

    A missing coordinate yields ``math.inf`` so the pair can never fall inside
    a search radius. Non-finite input degrades the same way instead of raising.
    """

    a = _as_latlon(first)
    b = _as_latlon(second)
    if a is None or b is None:
        return math.inf
    try:
        lat1, lon1 = float(a[0]), float(a[1])
        lat2, lon2 = float(b[0]), float(b[1])
    except (TypeError, ValueError):
        return math.inf
    if not all(math.isfinite(v) for v in (lat1, lon1, lat2, lon2)):
        return math.inf
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    sin_half_lat = math.sin((lat2_rad - lat1_rad) / 2.0)
    sin_half_lon = math.sin(math.radians(lon2 - lon1) / 2.0)
    h = sin_half_lat**2 + math.cos(lat1_rad) * math.cos(lat2_rad) * sin_half_lon**2
    # Rounding can push h a hair outside [0, 1] for antipodal points.
    h = min(1.0, max(0.0, h))
    return _EARTH_RADIUS_M * 2.0 * math.atan2(math.sqrt(h), math.sqrt(1.0 - h))


def _haversine_steps(points: NDArray[np.float64]) -> NDArray[np.float64]:
    """Return the distance of every consecutive pair in an (n, 2) lat/lon array."""

    radians = np.radians(points)
    lat = radians[:, 0]
    lon = radians[:, 1]
    dlat = np.diff(lat)
    dlon = np.diff(lon)
    h = np.sin(dlat / 2.0) ** 2 + np.cos(lat[:-1]) * np.cos(lat[1:]) * np.sin(dlon / 2.0) ** 2
    h = np.clip(h, 0.0, 1.0)
    return _EARTH_RADIUS_M * 2.0 * np.arctan2(np.sqrt(h), np.sqrt(1.0 - h))


def path_length_m(points: Sequence[Point]) -> float:
    """Return the summed haversine length of a polyline in metres."""

    if len(points) < 2:
        return 0.0
    latlon = [_as_latlon(p) for p in points]
    array = np.asarray(latlon, dtype=float)
    if array.ndim != 2 or array.shape[1] != 2:
        raise ValueError("Expected a sequence of (lat, lon) coordinates")
    return float(np.sum(_haversine_steps(array)))


def format_distance(distance_m: Optional[float]) -> str:
    """Format a distance for display: ``"250m"`` or ``"1.4km"``."""

    if distance_m is None or not math.isfinite(distance_m):
        return "Unknown"
    if distance_m < 1000:
        return f"{round(distance_m)}m"
    return f"{distance_m / 1000:.1f}km"
