#!/usr/bin/env python3
"""
Geo helpers - great-circle distance and radius prefilter boxes.
"""

import math
from dataclasses import dataclass
from typing import Any, Optional, Tuple

EARTH_RADIUS_KM = 6371.0
KM_PER_DEGREE_LAT = math.pi * EARTH_RADIUS_KM / 180.0


@dataclass(frozen=True)
class BoundingBox:
    min_lat: float
    max_lat: float
    # None when the box wraps the antimeridian or covers a pole
    min_lon: Optional[float]
    max_lon: Optional[float]


def as_coordinate(value: Any) -> Optional[float]:
    """Coerce a stored coordinate to a finite float, or None if unusable."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def coordinates_of(profile: Any) -> Optional[Tuple[float, float]]:
    """Return (lat, lon) when the profile carries a valid coordinate pair."""
    lat = as_coordinate(getattr(profile, 'latitude', None))
    lon = as_coordinate(getattr(profile, 'longitude', None))
    if lat is None or lon is None:
        return None
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
        return None
    return lat, lon


def haversine_km(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
    radius_km: float = EARTH_RADIUS_KM
) -> float:
    """Great-circle distance between two points in kilometres."""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2))
        * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return radius_km * c


def bounding_box(latitude: float, longitude: float, radius_km: float) -> BoundingBox:
    """
    Latitude/longitude box that contains every point within radius_km.

    The box over-approximates the circle; callers confirm with haversine_km.
    """
    d_lat = radius_km / KM_PER_DEGREE_LAT
    min_lat = max(-90.0, latitude - d_lat)
    max_lat = min(90.0, latitude + d_lat)

    if min_lat <= -90.0 or max_lat >= 90.0:
        return BoundingBox(min_lat, max_lat, None, None)

    cos_lat = math.cos(math.radians(latitude))
    d_lon = radius_km / (KM_PER_DEGREE_LAT * cos_lat)
    min_lon = longitude - d_lon
    max_lon = longitude + d_lon
    if min_lon < -180.0 or max_lon > 180.0:
        return BoundingBox(min_lat, max_lat, None, None)

    return BoundingBox(min_lat, max_lat, min_lon, max_lon)
