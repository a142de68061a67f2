"""Great-circle distance helpers."""

from __future__ import annotations

import math
from typing import Optional, Sequence

EARTH_RADIUS_KM = 6371.0


def haversine_km(first: Sequence[float], second: Sequence[float]) -> float:
    """Distance in km between two ``[lon, lat]`` points."""
    lon1, lat1 = float(first[0]), float(first[1])
    lon2, lat2 = float(second[0]), float(second[1])
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = math.sin(d_lat / 2) ** 2 + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def rounded_distance_km(first: Optional[Sequence[float]], second: Optional[Sequence[float]]) -> Optional[int]:
    """Distance rounded to whole km, or None when either point is missing."""
    if not first or not second or len(first) != 2 or len(second) != 2:
        return None
    return int(round(haversine_km(first, second)))
