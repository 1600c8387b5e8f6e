"""Great-circle distance helpers.

Computes haversine distances in kilometres, either between two points or
from one point to many at once.
"""

import math
from typing import Sequence

import numpy as np

from riskgate.common.constants import DetectionConstants
from riskgate.data.schemas.location import Location


EARTH_RADIUS_KM = DetectionConstants.EARTH_RADIUS_KM


def haversine_km(a: Location, b: Location) -> float:
    """Great-circle distance between two locations in km."""
    lat1, lat2 = math.radians(a.latitude), math.radians(b.latitude)
    d_lat = lat2 - lat1
    d_lon = math.radians(b.longitude - a.longitude)

    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_KM * c


def distances_km(origin: Location, points: Sequence[Location]) -> np.ndarray:
    """Distances from origin to every point, as a float array."""
    if not points:
        return np.empty(0, dtype=float)

    lats = np.radians([p.latitude for p in points])
    lons = np.radians([p.longitude for p in points])
    lat0 = math.radians(origin.latitude)
    lon0 = math.radians(origin.longitude)

    d_lat = lats - lat0
    d_lon = lons - lon0
    h = np.sin(d_lat / 2) ** 2 + math.cos(lat0) * np.cos(lats) * np.sin(d_lon / 2) ** 2
    # Rounding can push h a hair past 1 for antipodal points
    h = np.clip(h, 0.0, 1.0)
    return EARTH_RADIUS_KM * 2 * np.arctan2(np.sqrt(h), np.sqrt(1 - h))
