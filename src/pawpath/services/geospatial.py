"""Geospatial helper functions."""

from __future__ import annotations

import math

from ..models.domain import Coordinates

EARTH_RADIUS_MILES = 3959.0


def haversine_miles(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_MILES * c


def distance_between(origin: Coordinates, destination: Coordinates) -> float | None:
    """Miles between two points, or None when either point is unusable."""

    if not (origin.is_valid and destination.is_valid):
        return None
    return haversine_miles(origin.lat, origin.lng, destination.lat, destination.lng)


def travel_minutes(distance_miles: float, speed_mph: float) -> float:
    return distance_miles / speed_mph * 60
