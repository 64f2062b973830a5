"""
Great-circle distance helpers.
"""

import math
from typing import Iterable, List, Optional

from .models import CandidateLocation, GeoPoint, LocationConstraint

EARTH_RADIUS_METERS = 6371000.0


def haversine_distance(a: GeoPoint, b: GeoPoint) -> float:
    """
    Great-circle distance between two points in meters.

    a = sin²(Δφ/2) + cos(φ1)·cos(φ2)·sin²(Δλ/2)
    c = 2·atan2(√a, √(1-a))
    d = R·c
    """
    phi1 = math.radians(a.latitude)
    phi2 = math.radians(b.latitude)
    delta_phi = math.radians(b.latitude - a.latitude)
    delta_lambda = math.radians(b.longitude - a.longitude)

    h = (
        math.sin(delta_phi / 2) * math.sin(delta_phi / 2)
        + math.cos(phi1) * math.cos(phi2) * math.sin(delta_lambda / 2) * math.sin(delta_lambda / 2)
    )
    # Rounding can push h just past 1 for antipodal points
    h = min(1.0, h)
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))

    return EARTH_RADIUS_METERS * c


def geographic_center(points: Iterable[GeoPoint]) -> Optional[GeoPoint]:
    """
    Average latitude and longitude of the points.

    Good enough for points a few kilometers apart; returns None when there
    are no points.
    """
    point_list = list(points)
    if not point_list:
        return None

    latitude = sum(p.latitude for p in point_list) / len(point_list)
    longitude = sum(p.longitude for p in point_list) / len(point_list)
    return GeoPoint(latitude=latitude, longitude=longitude)


def filter_catalog(
    catalog: Iterable[CandidateLocation],
    constraint: LocationConstraint
) -> List[CandidateLocation]:
    """Keep the candidates within the constraint's radius of its center."""
    return [
        candidate for candidate in catalog
        if haversine_distance(constraint.center, candidate.coordinates) <= constraint.radius_meters
    ]
