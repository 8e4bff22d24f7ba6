"""Geospatial helper functions.

Distances are great-circle miles. Segment projection interpolates linearly in
latitude/longitude space, which is inexact over long legs; results should not be
read as sub-mile accurate.
"""

from __future__ import annotations

import math
from typing import Sequence

from ..models.domain import Coordinate

EARTH_RADIUS_MILES = 3958.8
# relative to the direct leg length
ADDED_MILES_TOLERANCE = 1e-9


def haversine_miles(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_MILES * c


def distance(a: Coordinate, b: Coordinate) -> float:
    return haversine_miles(a.latitude, a.longitude, b.latitude, b.longitude)


def route_length(points: Sequence[Coordinate]) -> float:
    """Sum of leg distances along ``points``; a single point has zero length."""

    if not points:
        raise ValueError("A route needs at least one point.")
    return sum(distance(points[i], points[i + 1]) for i in range(len(points) - 1))


def segment_projection_distance(start: Coordinate, end: Coordinate, point: Coordinate) -> float:
    """Distance from ``point`` to the closest point on the start->end segment.

    The projection parameter is clamped to [0, 1] so the closest point never
    lies beyond either endpoint.
    """

    if start.same_point(end):
        return distance(start, point)

    d_lat = end.latitude - start.latitude
    d_lon = end.longitude - start.longitude
    t = ((point.latitude - start.latitude) * d_lat + (point.longitude - start.longitude) * d_lon) / (
        d_lat * d_lat + d_lon * d_lon
    )
    t = max(0.0, min(1.0, t))

    closest_lat = start.latitude + t * d_lat
    closest_lon = start.longitude + t * d_lon
    return haversine_miles(point.latitude, point.longitude, closest_lat, closest_lon)


def added_miles(route_start: Coordinate, route_end: Coordinate, detour_point: Coordinate) -> float:
    """Extra miles for going start -> detour -> end instead of start -> end, never negative.

    Rounding residue from summing the legs is reported as exactly zero so a
    point on the segment never yields a tiny positive detour.
    """

    direct = distance(route_start, route_end)
    via_detour = distance(route_start, detour_point) + distance(detour_point, route_end)
    extra = via_detour - direct
    if extra <= ADDED_MILES_TOLERANCE * max(direct, 1.0):
        return 0.0
    return extra


def distance_from_route(points: Sequence[Coordinate], point: Coordinate) -> float:
    """Straight-line distance from ``point`` to the nearest waypoint of the route."""

    if not points:
        raise ValueError("A route needs at least one point.")
    return min(distance(waypoint, point) for waypoint in points)
