# parktrack/analyze/geo.py
"""
Great-circle distance for parktrack.
"""

from __future__ import annotations

from haversine import Unit, haversine

# Mean Earth radius used by the tracking backend, in meters.
EARTH_RADIUS_M = 6_371_000.0


def distance(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """
    Haversine distance in meters between two lat/lng pairs (degrees).

    The haversine package works on a slightly different mean radius, so the
    angular distance is taken in radians and scaled by EARTH_RADIUS_M.

    Raises:
      ValueError for coordinates outside [-90, 90] / [-180, 180].
    """
    central_angle = haversine((lat1, lng1), (lat2, lng2), unit=Unit.RADIANS)
    return EARTH_RADIUS_M * central_angle
