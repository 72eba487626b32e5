# parktrack/formats/geojson.py
"""
GeoJSON output for parktrack

GeoJSON orders positions [longitude, latitude, altitude]; everywhere else
in parktrack the order is (latitude, longitude).
"""

from __future__ import annotations

from typing import Any, Iterable, Optional

from parktrack.formats.points import ensure_points


def build_geojson(points: Optional[Iterable[Any]]) -> Optional[dict[str, Any]]:
    """
    Build a LineString geometry from a track.

    Points without usable coordinates are left out; the altitude component
    is only present for points that have one. Returns None when fewer than
    two positions remain.
    """
    coordinates: list[list[float]] = []
    for p in ensure_points(points):
        coords = p.valid_coords()
        if coords is None:
            continue
        lat, lng = coords
        alt = p.valid_altitude()
        coordinates.append([lng, lat, alt] if alt is not None else [lng, lat])

    if len(coordinates) < 2:
        return None

    return {"type": "LineString", "coordinates": coordinates}


def build_feature(
        points: Optional[Iterable[Any]],
        properties: Optional[dict[str, Any]] = None,
) -> Optional[dict[str, Any]]:
    """Wrap the track's LineString in a Feature, or None if there is no line."""
    geometry = build_geojson(points)
    if geometry is None:
        return None
    return {"type": "Feature", "geometry": geometry, "properties": dict(properties or {})}
