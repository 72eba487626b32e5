# parktrack/analyze/simplify.py
"""
Douglas-Peucker track simplification for parktrack

Distances are planar, measured directly in (latitude, longitude) degrees.
That is close enough for a single hike or ride and keeps stored tracks
compatible with the web client; it distorts near the poles and over very
long tracks. Tolerance is therefore in degrees too (1e-5 deg ~ 1.1 m of
latitude).
"""

from __future__ import annotations

import math
from typing import Any, Iterable, Optional

from parktrack.formats.points import GpsPoint, ensure_points

DEFAULT_TOLERANCE_DEG = 0.00001

Coords = Optional[tuple[float, float]]


def _segment_distance(p: Coords, a: Coords, b: Coords) -> float:
    if p is None or a is None or b is None:
        return 0.0

    d_lat = b[0] - a[0]
    d_lng = b[1] - a[1]
    len_sq = d_lat * d_lat + d_lng * d_lng

    t = 0.0
    if len_sq != 0:
        t = ((p[0] - a[0]) * d_lat + (p[1] - a[1]) * d_lng) / len_sq
        t = min(max(t, 0.0), 1.0)

    return math.hypot(p[0] - (a[0] + t * d_lat), p[1] - (a[1] + t * d_lng))


def perpendicular_distance(point: GpsPoint, start: GpsPoint, end: GpsPoint) -> float:
    """
    Distance from `point` to the segment start-end, in degrees.

    The projection parameter is clamped to [0, 1], so points beyond either
    end are measured to that endpoint. A degenerate segment (start == end)
    measures to `start`. Returns 0.0 if any of the three points has no
    usable coordinates.
    """
    return _segment_distance(point.valid_coords(), start.valid_coords(), end.valid_coords())


def simplify(
        points: Optional[Iterable[Any]],
        tolerance: float = DEFAULT_TOLERANCE_DEG,
) -> list[GpsPoint]:
    """
    Reduce a track while keeping every dropped point within `tolerance`.

    For each span, the interior point farthest from the chord is found. If
    it is farther than `tolerance`, the span is split there and both halves
    are processed; otherwise only the span's endpoints survive. The first
    and last points are always kept, and tracks of two points or fewer come
    back with the same points.

    The result is always a list of GpsPoint: GpsPoint entries are returned
    as the same objects, while mappings are converted (so a list of dicts
    comes back as new GpsPoint objects even when nothing is dropped).

    Spans are processed from an explicit stack rather than by recursion, so
    long recordings cannot exhaust the interpreter's recursion limit. The
    result is the same as the recursive formulation.
    """
    pts = ensure_points(points)
    if len(pts) <= 2:
        return pts

    tolerance = max(tolerance, 0.0)
    coords = [p.valid_coords() for p in pts]
    keep = [False] * len(pts)
    keep[0] = keep[-1] = True

    stack = [(0, len(pts) - 1)]
    while stack:
        start, end = stack.pop()
        max_dist = 0.0
        max_index = 0

        for i in range(start + 1, end):
            dist = _segment_distance(coords[i], coords[start], coords[end])
            if dist > max_dist:
                max_dist = dist
                max_index = i

        if max_dist > tolerance:
            keep[max_index] = True
            stack.append((max_index, end))
            stack.append((start, max_index))

    return [p for p, k in zip(pts, keep) if k]
