# parktrack/analyze/session.py
"""
Live tracking session for parktrack

One TrackingSession per recording. It owns its ActivityDetector and the
buffered fixes, so concurrent sessions never share state:

    fix -> add_point() -> detector (live activity)
                       -> buffer  -> stats() / simplified() / geojson()
"""

from __future__ import annotations

from typing import Any, Optional

from parktrack.analyze.activity import (
    ActivityDetector,
    ActivityType,
    DetectionResult,
    dominant_activity,
)
from parktrack.analyze.simplify import simplify
from parktrack.analyze.track import TrackStatsSnapshot, compute_stats
from parktrack.config import TrackingConfig
from parktrack.formats.geojson import build_geojson
from parktrack.formats.points import GpsPoint, as_point


class TrackingSession:
    def __init__(self, config: Optional[TrackingConfig] = None) -> None:
        self.config = config or TrackingConfig()
        self.detector = ActivityDetector.from_config(self.config)
        self._points: list[GpsPoint] = []
        self.last_result: Optional[DetectionResult] = None

    @property
    def points(self) -> tuple[GpsPoint, ...]:
        return tuple(self._points)

    def add_point(self, point: Any) -> DetectionResult:
        """Buffer one fix (GpsPoint or mapping) and update the live activity."""
        p = as_point(point)
        self._points.append(p)
        self.last_result = self.detector.add_speed(p.speed_mps)
        return self.last_result

    def stats(self) -> TrackStatsSnapshot:
        return compute_stats(self._points)

    def simplified(self, tolerance: Optional[float] = None) -> list[GpsPoint]:
        if tolerance is None:
            tolerance = self.config.simplify_tolerance
        return simplify(self._points, tolerance)

    def geojson(self, *, simplify_first: bool = True) -> Optional[dict[str, Any]]:
        pts = self.simplified() if simplify_first else self._points
        return build_geojson(pts)

    def dominant_activity(self) -> ActivityType:
        return dominant_activity(self._points)

    def reset(self) -> None:
        self._points = []
        self.detector.reset()
        self.last_result = None
