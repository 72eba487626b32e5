# parktrack/analyze/track.py
"""
Track analysis functions for parktrack

Every reducer here is a pure function of an ordered point sequence:
  - no state between calls, no sorting of the input
  - a point missing the field a reducer needs is skipped, never fatal
  - None or an empty sequence yields zeros / None, never an exception
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Optional

from parktrack.analyze.geo import distance
from parktrack.formats.gpx import extract_points, read_gpx
from parktrack.formats.points import GpsPoint, ensure_points, load_points_json
from parktrack.util.units import round_half_up


@dataclass(frozen=True)
class ElevationStats:
    gain: float = 0.0
    loss: float = 0.0
    min: Optional[float] = None
    max: Optional[float] = None
    start: Optional[float] = None
    end: Optional[float] = None


@dataclass(frozen=True)
class SpeedStats:
    avg: float = 0.0
    min: float = 0.0
    max: float = 0.0


@dataclass(frozen=True)
class Bounds:
    min_lat: Optional[float] = None
    max_lat: Optional[float] = None
    min_lng: Optional[float] = None
    max_lng: Optional[float] = None


@dataclass(frozen=True)
class TrackStatsSnapshot:
    """Aggregate statistics over one point sequence (computed, consumed, discarded)."""

    distance_m: float = 0.0
    duration_s: int = 0
    elevation_gain_m: float = 0.0
    elevation_loss_m: float = 0.0
    min_elevation_m: Optional[float] = None
    max_elevation_m: Optional[float] = None
    avg_speed_mps: float = 0.0
    max_speed_mps: float = 0.0
    min_lat: Optional[float] = None
    max_lat: Optional[float] = None
    min_lng: Optional[float] = None
    max_lng: Optional[float] = None
    point_count: int = 0

    def as_dict(self) -> dict[str, Any]:
        """Wire shape used by the tracks API and the live-stats UI."""
        return {
            "distanceMeters": self.distance_m,
            "durationSeconds": self.duration_s,
            "elevationGainM": self.elevation_gain_m,
            "elevationLossM": self.elevation_loss_m,
            "minElevationM": self.min_elevation_m,
            "maxElevationM": self.max_elevation_m,
            "avgSpeedMps": self.avg_speed_mps,
            "maxSpeedMps": self.max_speed_mps,
            "minLat": self.min_lat,
            "maxLat": self.max_lat,
            "minLng": self.min_lng,
            "maxLng": self.max_lng,
            "pointCount": self.point_count,
        }


def total_distance(points: Optional[Iterable[Any]]) -> float:
    """
    Sum of haversine distances (m) between consecutive valid points.

    A point without usable coordinates is skipped; the next valid point is
    measured from the last valid one.
    """
    pts = ensure_points(points)
    total = 0.0
    prev: Optional[tuple[float, float]] = None

    for p in pts:
        coords = p.valid_coords()
        if coords is None:
            continue
        if prev is not None:
            total += distance(prev[0], prev[1], coords[0], coords[1])
        prev = coords

    return total


def elevation_stats(points: Optional[Iterable[Any]]) -> ElevationStats:
    """Return cumulative gain/loss and min/max/start/end altitude (m)."""
    pts = ensure_points(points)
    gain = 0.0
    loss = 0.0
    lo: Optional[float] = None
    hi: Optional[float] = None
    start: Optional[float] = None
    end: Optional[float] = None

    for p in pts:
        alt = p.valid_altitude()
        if alt is None:
            continue

        if lo is None or alt < lo:
            lo = alt
        if hi is None or alt > hi:
            hi = alt

        # `end` doubles as the last valid altitude of the delta chain.
        if start is None:
            start = alt
        else:
            diff = alt - end
            if diff > 0:
                gain += diff
            else:
                loss += -diff
        end = alt

    return ElevationStats(
        gain=round_half_up(gain, 2),
        loss=round_half_up(loss, 2),
        min=round_half_up(lo, 2) if lo is not None else None,
        max=round_half_up(hi, 2) if hi is not None else None,
        start=start,
        end=end,
    )


def speed_stats(points: Optional[Iterable[Any]]) -> SpeedStats:
    """
    Average/min/max of recorded speeds (m/s).

    Zero speeds are excluded so that pauses do not drag the average down.
    """
    pts = ensure_points(points)
    speeds = [s for s in (p.valid_speed() for p in pts) if s is not None and s > 0]
    if not speeds:
        return SpeedStats()

    return SpeedStats(
        avg=round_half_up(sum(speeds) / len(speeds), 3),
        min=round_half_up(min(speeds), 3),
        max=round_half_up(max(speeds), 3),
    )


def duration_seconds(points: Optional[Iterable[Any]]) -> int:
    """Whole seconds between the first and last point timestamps."""
    pts = ensure_points(points)
    if len(pts) < 2:
        return 0

    t0 = pts[0].time_utc()
    t1 = pts[-1].time_utc()
    if t0 is None or t1 is None:
        return 0
    return round_half_up((t1 - t0).total_seconds())


def bounds(points: Optional[Iterable[Any]]) -> Bounds:
    pts = ensure_points(points)
    coords = [c for c in (p.valid_coords() for p in pts) if c is not None]
    if not coords:
        return Bounds()

    lats = [c[0] for c in coords]
    lngs = [c[1] for c in coords]
    return Bounds(min_lat=min(lats), max_lat=max(lats), min_lng=min(lngs), max_lng=max(lngs))


def compute_stats(points: Optional[Iterable[Any]]) -> TrackStatsSnapshot:
    """Compose all reducers into one snapshot."""
    pts = ensure_points(points)
    elevation = elevation_stats(pts)
    speed = speed_stats(pts)
    box = bounds(pts)

    return TrackStatsSnapshot(
        distance_m=round_half_up(total_distance(pts), 2),
        duration_s=duration_seconds(pts),
        elevation_gain_m=elevation.gain,
        elevation_loss_m=elevation.loss,
        min_elevation_m=elevation.min,
        max_elevation_m=elevation.max,
        avg_speed_mps=speed.avg,
        max_speed_mps=speed.max,
        min_lat=box.min_lat,
        max_lat=box.max_lat,
        min_lng=box.min_lng,
        max_lng=box.max_lng,
        point_count=len(pts),
    )


def read_track(path: Path) -> list[GpsPoint]:
    """Load points from a .gpx or .json track file."""
    path = Path(path)
    if path.suffix.lower() == ".json":
        return load_points_json(path)
    return extract_points(read_gpx(path))


def analyze_track(path: Path) -> TrackStatsSnapshot:
    return compute_stats(read_track(path))
