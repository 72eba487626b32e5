# parktrack/formats/points.py
"""
Point model for parktrack

A GpsPoint is one location fix as delivered by a device or the web client.
Devices are noisy: any field may be missing, NaN or out of range. Nothing in
this module raises for a bad field. Accessors such as `valid_coords()`
return None instead, and each calculation skips the points it cannot use.

The only hard failure is structural: asking for a point sequence and
receiving something that is not one (see `ensure_points`).
"""

from __future__ import annotations

import datetime as _dt
import json
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

from parktrack.errors import InvalidInputError, TrackReadError

Timestamp = Union[_dt.datetime, str, None]

# Keys accepted by GpsPoint.from_mapping, in lookup order.
_ALIASES = {
    "latitude": ("latitude", "lat"),
    "longitude": ("longitude", "lng", "lon"),
    "altitude_m": ("altitude_m", "altitudeM", "altitudeMeters", "altitude", "ele"),
    "speed_mps": ("speed_mps", "speedMps", "speedMetersPerSecond", "speed"),
    "heading_deg": ("heading_deg", "headingDegrees", "heading"),
    "accuracy_m": ("accuracy_m", "accuracyM", "accuracyMeters", "accuracy"),
    "recorded_at": ("recorded_at", "recordedAt", "timestamp", "time"),
}


def as_number(value: Any) -> Optional[float]:
    """
    Coerce a loosely-typed value into a finite float.

    Returns None for None, booleans, NaN/inf, ints too large for a float
    and anything float() rejects.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        num = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(num):
        return None
    return num


def parse_time_utc(value: Timestamp) -> Optional[_dt.datetime]:
    """
    Parse an ISO-8601 timestamp (or pass through a datetime) as tz-aware UTC.

    Expected examples:
      - "2026-01-02T21:14:44Z"
      - "2026-01-02T21:14:44.123Z"
      - "2026-01-02T21:14:44+00:00"

    Returns None when the value cannot be interpreted.
    """
    if value is None:
        return None
    if isinstance(value, _dt.datetime):
        dt = value
    elif isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        # Device and GPX times commonly use Z for UTC.
        if s.endswith("Z") or s.endswith("z"):
            s = s[:-1] + "+00:00"
        try:
            dt = _dt.datetime.fromisoformat(s)
        except ValueError:
            return None
    else:
        return None

    # Naive timestamps are assumed to be UTC.
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=_dt.timezone.utc)
    return dt.astimezone(_dt.timezone.utc)


@dataclass(frozen=True)
class GpsPoint:
    """
    One location fix.

    `latitude`/`longitude` are decimal degrees. `recorded_at` may be a
    datetime or an ISO-8601 string; it is parsed lazily by the reducers that
    need it.
    """

    latitude: Optional[float]
    longitude: Optional[float]
    recorded_at: Timestamp = None
    altitude_m: Optional[float] = None
    speed_mps: Optional[float] = None
    heading_deg: Optional[float] = None
    accuracy_m: Optional[float] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "GpsPoint":
        """
        Build a point from a dict as posted by the web client or a JSON dump.

        Both snake_case and camelCase keys are accepted, as well as the short
        `lat`/`lng` aliases. Malformed numbers become None; an unparsable
        timestamp is kept as None.
        """
        def pick(field: str) -> Any:
            for key in _ALIASES[field]:
                if data.get(key) is not None:
                    return data[key]
            return None

        recorded_at = pick("recorded_at")
        return cls(
            latitude=as_number(pick("latitude")),
            longitude=as_number(pick("longitude")),
            recorded_at=parse_time_utc(recorded_at),
            altitude_m=as_number(pick("altitude_m")),
            speed_mps=as_number(pick("speed_mps")),
            heading_deg=as_number(pick("heading_deg")),
            accuracy_m=as_number(pick("accuracy_m")),
        )

    def valid_coords(self) -> Optional[tuple[float, float]]:
        """Return (lat, lng) if both are finite and in range, else None."""
        lat = as_number(self.latitude)
        lng = as_number(self.longitude)
        if lat is None or lng is None:
            return None
        if not (-90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0):
            return None
        return lat, lng

    def valid_altitude(self) -> Optional[float]:
        return as_number(self.altitude_m)

    def valid_speed(self) -> Optional[float]:
        return as_number(self.speed_mps)

    def time_utc(self) -> Optional[_dt.datetime]:
        return parse_time_utc(self.recorded_at)


# Placeholder for list entries that are neither points nor mappings. It keeps
# the sequence length intact while contributing nothing to any calculation.
_EMPTY_POINT = GpsPoint(latitude=None, longitude=None)


def as_point(item: Any) -> GpsPoint:
    """Coerce a single list entry into a GpsPoint (never raises)."""
    if isinstance(item, GpsPoint):
        return item
    if isinstance(item, Mapping):
        return GpsPoint.from_mapping(item)
    return _EMPTY_POINT


def ensure_points(points: Optional[Iterable[Any]]) -> list[GpsPoint]:
    """
    Normalize a caller-supplied point sequence into a list of GpsPoint.

    - None is treated as an empty track (a session that has not started).
    - Mappings inside the sequence are converted with GpsPoint.from_mapping.
    - Entries of any other type are kept as empty placeholder points.

    Raises:
      InvalidInputError if `points` is not a sequence of points at all
      (a number, a string, a single mapping, ...).
    """
    if points is None:
        return []
    if isinstance(points, (str, bytes, bytearray, Mapping, GpsPoint)):
        raise InvalidInputError(
            f"expected a sequence of GPS points, got {type(points).__name__}"
        )
    if not isinstance(points, Iterable):
        raise InvalidInputError(
            f"expected a sequence of GPS points, got {type(points).__name__}"
        )
    return [as_point(p) for p in points]


def load_points_json(path: Path) -> list[GpsPoint]:
    """
    Read points from a JSON file.

    Accepted layouts:
      - a top-level array of point objects
      - an object with a "points" array (the shape the tracks API returns)

    Raises:
      TrackReadError if the file cannot be read or has neither layout.
    """
    try:
        doc = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise TrackReadError(f"Could not read JSON track {path}: {e}") from e

    if isinstance(doc, Mapping):
        doc = doc.get("points")
    if not isinstance(doc, list):
        raise TrackReadError(f"JSON track {path} has no point array")
    return ensure_points(doc)
