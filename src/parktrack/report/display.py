# parktrack/report/display.py
"""
Display strings for live stats and track reports.

Every formatter accepts None/NaN and returns a placeholder instead of
raising. `unit` is "metric" (default) or "imperial"; anything else is
treated as metric.
"""

from __future__ import annotations

from typing import Any, Optional

from parktrack.analyze.activity import ActivityType
from parktrack.formats.points import as_number
from parktrack.util.units import (
    METERS_PER_MILE,
    meters_to_feet,
    mps_to_kph,
    mps_to_mph,
    round_half_up,
)

IMPERIAL = "imperial"
METRIC = "metric"

_DISPLAY_NAMES = {
    ActivityType.STATIONARY: "Stationary",
    ActivityType.WALKING: "Walking",
    ActivityType.HIKING: "Hiking",
    ActivityType.BIKING: "Biking",
    ActivityType.DRIVING: "Driving",
}

_ICONS = {
    ActivityType.WALKING: "\N{PEDESTRIAN}",
    ActivityType.HIKING: "\N{HIKING BOOT}",
    ActivityType.BIKING: "\N{BICYCLIST}",
    ActivityType.DRIVING: "\N{AUTOMOBILE}",
}
_DEFAULT_ICON = "\N{ROUND PUSHPIN}"


def _activity(value: Any) -> Optional[ActivityType]:
    try:
        return ActivityType(value)
    except ValueError:
        return None


def activity_display_name(activity: Any) -> str:
    return _DISPLAY_NAMES.get(_activity(activity), "Unknown")


def activity_icon(activity: Any) -> str:
    return _ICONS.get(_activity(activity), _DEFAULT_ICON)


def format_distance(meters: Any, unit: str = METRIC) -> str:
    m = as_number(meters)
    if m is None:
        return "0 m"

    if unit == IMPERIAL:
        miles = m / METERS_PER_MILE
        if miles < 0.1:
            return f"{round_half_up(meters_to_feet(m))} ft"
        return f"{miles:.2f} mi"

    if m < 1000:
        return f"{round_half_up(m)} m"
    return f"{m / 1000:.2f} km"


def format_duration(seconds: Any) -> str:
    """M:SS below an hour, H:MM:SS above."""
    s = as_number(seconds)
    if s is None or s < 0:
        return "0:00"

    hours = int(s // 3600)
    minutes = int((s % 3600) // 60)
    secs = int(s % 60)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def format_speed(mps: Any, unit: str = METRIC) -> str:
    v = as_number(mps)
    if v is None:
        return "0"
    if unit == IMPERIAL:
        return f"{mps_to_mph(v):.1f} mph"
    return f"{mps_to_kph(v):.1f} km/h"


def format_elevation(meters: Any, unit: str = METRIC) -> str:
    m = as_number(meters)
    if m is None:
        return "0"
    if unit == IMPERIAL:
        return f"{round_half_up(meters_to_feet(m))} ft"
    return f"{round_half_up(m)} m"


def format_pace(mps: Any, unit: str = METRIC) -> str:
    """Time per km (or mile) as M:SS; '--:--' when not moving."""
    v = as_number(mps)
    if v is None or v <= 0:
        return "--:--"

    if unit == IMPERIAL:
        seconds_per_unit = METERS_PER_MILE / v
        label = "/mi"
    else:
        seconds_per_unit = 1000 / v
        label = "/km"

    minutes = int(seconds_per_unit // 60)
    seconds = int(seconds_per_unit % 60)
    return f"{minutes}:{seconds:02d}{label}"
