# parktrack/analyze/activity.py
"""
Activity detection for parktrack

Classifies motion (stationary / walking / biking / driving) from speed.

Two independent classifiers live here:
  - ActivityDetector: live, per-sample, hysteresis-filtered. One instance
    per tracking session; it owns all of its state.
  - dominant_activity(): post-hoc, over a completed point list.

Neither can tell hiking from walking (same speed band). Callers that care
relabel walking tracks themselves.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Iterable, Mapping, Optional

from parktrack.formats.points import as_number, ensure_points
from parktrack.util.units import mps_to_kph, mps_to_mph

if TYPE_CHECKING:
    from parktrack.config import TrackingConfig


class ActivityType(str, Enum):
    STATIONARY = "stationary"
    WALKING = "walking"
    HIKING = "hiking"
    BIKING = "biking"
    DRIVING = "driving"


# Upper bounds (exclusive), m/s. Anything at or above BIKING_MAX is driving.
STATIONARY_MAX = 0.5   # < 1.1 mph
WALKING_MAX = 2.7      # < 6 mph
BIKING_MAX = 8.9       # < 20 mph

DEFAULT_WINDOW_SIZE = 10
DEFAULT_STABILITY_THRESHOLD = 3


def coerce_speed(speed_mps: Any) -> Optional[float]:
    """None for missing/NaN/non-numeric samples, 0.0 for negative ones."""
    speed = as_number(speed_mps)
    if speed is None:
        return None
    return max(speed, 0.0)


def classify_speed(speed_mps: Any) -> ActivityType:
    """Map a single speed reading onto its bucket."""
    speed = coerce_speed(speed_mps)
    if speed is None or speed < STATIONARY_MAX:
        return ActivityType.STATIONARY
    if speed < WALKING_MAX:
        return ActivityType.WALKING
    if speed < BIKING_MAX:
        return ActivityType.BIKING
    return ActivityType.DRIVING


def rolling_average(speeds: Iterable[Any], window_size: int = DEFAULT_WINDOW_SIZE) -> float:
    """Mean of the last `window_size` usable samples; 0.0 if there are none."""
    valid = [s for s in (as_number(v) for v in speeds or ()) if s is not None]
    recent = valid[-window_size:]
    if not recent:
        return 0.0
    return sum(recent) / len(recent)


def detect_activity_from_speeds(
        speeds: Iterable[Any], window_size: int = DEFAULT_WINDOW_SIZE,
) -> ActivityType:
    return classify_speed(rolling_average(speeds, window_size))


# ---------------------------------------------------------------------------
# Hysteresis state machine
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class HysteresisState:
    """
    Displayed activity plus the evidence for changing it.

    - current: the activity the UI shows
    - stability_count: raw detections agreeing with `current`
    - candidates: sightings per not-yet-adopted activity since the last change
    """

    current: ActivityType = ActivityType.STATIONARY
    stability_count: int = 0
    candidates: Mapping[ActivityType, int] = field(
        default_factory=lambda: MappingProxyType({})
    )


def advance(state: HysteresisState, raw: ActivityType, threshold: int) -> HysteresisState:
    """
    Single transition rule.

    A raw detection matching `current` adds to its stability. Any other
    detection counts toward that candidate; once a candidate has been seen
    `threshold` times it becomes current, and all candidate counts reset.
    """
    if raw == state.current:
        return replace(state, stability_count=state.stability_count + 1)

    seen = state.candidates.get(raw, 0) + 1
    if seen >= threshold:
        return HysteresisState(current=raw, stability_count=seen)

    candidates = dict(state.candidates)
    candidates[raw] = seen
    return replace(state, candidates=MappingProxyType(candidates))


# ---------------------------------------------------------------------------
# Live detector
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class DetectionResult:
    activity: ActivityType
    raw_activity: ActivityType
    avg_speed_mps: float
    avg_speed_mph: float
    avg_speed_kph: float
    is_stable: bool
    confidence: float

    def as_dict(self) -> dict[str, Any]:
        return {
            "activity": self.activity.value,
            "rawActivity": self.raw_activity.value,
            "avgSpeedMps": self.avg_speed_mps,
            "avgSpeedMph": self.avg_speed_mph,
            "avgSpeedKph": self.avg_speed_kph,
            "isStable": self.is_stable,
            "confidence": self.confidence,
        }


class ActivityDetector:
    """
    Session-scoped activity classifier.

    Feed one speed sample per location fix, in chronological order. A single
    outlier never changes the displayed activity; `stability_threshold`
    detections of the same new activity do.

    Not thread-safe and not meant to be shared between sessions.
    """

    def __init__(
            self,
            window_size: Optional[int] = None,
            stability_threshold: Optional[int] = None,
    ) -> None:
        self.window_size = window_size if window_size and window_size > 0 else DEFAULT_WINDOW_SIZE
        self.stability_threshold = (
            stability_threshold
            if stability_threshold and stability_threshold > 0
            else DEFAULT_STABILITY_THRESHOLD
        )
        self._speeds: list[Optional[float]] = []
        self._state = HysteresisState()

    @classmethod
    def from_config(cls, cfg: "TrackingConfig") -> "ActivityDetector":
        return cls(window_size=cfg.window_size, stability_threshold=cfg.stability_threshold)

    @property
    def state(self) -> HysteresisState:
        return self._state

    @property
    def current_activity(self) -> ActivityType:
        return self._state.current

    def average_speed(self) -> float:
        return rolling_average(self._speeds, self.window_size)

    def add_speed(self, speed_mps: Any) -> DetectionResult:
        self._speeds.append(coerce_speed(speed_mps))
        if len(self._speeds) > self.window_size * 2:
            self._speeds = self._speeds[-self.window_size:]

        avg = self.average_speed()
        raw = classify_speed(avg)
        self._state = advance(self._state, raw, self.stability_threshold)

        count = self._state.stability_count
        return DetectionResult(
            activity=self._state.current,
            raw_activity=raw,
            avg_speed_mps=avg,
            avg_speed_mph=mps_to_mph(avg),
            avg_speed_kph=mps_to_kph(avg),
            is_stable=count >= self.stability_threshold,
            confidence=min(count / self.stability_threshold, 1.0),
        )

    def reset(self) -> None:
        self._speeds = []
        self._state = HysteresisState()


def dominant_activity(points: Optional[Iterable[Any]]) -> ActivityType:
    """
    Most frequent moving activity over a completed track.

    Stationary samples are pauses, not evidence, and are ignored. Falls back
    to walking when no point carries a moving speed.
    """
    counts: dict[ActivityType, int] = {}
    for p in ensure_points(points):
        if p.speed_mps is None:
            continue
        activity = classify_speed(p.speed_mps)
        if activity is ActivityType.STATIONARY:
            continue
        counts[activity] = counts.get(activity, 0) + 1

    dominant = ActivityType.WALKING
    best = 0
    for activity, n in counts.items():
        if n > best:
            dominant, best = activity, n
    return dominant
