"""
parktrack configuration loader

This module centralizes *all* configuration handling for parktrack.

Where settings come from:
- command-line flags always win (parktrack-analyze applies them itself)
- a per-machine file keeps personal preferences out of the repo:
    ~/.config/parktrack/config.toml
- a checked-in file sets the defaults for a deployment:
    <repo_root>/config/config.toml
- PARKTRACK_* variables tune a run without touching either file

Each setting is resolved on its own, first match wins:
1) CLI argument (handled by the CLI)
2) Environment variables (PARKTRACK_*)
3) User config: ~/.config/parktrack/config.toml
4) Repo file: <repo_root>/config/config.toml
5) Hard defaults (detector window 10, stability 3, tolerance 1e-5 deg, metric)

TOML is read with tomllib (3.11+) or the tomli backport on older interpreters.

Bad *values* never stop a tracking session: an unusable window size or an
unknown unit falls back to its default. A config *file* that is not valid
TOML does raise, since it shows clear intent that we cannot honor.
"""

from __future__ import annotations

import math
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from parktrack.analyze.activity import DEFAULT_STABILITY_THRESHOLD, DEFAULT_WINDOW_SIZE
from parktrack.analyze.simplify import DEFAULT_TOLERANCE_DEG
from parktrack.errors import ConfigError
from parktrack.report.display import IMPERIAL, METRIC
from parktrack.util.logging import log

UNITS = (METRIC, IMPERIAL)


# ---------------------------------------------------------------------------
# TOML loading helpers
# ---------------------------------------------------------------------------
def _load_toml(path: Path) -> dict[str, Any]:
    """
    Read one config file; a file that is not there is simply empty.

    Raises ConfigError when the file exists but cannot be read or parsed.
    """
    if not path.is_file():
        return {}

    if sys.version_info >= (3, 11):
        import tomllib
    else:
        import tomli as tomllib

    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Failed to parse TOML config: {path} ({e})") from e


# ---------------------------------------------------------------------------
# Generic coercion helpers
# ---------------------------------------------------------------------------
def _lookup(table: dict[str, Any], dotted_key: str) -> Any:
    """Value at "section.name" in a parsed TOML table, or None."""
    section, _, name = dotted_key.partition(".")
    sub = table.get(section)
    if not isinstance(sub, dict):
        return None
    return sub.get(name)


def _as_positive_int(v: Any) -> Optional[int]:
    """Accept ints (or integer-looking strings from the environment) > 0."""
    if v is None or isinstance(v, bool):
        return None
    try:
        n = int(str(v).strip())
    except ValueError:
        return None
    return n if n > 0 else None


def _as_tolerance(v: Any) -> Optional[float]:
    """Accept finite numbers >= 0."""
    if v is None or isinstance(v, bool):
        return None
    try:
        x = float(str(v).strip())
    except ValueError:
        return None
    if not math.isfinite(x) or x < 0:
        return None
    return x


def _as_units(v: Any) -> Optional[str]:
    if not isinstance(v, str):
        return None
    s = v.strip().lower()
    return s if s in UNITS else None


# dotted key -> (environment variable, coercion)
_SETTINGS = {
    "tracking.window_size": ("PARKTRACK_WINDOW_SIZE", _as_positive_int),
    "tracking.stability_threshold": ("PARKTRACK_STABILITY_THRESHOLD", _as_positive_int),
    "simplify.tolerance": ("PARKTRACK_SIMPLIFY_TOLERANCE", _as_tolerance),
    "display.units": ("PARKTRACK_UNITS", _as_units),
}


# ---------------------------------------------------------------------------
# Repo discovery
# ---------------------------------------------------------------------------
def find_repo_root(start: Path) -> Optional[Path]:
    """First directory at or above `start` that holds config/config.toml."""
    start = start.resolve()
    for p in (start, *start.parents):
        if (p / "config" / "config.toml").is_file():
            return p
    return None


# ---------------------------------------------------------------------------
# Typed config dataclasses
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class TrackingConfig:
    """
    Settings a tracking session is created with.

    These seed ActivityDetector and the simplifier.
    """

    window_size: int = DEFAULT_WINDOW_SIZE
    stability_threshold: int = DEFAULT_STABILITY_THRESHOLD
    simplify_tolerance: float = DEFAULT_TOLERANCE_DEG


@dataclass(frozen=True)
class DisplayConfig:
    units: str = METRIC


@dataclass(frozen=True)
class ParkTrackConfig:
    """
    Fully merged parktrack configuration.

    Attributes:
    - tracking: detector + simplifier settings
    - display: report formatting
    - source: where each dotted key's value came from ("default",
      "repo:<path>", "user:<path>" or "env:<VAR>")
    """

    tracking: TrackingConfig
    display: DisplayConfig
    source: dict[str, str]


# ---------------------------------------------------------------------------
# Main config loader
# ---------------------------------------------------------------------------
def _apply(values: dict[str, Any], src: dict[str, str], layer: dict[str, Any], origin: str) -> None:
    """Overlay one layer's raw values onto `values`, skipping unusable ones."""
    for key, raw in layer.items():
        coerce = _SETTINGS[key][1]
        v = coerce(raw)
        if v is None:
            log(f"Ignoring invalid {key}={raw!r} ({origin})")
            continue
        values[key] = v
        src[key] = origin


def load_config(
    repo_root: Optional[Path] = None,
    repo_config_path: Optional[Path] = None,
    user_config_path: Optional[Path] = None,
) -> ParkTrackConfig:
    """
    Resolve every setting from defaults, the repo file, the user file and
    the environment, in that order.

    `repo_root` is searched for upward from this module when not given;
    explicit paths are mostly for tests.
    """
    if repo_config_path is None:
        root = repo_root or find_repo_root(Path(__file__))
        if root is not None:
            repo_config_path = root / "config" / "config.toml"
    if user_config_path is None:
        user_config_path = Path.home() / ".config" / "parktrack" / "config.toml"

    defaults = TrackingConfig()
    values: dict[str, Any] = {
        "tracking.window_size": defaults.window_size,
        "tracking.stability_threshold": defaults.stability_threshold,
        "simplify.tolerance": defaults.simplify_tolerance,
        "display.units": DisplayConfig().units,
    }
    src = {k: "default" for k in values}

    for label, path in (("repo", repo_config_path), ("user", user_config_path)):
        if path is None:
            continue
        table = _load_toml(path)
        layer = {k: _lookup(table, k) for k in _SETTINGS}
        _apply(values, src, {k: v for k, v in layer.items() if v is not None}, f"{label}:{path}")

    for key, (env, _coerce) in _SETTINGS.items():
        raw = os.environ.get(env)
        if raw:
            _apply(values, src, {key: raw}, f"env:{env}")

    tracking = TrackingConfig(
        window_size=values["tracking.window_size"],
        stability_threshold=values["tracking.stability_threshold"],
        simplify_tolerance=values["simplify.tolerance"],
    )
    display = DisplayConfig(units=values["display.units"])

    return ParkTrackConfig(tracking=tracking, display=display, source=src)
