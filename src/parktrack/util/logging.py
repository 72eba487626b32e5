# parktrack/util/logging.py
"""
Diagnostics for parktrack.

Reports go to stdout so they can be piped; everything said *about* the run
(skipped trackpoints, ignored config values, files written) goes to stderr
as a timestamped line. Set PARKTRACK_QUIET=1 to silence it.
"""

from __future__ import annotations

import datetime
import os
import sys

QUIET_ENV = "PARKTRACK_QUIET"


def _quiet() -> bool:
    return os.environ.get(QUIET_ENV, "").strip().lower() in ("1", "true", "yes")


def log(msg: str) -> None:
    """Print a timestamped diagnostic line (local time with timezone) to stderr."""
    if _quiet():
        return
    ts = datetime.datetime.now().astimezone().isoformat(timespec="seconds")
    print(f"{ts}  parktrack: {msg}", file=sys.stderr)
