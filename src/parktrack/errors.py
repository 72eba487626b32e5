# parktrack/errors

"""
parktrack.errors

Central exception hierarchy for parktrack.

Rationale:
  - A noisy GPS feed is never an error: missing or malformed point fields
    are excluded from the calculation that needs them.
  - What remains are programming errors (wrong argument types), unreadable
    track files, and broken configuration.
  - Callers can catch ParkTrackError (broad) or specific subclasses (narrow).
"""


class ParkTrackError(RuntimeError):
    """Base class for all parktrack runtime errors."""


# ---- Caller / precondition errors ----------------

class InvalidInputError(ParkTrackError, TypeError):
    """A point sequence was required but something else was passed."""


# ---- Input file errors -----------------------------

class TrackReadError(ParkTrackError):
    """A GPX or JSON track file could not be read or parsed."""


# ---- Configuration errors --------------------------

class ConfigError(ParkTrackError):
    """A configuration file exists but could not be parsed."""
