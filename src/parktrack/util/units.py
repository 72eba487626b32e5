# parktrack/util/units.py
"""Unit conversion and rounding helpers shared by the reducers, the detector and the display formatters."""

from __future__ import annotations

import math

METERS_PER_MILE = 1609.344
FEET_PER_METER = 3.28084
MPH_PER_MPS = 2.237
KPH_PER_MPS = 3.6


def round_half_up(x: float, ndigits: int = 0):
    """
    Round to `ndigits` decimals with halves going up (2.5 -> 3, -2.5 -> -2).

    Built-in round() sends halves to the even neighbour, which disagrees
    with the stats stored by the web client. Returns an int when
    `ndigits` is 0.
    """
    if ndigits == 0:
        return math.floor(x + 0.5)
    scale = 10 ** ndigits
    return math.floor(x * scale + 0.5) / scale


def mps_to_mph(mps: float) -> float:
    return mps * MPH_PER_MPS


def mps_to_kph(mps: float) -> float:
    return mps * KPH_PER_MPS


def meters_to_feet(meters: float) -> float:
    return meters * FEET_PER_METER
