# parktrack/formats/gpx.py
"""
GPX helpers for parktrack

This module is intentionally format-focused:
- namespace-agnostic tag matching (GPX 1.0, 1.1, vendor extensions)
- safely reading an ElementTree
- turning <trkpt> nodes into GpsPoint records

Key design principle:
  Keep analysis (distance, elevation, activity, simplification) in
  parktrack.analyze, separate from GPX parsing (here).
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional
from xml.etree import ElementTree as ET

from parktrack.errors import TrackReadError
from parktrack.formats.points import GpsPoint, as_number, parse_time_utc
from parktrack.util.logging import log


def _local_name(tag: str) -> str:
    """
    Strip the namespace from an ElementTree tag.

    ElementTree represents namespaced tags internally as
      "{namespace-uri}tag"
    """
    return tag.rsplit("}", 1)[-1]


def _find_speed(trkpt: ET.Element) -> Optional[float]:
    """
    Find a speed value anywhere below a trackpoint.

    GPX 1.0 puts <speed> directly on the point; Garmin and most phone apps
    put it inside <extensions> under their own namespace.
    """
    for el in trkpt.iter():
        if el is trkpt:
            continue
        if _local_name(el.tag) == "speed":
            return as_number((el.text or "").strip())
    return None


def read_gpx(path: Path) -> ET.ElementTree:
    """
    Read a GPX file into an ElementTree.

    Raises:
      TrackReadError if the file is missing or not well-formed XML.
    """
    try:
        return ET.parse(path)
    except (ET.ParseError, OSError) as e:
        raise TrackReadError(f"Could not read GPX file {path}: {e}") from e


def extract_points(tree: ET.ElementTree) -> list[GpsPoint]:
    """
    Extract ordered trackpoints from a GPX tree.

    Points whose lat/lon attributes are missing or not numbers are skipped.
    Missing <time>/<ele> are kept as None; the reducers decide what to do.
    """
    root = tree.getroot()
    pts: list[GpsPoint] = []
    skipped = 0

    for trkpt in root.iter():
        if _local_name(trkpt.tag) != "trkpt":
            continue

        lat = as_number(trkpt.get("lat"))
        lon = as_number(trkpt.get("lon"))
        if lat is None or lon is None:
            skipped += 1
            continue

        ele: Optional[float] = None
        time_text: Optional[str] = None
        for child in trkpt:
            name = _local_name(child.tag)
            if name == "ele":
                ele = as_number((child.text or "").strip())
            elif name == "time":
                time_text = child.text

        pts.append(
            GpsPoint(
                latitude=lat,
                longitude=lon,
                recorded_at=parse_time_utc(time_text),
                altitude_m=ele,
                speed_mps=_find_speed(trkpt),
            )
        )

    if skipped:
        log(f"Skipped {skipped} trackpoint(s) without usable lat/lon")
    return pts
