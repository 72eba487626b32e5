#!/usr/bin/env python3
"""
parktrack-analyze: print stats for recorded tracks (GPX or JSON point dumps).

Replays each track through the same pipeline a live session uses
(detector, stats snapshot, simplifier) so stored tracks can be checked
against what the app showed while recording.
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any, Optional

from parktrack.analyze.activity import ActivityDetector, dominant_activity
from parktrack.analyze.simplify import simplify
from parktrack.analyze.track import compute_stats, read_track
from parktrack.config import ParkTrackConfig, TrackingConfig, load_config
from parktrack.errors import ParkTrackError, TrackReadError
from parktrack.formats.geojson import build_feature
from parktrack.formats.points import GpsPoint
from parktrack.report.display import (
    IMPERIAL,
    METRIC,
    activity_display_name,
    format_distance,
    format_duration,
    format_elevation,
    format_speed,
)
from parktrack.util.logging import log

TSV_HEADER = (
    "file\tpoints\tdistance_m\tduration_s\tgain_m\tloss_m\t"
    "avg_speed_mps\tmax_speed_mps\tdominant\tlive\tsimplified"
)


def summarize_track(points: list[GpsPoint], tracking: TrackingConfig) -> dict[str, Any]:
    """Everything the report prints for one track."""
    detector = ActivityDetector.from_config(tracking)
    for p in points:
        detector.add_speed(p.speed_mps)

    simplified = simplify(points, tracking.simplify_tolerance)
    return {
        "stats": compute_stats(points),
        "dominant": dominant_activity(points),
        "live": detector.current_activity,
        "simplified": simplified,
    }


def print_report(path: Path, summary: dict[str, Any], *, tsv: bool, units: str) -> None:
    stats = summary["stats"]
    if tsv:
        print(
            f"{path}\t"
            f"{stats.point_count}\t"
            f"{stats.distance_m:.2f}\t"
            f"{stats.duration_s}\t"
            f"{stats.elevation_gain_m:.2f}\t"
            f"{stats.elevation_loss_m:.2f}\t"
            f"{stats.avg_speed_mps:.3f}\t"
            f"{stats.max_speed_mps:.3f}\t"
            f"{summary['dominant'].value}\t"
            f"{summary['live'].value}\t"
            f"{len(summary['simplified'])}"
        )
    else:
        print(f"\n{path}")
        print(f"  points          : {stats.point_count}")
        print(f"  distance        : {format_distance(stats.distance_m, units)}")
        print(f"  duration        : {format_duration(stats.duration_s)}")
        print(f"  elevation gain  : {format_elevation(stats.elevation_gain_m, units)}")
        print(f"  elevation loss  : {format_elevation(stats.elevation_loss_m, units)}")
        print(f"  avg speed       : {format_speed(stats.avg_speed_mps, units)}")
        print(f"  max speed       : {format_speed(stats.max_speed_mps, units)}")
        print(f"  dominant        : {activity_display_name(summary['dominant'])}")
        print(f"  live (final)    : {activity_display_name(summary['live'])}")
        print(f"  simplified pts  : {len(summary['simplified'])}")


def write_geojson(out_dir: Path, path: Path, summary: dict[str, Any]) -> Optional[Path]:
    """Write the simplified track as a Feature carrying the stats snapshot."""
    props = summary["stats"].as_dict()
    props["dominantActivity"] = summary["dominant"].value
    feature = build_feature(summary["simplified"], props)
    if feature is None:
        log(f"No line to write for {path} (fewer than 2 usable points)")
        return None

    out_dir.mkdir(parents=True, exist_ok=True)
    out_path = out_dir / f"{path.stem}.geojson"
    out_path.write_text(json.dumps(feature, indent=2), encoding="utf-8")
    return out_path


def main(argv: Optional[list[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="parktrack: analyze recorded track file(s).")
    ap.add_argument("tracks", nargs="*",
                    help="GPX or JSON track files. If omitted, every *.gpx under --work-root.")
    ap.add_argument("--work-root", default=None,
                    help="Directory searched for *.gpx when no files are given.")
    ap.add_argument("--tsv", action="store_true",
                    help="Print tab-separated output (good for piping).")
    ap.add_argument("--units", choices=(METRIC, IMPERIAL), default=None,
                    help="Display units (default: from parktrack config, else metric).")
    ap.add_argument("--tolerance", type=float, default=None,
                    help="Simplification tolerance in degrees (default: from config).")
    ap.add_argument("--geojson", default=None, metavar="OUT_DIR",
                    help="Write each simplified track as GeoJSON into OUT_DIR.")
    ap.add_argument("--plot", action="store_true",
                    help="Show each track coloured by speed.")

    args = ap.parse_args(argv)

    try:
        cfg: ParkTrackConfig = load_config()
    except ParkTrackError as e:
        log(str(e))
        return 2

    units = args.units or cfg.display.units
    tracking = cfg.tracking
    if args.tolerance is not None:
        tracking = TrackingConfig(
            window_size=tracking.window_size,
            stability_threshold=tracking.stability_threshold,
            simplify_tolerance=max(args.tolerance, 0.0),
        )

    selected = [Path(t).expanduser() for t in args.tracks]
    if not selected:
        work_root = Path(args.work_root or ".").expanduser()
        selected = sorted(work_root.rglob("*.gpx"))
        if not selected:
            log(f"No GPX files found under {work_root}")
            return 2

    if args.tsv:
        print(TSV_HEADER)

    analyzed = 0
    for path in selected:
        if not path.is_file():
            log(f"Skipping (not a file): {path}")
            continue
        try:
            points = read_track(path)
        except TrackReadError as e:
            log(str(e))
            continue

        summary = summarize_track(points, tracking)
        print_report(path, summary, tsv=args.tsv, units=units)
        analyzed += 1

        if args.geojson:
            out = write_geojson(Path(args.geojson).expanduser(), path, summary)
            if out is not None:
                log(f"Wrote {out}")
        if args.plot:
            from parktrack.visualize.plot import plot_track

            plot_track(points, summary["simplified"])

    return 0 if analyzed else 2


if __name__ == "__main__":
    raise SystemExit(main())
