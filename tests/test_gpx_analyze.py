import datetime as dt
import json

import pytest

from parktrack.analyze.activity import ActivityType
from parktrack.analyze.gpx_analyze import TSV_HEADER, main, summarize_track
from parktrack.analyze.track import analyze_track, read_track
from parktrack.config import TrackingConfig
from parktrack.errors import TrackReadError
from parktrack.formats.gpx import extract_points, read_gpx


def test_extract_points_from_sample(sample_gpx_path):
    pts = extract_points(read_gpx(sample_gpx_path))

    # the trkpt with lat="bad" is dropped
    assert len(pts) == 5
    assert pts[0].latitude == 37.0
    assert pts[0].longitude == -122.0
    assert pts[0].altitude_m == 100.0
    assert pts[0].speed_mps == 1.2
    assert pts[0].recorded_at == dt.datetime(2026, 1, 2, 10, tzinfo=dt.timezone.utc)
    assert pts[3].altitude_m is None
    assert pts[2].speed_mps == 0.0


def test_read_gpx_errors(tmp_path):
    broken = tmp_path / "broken.gpx"
    broken.write_text("<gpx><trk>", encoding="utf-8")

    with pytest.raises(TrackReadError):
        read_gpx(broken)
    with pytest.raises(TrackReadError):
        read_gpx(tmp_path / "missing.gpx")


def test_gpx_without_namespace(tmp_path):
    path = tmp_path / "plain.gpx"
    path.write_text(
        "<gpx><trk><trkseg>"
        '<trkpt lat="1.0" lon="2.0"><speed>3.5</speed></trkpt>'
        '<trkpt lat="1.1" lon="2.1"/>'
        "</trkseg></trk></gpx>",
        encoding="utf-8",
    )
    pts = read_track(path)
    assert [(p.latitude, p.longitude) for p in pts] == [(1.0, 2.0), (1.1, 2.1)]
    assert pts[0].speed_mps == 3.5
    assert pts[1].speed_mps is None
    assert pts[1].recorded_at is None


def test_analyze_sample_gpx(sample_gpx_path):
    stats = analyze_track(sample_gpx_path)

    assert stats.point_count == 5
    assert stats.elevation_gain_m == 130
    assert stats.elevation_loss_m == 30
    assert stats.min_elevation_m == 100
    assert stats.max_elevation_m == 200
    assert stats.duration_s == 1200
    assert stats.avg_speed_mps == pytest.approx(1.425)
    assert stats.max_speed_mps == pytest.approx(1.6)
    assert stats.distance_m == pytest.approx(500, abs=50)
    assert (stats.min_lat, stats.max_lat) == (37.0, 37.004)
    assert (stats.min_lng, stats.max_lng) == (-122.002, -122.0)


def test_json_track_matches_gpx(tmp_path, sample_gpx_path):
    pts = read_track(sample_gpx_path)
    doc = {"points": [
        {"lat": p.latitude, "lng": p.longitude, "altitudeM": p.altitude_m,
         "speedMps": p.speed_mps, "recordedAt": p.recorded_at.isoformat()}
        for p in pts
    ]}
    path = tmp_path / "track.json"
    path.write_text(json.dumps(doc), encoding="utf-8")

    assert analyze_track(path) == analyze_track(sample_gpx_path)


def test_summarize_track(sample_gpx_path):
    summary = summarize_track(read_track(sample_gpx_path), TrackingConfig())

    assert summary["dominant"] is ActivityType.WALKING
    assert summary["live"] is ActivityType.WALKING
    assert 2 <= len(summary["simplified"]) <= 5
    assert summary["stats"].point_count == 5


def test_main_tsv(sample_gpx_path, capsys):
    assert main([str(sample_gpx_path), "--tsv"]) == 0

    out = capsys.readouterr().out.splitlines()
    assert out[0] == TSV_HEADER
    row = out[1].split("\t")
    assert len(row) == len(TSV_HEADER.split("\t"))
    assert row[1] == "5"
    assert row[3] == "1200"
    assert row[4] == "130.00"
    assert row[8] == "walking"


def test_main_human_report_imperial(sample_gpx_path, capsys):
    assert main([str(sample_gpx_path), "--units", "imperial"]) == 0

    out = capsys.readouterr().out
    assert "duration        : 20:00" in out
    assert "elevation gain  : 427 ft" in out
    assert "dominant        : Walking" in out


def test_main_writes_geojson(sample_gpx_path, tmp_path):
    out_dir = tmp_path / "out"
    assert main([str(sample_gpx_path), "--geojson", str(out_dir), "--tolerance", "1"]) == 0

    feature = json.loads((out_dir / "sample.geojson").read_text(encoding="utf-8"))
    assert feature["type"] == "Feature"
    # a huge tolerance leaves only the endpoints
    assert feature["geometry"]["coordinates"] == [[-122.0, 37.0, 100.0], [-122.002, 37.004, 200.0]]
    assert feature["properties"]["pointCount"] == 5
    assert feature["properties"]["dominantActivity"] == "walking"


def test_main_searches_work_root(tmp_path, sample_gpx_path, capsys):
    (tmp_path / "rides").mkdir()
    (tmp_path / "rides" / "a.gpx").write_bytes(sample_gpx_path.read_bytes())

    assert main(["--work-root", str(tmp_path), "--tsv"]) == 0
    assert len(capsys.readouterr().out.splitlines()) == 2


def test_main_nothing_to_analyze(tmp_path, capsys):
    assert main(["--work-root", str(tmp_path)]) == 2
    assert main([str(tmp_path / "missing.gpx")]) == 2

    bad = tmp_path / "bad.json"
    bad.write_text("[", encoding="utf-8")
    assert main([str(bad)]) == 2
    assert "Could not read JSON track" in capsys.readouterr().err
