from pathlib import Path
import pytest

from parktrack.formats.points import GpsPoint


@pytest.fixture
def sample_gpx_path() -> Path:
    return Path(__file__).parent / "data" / "sample.gpx"


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep the developer's ~/.config and PARKTRACK_* env out of the tests."""
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    for var in ("PARKTRACK_WINDOW_SIZE", "PARKTRACK_STABILITY_THRESHOLD",
                "PARKTRACK_SIMPLIFY_TOLERANCE", "PARKTRACK_UNITS", "PARKTRACK_QUIET"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def walk() -> list[GpsPoint]:
    """A short walk heading north, one fix a minute."""
    return [
        GpsPoint(37.0000, -122.0000, "2026-01-02T10:00:00Z", altitude_m=100, speed_mps=1.2),
        GpsPoint(37.0010, -122.0000, "2026-01-02T10:01:00Z", altitude_m=150, speed_mps=1.5),
        GpsPoint(37.0020, -122.0010, "2026-01-02T10:02:00Z", altitude_m=120, speed_mps=0.0),
        GpsPoint(37.0030, -122.0010, "2026-01-02T10:03:00Z", altitude_m=200, speed_mps=1.4),
    ]
