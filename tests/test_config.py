import pytest

from parktrack.config import load_config
from parktrack.errors import ConfigError


def _write(path, text):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def paths(tmp_path):
    return tmp_path / "repo" / "config" / "config.toml", tmp_path / "user" / "config.toml"


def test_defaults_when_no_files(paths):
    repo, user = paths
    cfg = load_config(repo_root=repo.parent.parent, repo_config_path=repo, user_config_path=user)

    assert cfg.tracking.window_size == 10
    assert cfg.tracking.stability_threshold == 3
    assert cfg.tracking.simplify_tolerance == 0.00001
    assert cfg.display.units == "metric"
    assert set(cfg.source.values()) == {"default"}


def test_user_overrides_repo(paths):
    repo, user = paths
    _write(repo, "[tracking]\nwindow_size = 5\nstability_threshold = 4\n")
    _write(user, '[tracking]\nwindow_size = 7\n[display]\nunits = "Imperial"\n')

    cfg = load_config(repo_config_path=repo, user_config_path=user)

    assert cfg.tracking.window_size == 7
    assert cfg.tracking.stability_threshold == 4
    assert cfg.display.units == "imperial"
    assert cfg.source["tracking.window_size"].startswith("user:")
    assert cfg.source["tracking.stability_threshold"].startswith("repo:")
    assert cfg.source["simplify.tolerance"] == "default"


def test_env_overrides_files(paths, monkeypatch):
    repo, user = paths
    _write(user, "[simplify]\ntolerance = 0.001\n")
    monkeypatch.setenv("PARKTRACK_SIMPLIFY_TOLERANCE", "0.0005")
    monkeypatch.setenv("PARKTRACK_WINDOW_SIZE", " 12 ")

    cfg = load_config(repo_config_path=repo, user_config_path=user)

    assert cfg.tracking.simplify_tolerance == 0.0005
    assert cfg.tracking.window_size == 12
    assert cfg.source["simplify.tolerance"] == "env:PARKTRACK_SIMPLIFY_TOLERANCE"


def test_invalid_values_fall_back(paths, monkeypatch, capsys):
    repo, user = paths
    _write(user, '[tracking]\nwindow_size = 0\nstability_threshold = true\n'
                 '[simplify]\ntolerance = -1\n[display]\nunits = "parsecs"\n')
    monkeypatch.setenv("PARKTRACK_STABILITY_THRESHOLD", "three")

    cfg = load_config(repo_config_path=repo, user_config_path=user)

    assert cfg.tracking.window_size == 10
    assert cfg.tracking.stability_threshold == 3
    assert cfg.tracking.simplify_tolerance == 0.00001
    assert cfg.display.units == "metric"
    assert "Ignoring invalid" in capsys.readouterr().err


def test_bad_toml_raises(paths):
    repo, user = paths
    _write(user, "[tracking\nwindow_size = ")
    with pytest.raises(ConfigError):
        load_config(repo_config_path=repo, user_config_path=user)


def test_repo_config_found_from_root(tmp_path):
    _write(tmp_path / "config" / "config.toml", "[tracking]\nstability_threshold = 6\n")
    cfg = load_config(repo_root=tmp_path, user_config_path=tmp_path / "nope.toml")
    assert cfg.tracking.stability_threshold == 6


def test_quiet_env_silences_diagnostics(paths, monkeypatch, capsys):
    repo, user = paths
    _write(user, '[display]\nunits = "parsecs"\n')
    monkeypatch.setenv("PARKTRACK_QUIET", "1")

    load_config(repo_config_path=repo, user_config_path=user)
    assert capsys.readouterr().err == ""
