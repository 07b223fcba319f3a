# tests/unit/test_paths.py
import sys
from pathlib import Path

import pytest

import config.paths as paths_mod
from config.paths import STATE_FILE_NAME, Paths, get_paths
from config.settings import AppConfig


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """
    Keep environment predictable across tests; we set the PEPERONE_* vars inside tests.
    """
    for var in ("PEPERONE_DATA_ROOT", "PEPERONE_STATE_FILE", "PEPERONE_LOG_LEVEL", "PEPERONE_SETTLE_MS"):
        monkeypatch.delenv(var, raising=False)
    # Reset singleton to ensure fresh calculation
    monkeypatch.setattr(paths_mod, "_paths_singleton", None)
    yield


def test_data_root_env_override(monkeypatch, tmp_path):
    data = tmp_path / "data_root"
    monkeypatch.setenv("PEPERONE_DATA_ROOT", str(data))

    p = Paths.from_env()

    assert p.data_root == data
    assert p.state_file == data / STATE_FILE_NAME
    # nothing is created until the first save
    assert not data.exists()


def test_state_file_env_beats_data_root(monkeypatch, tmp_path):
    monkeypatch.setenv("PEPERONE_DATA_ROOT", str(tmp_path / "data"))
    monkeypatch.setenv("PEPERONE_STATE_FILE", str(tmp_path / "elsewhere.json"))

    assert Paths.from_env().state_file == tmp_path / "elsewhere.json"
    # an explicit argument wins over both
    assert Paths.from_env(tmp_path / "arg.json").state_file == tmp_path / "arg.json"


@pytest.mark.skipif(sys.platform.startswith("win") or sys.platform == "darwin", reason="XDG layout")
def test_xdg_default(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg"))

    p = Paths.from_env()

    assert p.data_root == tmp_path / "xdg" / "peperone"
    assert p.state_file == tmp_path / "xdg" / "peperone" / "timers.json"


def test_app_config_defaults(monkeypatch, tmp_path):
    monkeypatch.setenv("PEPERONE_DATA_ROOT", str(tmp_path))

    cfg = AppConfig.load()

    assert cfg.state_file == tmp_path / STATE_FILE_NAME
    assert cfg.log_level == "WARNING"
    assert cfg.settle_ms == 50
    assert cfg.settle_seconds == pytest.approx(0.05)


def test_app_config_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("PEPERONE_LOG_LEVEL", "info")
    monkeypatch.setenv("PEPERONE_SETTLE_MS", "0")

    cfg = AppConfig.load()
    assert cfg.log_level == "INFO"
    assert cfg.settle_seconds == 0.0

    cfg = AppConfig.load(state_file=Path(tmp_path / "t.json"), verbose=True)
    assert cfg.state_file == tmp_path / "t.json"
    assert cfg.log_level == "DEBUG"


def test_app_config_rejects_unknown_level(monkeypatch):
    monkeypatch.setenv("PEPERONE_LOG_LEVEL", "chatty")

    with pytest.raises(ValueError):
        AppConfig.load()


def test_get_paths_is_cached_until_refresh(monkeypatch, tmp_path):
    monkeypatch.setenv("PEPERONE_DATA_ROOT", str(tmp_path / "first"))
    first = get_paths()

    monkeypatch.setenv("PEPERONE_DATA_ROOT", str(tmp_path / "second"))
    assert get_paths() is first

    refreshed = get_paths(force_refresh=True)
    assert refreshed.data_root == tmp_path / "second"
    assert get_paths() is refreshed


@pytest.mark.parametrize("value", ["-5", "soon"])
def test_app_config_rejects_bad_settle_window(monkeypatch, value):
    monkeypatch.setenv("PEPERONE_SETTLE_MS", value)

    with pytest.raises(ValueError):
        AppConfig.load()
