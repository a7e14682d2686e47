from __future__ import annotations

from pathlib import Path  # noqa: TC003

import pytest  # noqa: TC002

from hrsync.config import storage


def test_data_dir_prefers_explicit_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    custom = tmp_path / "custom-data"
    monkeypatch.setenv("HRSYNC_DATA_DIR", str(custom))

    config = storage.get_storage_config()

    assert config.resolve_data_dir() == custom.resolve()
    assert config.debug is False


def test_data_dir_defaults_under_xdg_data_home(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))

    config = storage.get_storage_config()

    assert config.resolve_data_dir() == (tmp_path / storage.APP_DIR_NAME).resolve()


def test_snapshot_path_creates_data_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("HRSYNC_DATA_DIR", str(tmp_path / "data-dir"))

    path = storage.get_storage_config().snapshot_path()

    assert path == (tmp_path / "data-dir" / storage.DEFAULT_SNAPSHOT_FILENAME).resolve()
    assert path.parent.exists()


def test_snapshot_path_without_ensure_leaves_disk_alone(tmp_path: Path) -> None:
    config = storage.StorageConfig(data_dir=tmp_path / "absent")

    path = config.snapshot_path(ensure=False)

    assert path.name == storage.DEFAULT_SNAPSHOT_FILENAME
    assert not path.parent.exists()


def test_snapshot_override_wins(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("HRSYNC_DATA_DIR", str(tmp_path / "data-dir"))
    monkeypatch.setenv("HRSYNC_SNAPSHOT_FILE", str(tmp_path / "elsewhere.json"))

    config = storage.get_storage_config()

    assert config.snapshot_path() == (tmp_path / "elsewhere.json").resolve()


def test_debug_flag_and_directory(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("HRSYNC_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("HRSYNC_DEBUG", "true")

    config = storage.get_storage_config()
    debug_dir = config.debug_dir()

    assert config.debug is True
    assert debug_dir == (tmp_path / storage.DEBUG_DIR_NAME).resolve()
    assert debug_dir.is_dir()
