"""Data storage configuration helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import env_flag

APP_DIR_NAME: Final[str] = "hrsync"
DEFAULT_SNAPSHOT_FILENAME: Final[str] = "cards_ativos_raw.json"
DEBUG_DIR_NAME: Final[str] = "debug"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    snapshot_filename: str = DEFAULT_SNAPSHOT_FILENAME
    snapshot_override: Path | None = None
    debug: bool = False

    def resolve_data_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def ensure_data_dir(self) -> Path:
        data_dir = self.resolve_data_dir()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def snapshot_path(self, *, ensure: bool = True) -> Path:
        if self.snapshot_override is not None:
            return self.snapshot_override.expanduser().resolve()
        base = self.ensure_data_dir() if ensure else self.resolve_data_dir()
        return base / self.snapshot_filename

    def debug_dir(self, *, ensure: bool = True) -> Path:
        path = self.resolve_data_dir() / DEBUG_DIR_NAME
        if ensure:
            path.mkdir(parents=True, exist_ok=True)
        return path


def _default_data_dir() -> Path:
    if os.name == "nt":
        base = os.getenv("LOCALAPPDATA")
        base_path = Path(base) if base else (Path.home() / "AppData" / "Local")
    else:
        base = os.getenv("XDG_DATA_HOME")
        base_path = Path(base) if base else (Path.home() / ".local" / "share")
    return (base_path / APP_DIR_NAME).expanduser().resolve()


def get_storage_config() -> StorageConfig:
    env_dir = os.getenv("HRSYNC_DATA_DIR")
    snapshot = os.getenv("HRSYNC_SNAPSHOT_FILE")
    return StorageConfig(
        data_dir=Path(env_dir) if env_dir else _default_data_dir(),
        snapshot_override=Path(snapshot) if snapshot and snapshot.strip() else None,
        debug=env_flag("HRSYNC_DEBUG"),
    )
