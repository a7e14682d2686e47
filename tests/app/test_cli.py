from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

from hrsync.app import DailySyncResult, ExtractionResult
from hrsync.config import MissingConfigurationError
from hrsync.domain.errors import TransportError
from hrsync.domain.reconciliation import CreationSummary, ReconciliationSummary
from hrsync.ui import cli

if TYPE_CHECKING:
    from pathlib import Path

    from hrsync.config import StorageConfig


def _reconciliation() -> ReconciliationSummary:
    return ReconciliationSummary(ok=3, updated=1, skipped=0, errors=0, total=4)


def _creation() -> CreationSummary:
    return CreationSummary(created=2, failed=0, total_eligible=2, total_missing=3)


def test_extract_receives_cli_storage_overrides(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    captured: dict[str, StorageConfig] = {}
    snapshot = tmp_path / "cards.json"

    def fake_extract(*, storage: StorageConfig) -> ExtractionResult:
        captured["storage"] = storage
        return ExtractionResult(cards=5, snapshot_path=storage.snapshot_path())

    monkeypatch.setattr(cli, "extract_active_cards", fake_extract)

    cli.main(["--snapshot", str(snapshot), "--debug", "extract"])

    storage = captured["storage"]
    assert storage.snapshot_path() == snapshot.resolve()
    assert storage.debug is True


def test_storage_defaults_come_from_environment(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("HRSYNC_DATA_DIR", str(tmp_path))
    captured: dict[str, StorageConfig] = {}

    def fake_sync(*, storage: StorageConfig) -> ReconciliationSummary:
        captured["storage"] = storage
        return _reconciliation()

    monkeypatch.setattr(cli, "sync_existing_cards", fake_sync)

    cli.main(["sync-existing"])

    assert captured["storage"].resolve_data_dir() == tmp_path.resolve()
    assert captured["storage"].snapshot_override is None
    assert captured["storage"].debug is False


def test_each_command_dispatches_to_its_stage(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    calls: list[str] = []

    def fake_new(*, storage: StorageConfig) -> CreationSummary:  # noqa: ARG001
        calls.append("sync-new")
        return _creation()

    def fake_daily(*, storage: StorageConfig) -> DailySyncResult:  # noqa: ARG001
        calls.append("daily")
        return DailySyncResult(
            extraction=ExtractionResult(cards=4, snapshot_path=tmp_path / "cards.json"),
            reconciliation=_reconciliation(),
            creation=_creation(),
        )

    monkeypatch.setattr(cli, "sync_new_employees", fake_new)
    monkeypatch.setattr(cli, "run_daily_sync", fake_daily)

    with caplog.at_level(logging.INFO, logger="hrsync.ui.cli"):
        cli.main(["sync-new"])
        cli.main(["daily"])

    assert calls == ["sync-new", "daily"]
    assert "'totalMissing': 3" in caplog.text
    assert "Daily sync finished" in caplog.text


def test_configuration_errors_exit_with_code_2(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_sync(**_: object) -> None:
        raise MissingConfigurationError("Missing configuration for: SINERGY_ENDPOINT")

    monkeypatch.setattr(cli, "sync_existing_cards", fake_sync)

    with pytest.raises(SystemExit) as exc:
        cli.main(["sync-existing"])

    assert exc.value.code == 2


def test_fatal_errors_exit_with_code_1(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_extract(**_: object) -> None:
        raise TransportError("Pipefy request failed with HTTP 503", status_code=503)

    monkeypatch.setattr(cli, "extract_active_cards", fake_extract)

    with pytest.raises(SystemExit) as exc:
        cli.main(["extract"])

    assert exc.value.code == 1


def test_a_command_is_required() -> None:
    with pytest.raises(SystemExit) as exc:
        cli.main([])

    assert exc.value.code == 2
