from __future__ import annotations

import os

import pytest

_CONFIG_PREFIXES = ("PIPEFY_", "SINERGY_", "HRSYNC_")


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in list(os.environ):
        if name.startswith(_CONFIG_PREFIXES):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def pipefy_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PIPEFY_CLIENT_ID", "client-id")
    monkeypatch.setenv("PIPEFY_CLIENT_SECRET", "client-secret")
    monkeypatch.setenv("PIPEFY_ACTIVE_PHASE_ID", "338000001")
    monkeypatch.setenv("PIPEFY_PIPE_ID", "306000001")


@pytest.fixture
def sinergy_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SINERGY_ENDPOINT", "https://sinergy.example.com/ws.asmx")
    monkeypatch.setenv("SINERGY_USER", "integration")
    monkeypatch.setenv("SINERGY_PASSWORD", "s3cret")
