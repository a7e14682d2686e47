from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from tests.helpers.pipefy import make_pipefy_config

if TYPE_CHECKING:
    from hrsync.config import PipefyConfig


@pytest.fixture
def pipefy_config() -> PipefyConfig:
    return make_pipefy_config()
