"""Raw payload dumps for operator inspection."""

from __future__ import annotations

import re
from datetime import datetime
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

log = getLogger(__name__)

_UNSAFE_NAME = re.compile(r"[^A-Za-z0-9_.-]+")


class PayloadDumper:
    """Write offending payloads to ``directory`` when enabled; a no-op otherwise."""

    def __init__(self, directory: Path | None, *, enabled: bool = True) -> None:
        self._directory = directory
        self._enabled = enabled and directory is not None

    @property
    def enabled(self) -> bool:
        return self._enabled

    def dump(self, name: str, content: str, *, suffix: str = ".xml") -> Path | None:
        if not self._enabled or self._directory is None:
            return None

        stamp = datetime.now().strftime("%Y%m%d-%H%M%S-%f")  # noqa: DTZ005
        filename = f"{_UNSAFE_NAME.sub('_', name)}_{stamp}{suffix}"
        target = self._directory / filename
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        except OSError as exc:
            log.warning("Could not save debug payload %s: %s", target, exc)
            return None
        log.debug("Saved debug payload to %s", target)
        return target


DISABLED_DUMPER = PayloadDumper(None, enabled=False)
