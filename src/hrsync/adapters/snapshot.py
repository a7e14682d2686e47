"""JSON snapshot of the workflow cards harvested from the active phase."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from hrsync.adapters.pipefy.schema import CardFieldPayload
from hrsync.domain.errors import SnapshotError
from hrsync.domain.types import WorkflowCard, WorkflowField

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

log = getLogger(__name__)


class SnapshotCard(BaseModel):
    """``{id, title, fields: [{name, value}]}``; anything else in the file is ignored."""

    model_config = ConfigDict(extra="ignore")

    id: str
    title: str | None = ""
    fields: list[CardFieldPayload] = Field(default_factory=list)

    @classmethod
    def from_card(cls, card: WorkflowCard) -> SnapshotCard:
        return cls(
            id=card.id,
            title=card.title,
            fields=[CardFieldPayload(name=item.name, value=item.value) for item in card.fields],
        )

    def to_card(self) -> WorkflowCard:
        return WorkflowCard(
            id=self.id,
            title=self.title or "",
            fields=tuple(WorkflowField(name=item.name, value=item.value) for item in self.fields),
        )


_SNAPSHOT_ADAPTER = TypeAdapter(list[SnapshotCard])


def write_snapshot(path: Path, cards: Iterable[WorkflowCard]) -> int:
    """Write ``cards`` as a JSON array; returns the number written."""

    payloads = [SnapshotCard.from_card(card) for card in cards]
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(_SNAPSHOT_ADAPTER.dump_json(payloads, indent=2))
    log.info("Saved %s cards to %s", len(payloads), path)
    return len(payloads)


def load_snapshot(path: Path) -> list[WorkflowCard]:
    if not path.exists():
        raise SnapshotError(f"Snapshot file {path} not found; run the extract step first")
    try:
        payloads = _SNAPSHOT_ADAPTER.validate_json(path.read_bytes())
    except ValidationError as exc:
        raise SnapshotError(f"Snapshot file {path} is malformed: {exc}") from exc
    cards = [payload.to_card() for payload in payloads]
    log.info("Loaded %s cards from %s", len(cards), path)
    return cards
