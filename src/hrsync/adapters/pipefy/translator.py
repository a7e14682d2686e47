"""Translate Pipefy card payloads into domain cards."""

from __future__ import annotations

from typing import TYPE_CHECKING

from hrsync.domain.types import CreatedCard, WorkflowCard, WorkflowField

from .schema import CardPayload

if TYPE_CHECKING:
    from collections.abc import Mapping


def parse_card(payload: CardPayload | Mapping[str, object]) -> WorkflowCard:
    card = payload if isinstance(payload, CardPayload) else CardPayload.model_validate(payload)
    return WorkflowCard(
        id=card.id,
        title=card.title or "",
        fields=tuple(WorkflowField(name=item.name, value=item.value) for item in card.fields),
    )


def parse_created_card(payload: CardPayload) -> CreatedCard:
    return CreatedCard(id=payload.id, title=payload.title or "")

