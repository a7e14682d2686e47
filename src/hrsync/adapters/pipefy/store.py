"""Workflow store backed by Pipefy card mutations."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from hrsync.domain.errors import DataShapeError

from .mutations import create_card_mutation, update_fields_mutation
from .schema import CreateCardData
from .translator import parse_created_card

if TYPE_CHECKING:
    from collections.abc import Mapping

    from hrsync.domain.types import CreatedCard

    from .client import PipefyClient

log = getLogger(__name__)


class PipefyWorkflowStore:
    def __init__(self, client: PipefyClient, *, pipe_id: int | None = None) -> None:
        self._client = client
        self._pipe_id = pipe_id

    def update_fields(self, card_id: str, values: Mapping[str, str]) -> None:
        if not values:
            return
        log.debug("Updating card %s fields: %s", card_id, ", ".join(values))
        self._client.call(update_fields_mutation(card_id, values))

    def create_card(self, values: Mapping[str, str]) -> CreatedCard:
        if self._pipe_id is None:
            raise ValueError("PipefyWorkflowStore needs a pipe id to create cards")

        # createCard is not idempotent, so it is never retried.
        data = self._client.call(create_card_mutation(self._pipe_id, values), retry=False)
        try:
            parsed = CreateCardData.model_validate(data)
        except ValidationError as exc:
            raise DataShapeError("Unexpected createCard response", payload=str(data)) from exc
        if parsed.create_card is None or parsed.create_card.card is None:
            raise DataShapeError("createCard returned no card", payload=str(data))
        return parse_created_card(parsed.create_card.card)
