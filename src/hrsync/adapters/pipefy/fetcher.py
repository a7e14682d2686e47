"""Harvest the cards of a Pipefy phase."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from hrsync.domain.errors import DataShapeError

from .mutations import PHASE_CARDS_QUERY
from .schema import PhaseCardsData
from .translator import parse_card

if TYPE_CHECKING:
    from collections.abc import Iterator

    from hrsync.domain.types import WorkflowCard

    from .client import PipefyClient

log = getLogger(__name__)


def iter_phase_cards(
    client: PipefyClient,
    phase_id: str,
    page_size: int,
    after: str | None = None,
) -> Iterator[WorkflowCard]:
    """Yield every card of ``phase_id``, one page request at a time.

    Pages are only requested as the caller consumes cards. Pass a previous
    ``endCursor`` as ``after`` to resume a harvest.
    """

    cursor = after
    page = 0
    while True:
        page += 1
        log.info("Fetching page %s of phase %s (after: %s)", page, phase_id, cursor)
        data = client.call(
            PHASE_CARDS_QUERY,
            {"phaseId": phase_id, "pageSize": page_size, "after": cursor},
        )
        try:
            parsed = PhaseCardsData.model_validate(data)
        except ValidationError as exc:
            raise DataShapeError(
                f"Unexpected card page shape for phase {phase_id}", payload=str(data)[:800]
            ) from exc
        if parsed.phase is None:
            raise DataShapeError(f"Phase {phase_id} not found in Pipefy response")

        connection = parsed.phase.cards
        log.info("Page %s returned %s cards", page, len(connection.edges))
        for edge in connection.edges:
            yield parse_card(edge.node)

        if not connection.page_info.has_next_page or not connection.page_info.end_cursor:
            return
        cursor = connection.page_info.end_cursor
