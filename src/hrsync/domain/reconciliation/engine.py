"""Reconcile existing workflow cards against the HR feed.

Each card walks ``start -> identity extracted -> authoritative fetched ->
canonicalized -> diffed`` and ends as ``ok``, ``updated``, ``skipped`` or
``error``. Cards are processed strictly in input order, one outstanding call at a
time, and a failing card never stops the batch.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from hrsync.domain.canonicalization import normalize
from hrsync.domain.errors import SyncError
from hrsync.domain.identity import redact_identity

from .contracts import (
    DecodeEmpty,
    DecodeFailure,
    DecodeSuccess,
    DecodeSuccessList,
    ReconciliationSummary,
    RecordOutcome,
    RecordState,
    ValidationSkip,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from hrsync.domain.canonicalization import Canonicalizer
    from hrsync.domain.diff import Differ
    from hrsync.domain.ports import AuthoritativeSource, WorkflowStore
    from hrsync.domain.types import WorkflowCard

log = getLogger(__name__)


@dataclass(slots=True)
class Reconciler:
    canonicalizer: Canonicalizer
    differ: Differ
    source: AuthoritativeSource
    store: WorkflowStore

    def reconcile(self, cards: Iterable[WorkflowCard]) -> ReconciliationSummary:
        """Reconcile every card and return per-state counts."""

        batch = tuple(cards)
        total = len(batch)
        log.info("Starting validation of %s cards", total)

        outcomes: list[RecordOutcome] = []
        for index, card in enumerate(batch, start=1):
            log.info("[%s/%s] Card %s - %s", index, total, card.id, card.title)
            outcomes.append(self.reconcile_card(card))

        summary = ReconciliationSummary.from_outcomes(tuple(outcomes))
        log.info("Validation finished: %s", summary.as_dict())
        return summary

    def reconcile_card(self, card: WorkflowCard) -> RecordOutcome:
        try:
            return self._reconcile_card(card)
        except Exception as exc:  # noqa: BLE001
            log.exception("Unexpected error when processing card %s", card.id)
            return RecordOutcome(
                card_id=card.id,
                state=RecordState.ERROR,
                reason=f"unexpected: {type(exc).__name__}",
            )

    def _reconcile_card(self, card: WorkflowCard) -> RecordOutcome:
        identity = self.canonicalizer.extract_identity_key(card)
        if not identity:
            log.warning("Card %s: identity key not found, skipping", card.id)
            return _skipped(card, ValidationSkip.NO_IDENTITY_KEY)

        masked = redact_identity(identity)
        try:
            outcome = self.source.lookup(identity)
        except SyncError as exc:
            log.error(  # noqa: TRY400
                "Card %s: authoritative lookup for %s failed: %s", card.id, masked, exc
            )
            return _error(card, getattr(exc, "reason", type(exc).__name__))

        if isinstance(outcome, DecodeFailure):
            log.error(
                "Card %s: authoritative lookup for %s failed (%s): %s",
                card.id,
                masked,
                outcome.reason,
                outcome.message,
            )
            return _error(card, outcome.reason)
        if isinstance(outcome, DecodeEmpty):
            log.warning(
                "Card %s: no authoritative record for %s (%s), skipping",
                card.id,
                masked,
                outcome.reason,
            )
            return _skipped(card, ValidationSkip.NO_AUTHORITATIVE_RECORD)
        if isinstance(outcome, DecodeSuccessList):
            log.error("Card %s: lookup for %s returned a record list", card.id, masked)
            return _error(card, "unexpected-list-result")

        if not isinstance(outcome, DecodeSuccess):
            raise TypeError(f"Unexpected decode outcome: {outcome!r}")
        if not outcome.matched_requested_key:
            log.warning(
                "Card %s: no returned record matched %s, using the first one",
                card.id,
                masked,
            )

        authoritative = self.canonicalizer.from_authoritative_record(outcome.record, identity)
        status_field = self.canonicalizer.table.status_field
        if not normalize(authoritative.get(status_field)):
            log.info("Card %s: authoritative record has no status, skipping", card.id)
            return _skipped(card, ValidationSkip.NO_STATUS)

        workflow = self.canonicalizer.from_workflow_record(card)
        diff = self.differ.diff(workflow, authoritative)
        if not diff:
            log.info("Card %s: all relevant fields are equal", card.id)
            return RecordOutcome(card_id=card.id, state=RecordState.OK)

        log.info("Card %s: different fields: %s", card.id, ", ".join(diff))
        values = self.canonicalizer.to_workflow_values(authoritative, diff)
        try:
            self.store.update_fields(card.id, values)
        except SyncError as exc:
            log.error("Card %s: updating fields failed: %s", card.id, exc)  # noqa: TRY400
            return RecordOutcome(
                card_id=card.id,
                state=RecordState.ERROR,
                reason="update-failed",
                diff=diff,
            )

        log.info("Card %s: updated with authoritative data", card.id)
        return RecordOutcome(card_id=card.id, state=RecordState.UPDATED, diff=diff)


def _skipped(card: WorkflowCard, reason: ValidationSkip) -> RecordOutcome:
    return RecordOutcome(card_id=card.id, state=RecordState.SKIPPED, reason=reason)


def _error(card: WorkflowCard, reason: str) -> RecordOutcome:
    return RecordOutcome(card_id=card.id, state=RecordState.ERROR, reason=reason)
