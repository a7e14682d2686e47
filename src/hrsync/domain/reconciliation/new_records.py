"""Find HR-active employees without a workflow card and create the eligible ones."""

from __future__ import annotations

from collections.abc import Callable
from datetime import date
from logging import getLogger
from typing import TYPE_CHECKING

from hrsync.domain.dates import parse_calendar_day
from hrsync.domain.errors import ProtocolError, SyncError
from hrsync.domain.identity import redact_identity

from .contracts import (
    CreationSummary,
    DecodeEmpty,
    DecodeFailure,
    DecodeSuccess,
    DecodeSuccessList,
    DetectionReport,
    MissingEmployee,
    ValidationSkip,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from hrsync.domain.canonicalization import Canonicalizer
    from hrsync.domain.ports import WorkflowStore
    from hrsync.domain.types import AuthoritativeRecord, WorkflowCard

    from .contracts import DecodeOutcome

log = getLogger(__name__)

type Clock = Callable[[], date]


def require_employee_list(outcome: DecodeOutcome) -> tuple[AuthoritativeRecord, ...]:
    """Unwrap a full-list decode outcome.

    A well-formed empty list gives ``()``. A missing result node or a failure
    raises ``ProtocolError``: an upstream outage must never read as "no active
    employees".
    """

    if isinstance(outcome, DecodeSuccessList):
        return outcome.records
    if isinstance(outcome, DecodeSuccess):
        return (outcome.record,)
    if isinstance(outcome, DecodeFailure):
        raise ProtocolError(outcome.message, reason=outcome.reason, detail=outcome.detail)
    if not isinstance(outcome, DecodeEmpty):
        raise TypeError(f"Unexpected decode outcome: {outcome!r}")
    raise ProtocolError(
        f"Active employee list came back without a result node ({outcome.reason})",
        reason="empty-result",
    )


def _admission_skip(admission: date | None, today: date) -> ValidationSkip | None:
    if admission is None:
        return ValidationSkip.ADMISSION_UNDATED
    if admission > today:
        return ValidationSkip.ADMISSION_IN_FUTURE
    return None


class NewRecordDetector:
    def __init__(self, canonicalizer: Canonicalizer, today: Clock = date.today) -> None:
        self._canonicalizer = canonicalizer
        self._today = today

    def existing_keys(self, cards: Iterable[WorkflowCard]) -> set[str]:
        """Digits-only identity keys present in the snapshot; invalid ones are dropped."""

        keys: set[str] = set()
        for card in cards:
            key = self._canonicalizer.extract_identity_key(card)
            if key:
                keys.add(key)
        return keys

    def detect(
        self,
        employees: Iterable[AuthoritativeRecord],
        cards: Iterable[WorkflowCard],
    ) -> DetectionReport:
        existing = self.existing_keys(cards)
        today = self._today()
        log.info("Workflow snapshot holds %s distinct identities", len(existing))

        eligible: list[MissingEmployee] = []
        future: list[MissingEmployee] = []
        undated: list[MissingEmployee] = []
        seen: set[str] = set()
        invalid_identity = 0
        already_present = 0

        for raw in employees:
            identity = self._canonicalizer.authoritative_identity_key(raw)
            if not identity:
                invalid_identity += 1
                continue
            if identity in existing:
                already_present += 1
                continue
            if identity in seen:
                log.warning("Duplicate HR record for %s ignored", redact_identity(identity))
                continue
            seen.add(identity)

            admission_raw = self._canonicalizer.authoritative_value(
                self._canonicalizer.table.admission_field, raw
            )
            admission = parse_calendar_day(admission_raw)
            skip = _admission_skip(admission, today)
            missing = MissingEmployee(
                identity=identity,
                record=raw,
                canonical=self._canonicalizer.from_authoritative_record(raw, identity),
                admission=admission,
                skip=skip,
            )
            if skip is ValidationSkip.ADMISSION_UNDATED:
                undated.append(missing)
            elif skip is ValidationSkip.ADMISSION_IN_FUTURE:
                future.append(missing)
            else:
                eligible.append(missing)

        report = DetectionReport(
            eligible=tuple(eligible),
            ineligible_future=tuple(future),
            ineligible_undated=tuple(undated),
            invalid_identity=invalid_identity,
            already_present=already_present,
        )
        log.info(
            "Missing: %s (eligible %s, future admission %s, undated %s); invalid identities: %s",
            report.total_missing,
            len(report.eligible),
            len(report.ineligible_future),
            len(report.ineligible_undated),
            invalid_identity,
        )
        for employee in report.ineligible_future:
            log.info(
                "%s admitted on %s, not created yet",
                redact_identity(employee.identity),
                employee.admission,
            )
        for employee in report.ineligible_undated:
            log.warning(
                "%s has no usable admission date, not created",
                redact_identity(employee.identity),
            )
        return report

    def create_missing(self, report: DetectionReport, store: WorkflowStore) -> CreationSummary:
        """Create one card per eligible employee; a failed creation does not stop the rest."""

        created_ids: list[str] = []
        failed = 0
        total = len(report.eligible)

        for index, employee in enumerate(report.eligible, start=1):
            masked = redact_identity(employee.identity)
            values = self._canonicalizer.to_workflow_values(employee.canonical, skip_blank=True)
            log.info("[%s/%s] Creating card for %s", index, total, masked)
            try:
                card = store.create_card(values)
            except SyncError as exc:
                failed += 1
                log.error("Creating card for %s failed: %s", masked, exc)  # noqa: TRY400
                continue
            except Exception:  # noqa: BLE001
                failed += 1
                log.exception("Unexpected error when creating card for %s", masked)
                continue
            created_ids.append(card.id)
            log.info("Card %s created for %s", card.id, masked)

        summary = CreationSummary(
            created=len(created_ids),
            failed=failed,
            total_eligible=total,
            total_missing=report.total_missing,
            created_card_ids=tuple(created_ids),
        )
        log.info("Creation finished: %s", summary.as_dict())
        return summary
