"""Result types exchanged between the HR feed decoder and the reconciliation services.

Per-record failures travel as values; the batch services aggregate them into
summaries instead of unwinding through exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import date

    from hrsync.domain.diff import DiffResult
    from hrsync.domain.types import AuthoritativeRecord, CanonicalRecord


class DecodeFailureReason(StrEnum):
    HTML_RESPONSE = "html-response"
    MALFORMED_XML = "malformed-xml"
    MISSING_BODY = "missing-body"
    SOAP_FAULT = "soap-fault"
    AUTH_REJECTED = "auth-rejected"
    SUSPECTED_ENCODED_PAYLOAD = "suspected-encoded-payload"
    NOT_XML_AFTER_DECODE = "not-xml-after-decode"
    UNEXPECTED_SHAPE = "unexpected-shape"


@dataclass(frozen=True, slots=True)
class DecodeSuccess:
    """Exactly one record for a by-identity lookup.

    ``matched_requested_key`` is ``False`` when several records came back, none
    carried the requested identity, and the first one was used instead.
    """

    record: AuthoritativeRecord
    matched_requested_key: bool = True


@dataclass(frozen=True, slots=True)
class DecodeSuccessList:
    records: tuple[AuthoritativeRecord, ...]


@dataclass(frozen=True, slots=True)
class DecodeEmpty:
    """No result node or no record. Never a success: callers decide how to treat it."""

    reason: str


@dataclass(frozen=True, slots=True)
class DecodeFailure:
    reason: DecodeFailureReason
    message: str
    detail: str = ""


type DecodeOutcome = DecodeSuccess | DecodeSuccessList | DecodeEmpty | DecodeFailure


class RecordState(StrEnum):
    OK = "ok"
    UPDATED = "updated"
    SKIPPED = "skipped"
    ERROR = "error"


class ValidationSkip(StrEnum):
    """Reasons a record is left alone without counting as an error."""

    NO_IDENTITY_KEY = "no-identity-key"
    NO_AUTHORITATIVE_RECORD = "no-authoritative-record"
    NO_STATUS = "no-status"
    ADMISSION_IN_FUTURE = "admission-in-future"
    ADMISSION_UNDATED = "admission-undated"


@dataclass(frozen=True, slots=True, kw_only=True)
class RecordOutcome:
    card_id: str
    state: RecordState
    reason: str | None = None
    diff: DiffResult = field(default_factory=dict)


@dataclass(frozen=True, slots=True, kw_only=True)
class ReconciliationSummary:
    ok: int
    updated: int
    skipped: int
    errors: int
    total: int
    outcomes: tuple[RecordOutcome, ...] = ()

    @classmethod
    def from_outcomes(cls, outcomes: tuple[RecordOutcome, ...]) -> ReconciliationSummary:
        counts = dict.fromkeys(RecordState, 0)
        for outcome in outcomes:
            counts[outcome.state] += 1
        return cls(
            ok=counts[RecordState.OK],
            updated=counts[RecordState.UPDATED],
            skipped=counts[RecordState.SKIPPED],
            errors=counts[RecordState.ERROR],
            total=len(outcomes),
            outcomes=outcomes,
        )

    def as_dict(self) -> dict[str, int]:
        return {
            "ok": self.ok,
            "updated": self.updated,
            "skipped": self.skipped,
            "errors": self.errors,
            "total": self.total,
        }


@dataclass(frozen=True, slots=True, kw_only=True)
class MissingEmployee:
    """An HR-active person with no workflow card."""

    identity: str
    record: AuthoritativeRecord
    canonical: CanonicalRecord
    admission: date | None
    skip: ValidationSkip | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class DetectionReport:
    eligible: tuple[MissingEmployee, ...] = ()
    ineligible_future: tuple[MissingEmployee, ...] = ()
    ineligible_undated: tuple[MissingEmployee, ...] = ()
    invalid_identity: int = 0
    already_present: int = 0

    @property
    def total_missing(self) -> int:
        return len(self.eligible) + len(self.ineligible_future) + len(self.ineligible_undated)


@dataclass(frozen=True, slots=True, kw_only=True)
class CreationSummary:
    created: int
    failed: int
    total_eligible: int
    total_missing: int = 0
    created_card_ids: tuple[str, ...] = ()

    def as_dict(self) -> dict[str, int]:
        return {
            "created": self.created,
            "failed": self.failed,
            "totalEligible": self.total_eligible,
            "totalMissing": self.total_missing,
        }
