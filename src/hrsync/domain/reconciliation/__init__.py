"""Reconciliation services and their result types."""

from __future__ import annotations

from .contracts import (
    CreationSummary,
    DecodeEmpty,
    DecodeFailure,
    DecodeFailureReason,
    DecodeOutcome,
    DecodeSuccess,
    DecodeSuccessList,
    DetectionReport,
    MissingEmployee,
    ReconciliationSummary,
    RecordOutcome,
    RecordState,
    ValidationSkip,
)
from .engine import Reconciler
from .new_records import NewRecordDetector, require_employee_list

__all__ = [
    "CreationSummary",
    "DecodeEmpty",
    "DecodeFailure",
    "DecodeFailureReason",
    "DecodeOutcome",
    "DecodeSuccess",
    "DecodeSuccessList",
    "DetectionReport",
    "MissingEmployee",
    "NewRecordDetector",
    "ReconciliationSummary",
    "Reconciler",
    "RecordOutcome",
    "RecordState",
    "ValidationSkip",
    "require_employee_list",
]
