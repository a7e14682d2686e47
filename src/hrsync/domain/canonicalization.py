"""Project workflow cards and HR feed records onto the canonical employee shape."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .dates import to_iso_date_or_original
from .identity import format_mask, identity_key
from .mapping import DEFAULT_FIELD_TABLE, FieldKind, FieldMapping, FieldMappingTable

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .types import AuthoritativeRecord, CanonicalRecord, WorkflowCard


def normalize(value: object) -> str:
    """Comparison form of a value: ``None`` becomes ``""``, everything else is trimmed."""

    if value is None:
        return ""
    return str(value).strip()


class Canonicalizer:
    """Stateless projection of both sources onto logical field names."""

    def __init__(self, table: FieldMappingTable = DEFAULT_FIELD_TABLE) -> None:
        self._table = table

    @property
    def table(self) -> FieldMappingTable:
        return self._table

    def from_workflow_record(self, card: WorkflowCard) -> CanonicalRecord:
        return {
            mapping.logical_name: _normalize_field(mapping, card.field_value(mapping.label))
            for mapping in self._table
        }

    def from_authoritative_record(
        self,
        raw: AuthoritativeRecord,
        fallback_identity_digits: str = "",
    ) -> CanonicalRecord:
        canonical: CanonicalRecord = {}
        for mapping in self._table:
            value = source_value(mapping, raw)
            if mapping.kind is FieldKind.IDENTITY and not value:
                value = fallback_identity_digits
            canonical[mapping.logical_name] = _normalize_field(mapping, value)
        return canonical

    def extract_identity_key(self, card: WorkflowCard) -> str:
        """Digits-only identity of ``card``, or ``""`` when it has no usable key."""

        return identity_key(card.field_value(self._table.identity.label))

    def authoritative_identity_key(self, raw: AuthoritativeRecord) -> str:
        return identity_key(source_value(self._table.identity, raw))

    def authoritative_value(self, logical_name: str, raw: AuthoritativeRecord) -> str:
        """Raw (trimmed, not normalized) HR value behind ``logical_name``."""

        return source_value(self._table.get(logical_name), raw)

    def to_workflow_values(
        self,
        canonical: CanonicalRecord,
        logical_names: Iterable[str] | None = None,
        *,
        skip_blank: bool = False,
    ) -> dict[str, str]:
        """Map canonical values back to workflow field ids, in table order."""

        wanted = None if logical_names is None else set(logical_names)
        values: dict[str, str] = {}
        for mapping in self._table:
            if wanted is not None and mapping.logical_name not in wanted:
                continue
            value = normalize(canonical.get(mapping.logical_name))
            if skip_blank and not value:
                continue
            values[mapping.field_id] = value
        return values


def source_value(mapping: FieldMapping, raw: AuthoritativeRecord) -> str:
    for attribute in mapping.source_attributes:
        value = normalize(raw.get(attribute))
        if value:
            return value
    if mapping.fallback is not None:
        return normalize(mapping.fallback(raw))
    return ""


def _normalize_field(mapping: FieldMapping, value: str | None) -> str:
    text = normalize(value)
    if mapping.kind is FieldKind.IDENTITY:
        return format_mask(text)
    if mapping.kind is FieldKind.DATE:
        return to_iso_date_or_original(text)
    return text
