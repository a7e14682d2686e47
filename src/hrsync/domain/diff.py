"""Field-level comparison of canonical records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .canonicalization import normalize
from .mapping import DEFAULT_FIELD_TABLE, FieldMappingTable

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(frozen=True, slots=True)
class FieldDifference:
    workflow: str
    authoritative: str


type DiffResult = dict[str, FieldDifference]


class Differ:
    """Report the logical fields whose normalized values disagree.

    Fields are visited in table order so diffs (and the run logs built from them)
    are reproducible. Equality is plain string equality after ``normalize``; case
    differences count.
    """

    def __init__(self, table: FieldMappingTable = DEFAULT_FIELD_TABLE) -> None:
        self._table = table

    def diff(
        self,
        workflow: Mapping[str, str],
        authoritative: Mapping[str, str],
    ) -> DiffResult:
        differences: DiffResult = {}
        for logical_name in self._table.logical_names:
            left = normalize(workflow.get(logical_name))
            right = normalize(authoritative.get(logical_name))
            if left != right:
                differences[logical_name] = FieldDifference(workflow=left, authoritative=right)
        return differences
