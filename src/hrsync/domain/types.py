"""Value types shared by the domain services."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

type AuthoritativeRecord = Mapping[str, str]
"""Flat attribute -> text mapping decoded from one HR feed record."""

type CanonicalRecord = dict[str, str]
"""Logical field name -> normalized string value."""


@dataclass(frozen=True, slots=True)
class WorkflowField:
    name: str
    value: str | None = None


@dataclass(frozen=True, slots=True)
class WorkflowCard:
    """A workflow-store card as read from the snapshot."""

    id: str
    title: str = ""
    fields: tuple[WorkflowField, ...] = ()

    def field_value(self, label: str) -> str | None:
        """Return the value of the first field whose label matches exactly."""

        for field in self.fields:
            if field.name == label:
                return field.value
        return None


@dataclass(frozen=True, slots=True)
class CreatedCard:
    id: str
    title: str = ""
