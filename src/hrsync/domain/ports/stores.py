"""Ports for writing to the workflow store."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping

    from hrsync.domain.types import CreatedCard


@runtime_checkable
class WorkflowStore(Protocol):
    """Card mutations keyed by workflow field id."""

    def update_fields(self, card_id: str, values: Mapping[str, str]) -> None:
        """Apply all ``values`` to ``card_id`` in a single request."""
        ...

    def create_card(self, values: Mapping[str, str]) -> CreatedCard:
        ...


__all__ = ["WorkflowStore"]
