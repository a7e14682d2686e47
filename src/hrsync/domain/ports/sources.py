"""Ports for reading the authoritative HR feed."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from hrsync.domain.reconciliation.contracts import DecodeOutcome


@runtime_checkable
class AuthoritativeSource(Protocol):
    """Lookups against the HR feed, already decoded into tagged outcomes.

    Transport failures (non-2xx, connection errors) are raised as
    ``TransportError``; everything the decoder can classify comes back as a value.
    """

    def lookup(self, identity_digits: str) -> DecodeOutcome:
        ...

    def list_active(self) -> DecodeOutcome:
        ...


__all__ = ["AuthoritativeSource"]
