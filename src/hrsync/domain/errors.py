"""Domain exception hierarchy.

Record-level failures are caught at the reconciliation boundaries and recorded on
the run summary; nothing here aborts a batch on its own.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence


class SyncError(Exception):
    """Base exception for all hrsync runtime errors."""


class TransportError(SyncError):
    """An HTTP call failed or returned a non-2xx status."""

    def __init__(self, message: str, *, status_code: int | None = None, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ProtocolError(SyncError):
    """The remote side answered, but not with a usable protocol-level payload."""

    def __init__(self, message: str, *, reason: str, detail: str = "") -> None:
        super().__init__(message)
        self.reason = reason
        self.detail = detail


class GraphQLError(ProtocolError):
    """The GraphQL endpoint returned a non-empty ``errors`` array."""

    def __init__(self, errors: Sequence[object]) -> None:
        messages = [
            str(error.get("message", error)) if isinstance(error, dict) else str(error)
            for error in errors
        ]
        super().__init__(
            f"GraphQL request returned errors: {'; '.join(messages)}",
            reason="graphql-errors",
        )
        self.errors = tuple(errors)


class DataShapeError(SyncError):
    """A response parsed fine but does not have the expected shape."""

    def __init__(self, message: str, *, payload: str = "") -> None:
        super().__init__(message)
        self.payload = payload


class SnapshotError(SyncError):
    """The persisted workflow snapshot is missing or malformed."""
