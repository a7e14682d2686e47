"""Public interface for the Pipefy adapter."""

from __future__ import annotations

from .auth import OAuthTokenProvider
from .client import PipefyClient
from .fetcher import iter_phase_cards
from .mutations import create_card_mutation, field_alias, gql_escape, update_fields_mutation
from .schema import CardPayload
from .store import PipefyWorkflowStore
from .translator import parse_card

__all__ = [
    "CardPayload",
    "OAuthTokenProvider",
    "PipefyClient",
    "PipefyWorkflowStore",
    "create_card_mutation",
    "field_alias",
    "gql_escape",
    "iter_phase_cards",
    "parse_card",
    "update_fields_mutation",
]
