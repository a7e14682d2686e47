"""Public interface for the Sinergy adapter."""

from __future__ import annotations

from .client import SinergyClient
from .decoder import ACTIVE_LIST, BY_IDENTITY, SoapOperation, decode_soap_response
from .envelope import active_list_envelope, by_identity_envelope
from .source import SinergyAuthoritativeSource

__all__ = [
    "ACTIVE_LIST",
    "BY_IDENTITY",
    "SinergyAuthoritativeSource",
    "SinergyClient",
    "SoapOperation",
    "active_list_envelope",
    "by_identity_envelope",
    "decode_soap_response",
]
