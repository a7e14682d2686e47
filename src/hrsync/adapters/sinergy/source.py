"""Authoritative HR source backed by the Sinergy SOAP service."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Self

from hrsync.adapters.diagnostics import DISABLED_DUMPER, PayloadDumper
from hrsync.domain.identity import redact_identity
from hrsync.domain.reconciliation.contracts import (
    DecodeEmpty,
    DecodeFailure,
    DecodeFailureReason,
    DecodeSuccessList,
)

from .decoder import ACTIVE_LIST, BY_IDENTITY, SoapOperation, decode_soap_response
from .envelope import active_list_envelope, by_identity_envelope

if TYPE_CHECKING:
    from types import TracebackType

    from hrsync.config.sinergy import SinergyConfig
    from hrsync.domain.reconciliation.contracts import DecodeOutcome

    from .client import SinergyClient

log = getLogger(__name__)


class SinergyAuthoritativeSource:
    def __init__(
        self,
        client: SinergyClient,
        config: SinergyConfig,
        *,
        dumper: PayloadDumper = DISABLED_DUMPER,
    ) -> None:
        self._client = client
        self._config = config
        self._dumper = dumper

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def lookup(self, identity_digits: str) -> DecodeOutcome:
        log.debug("Looking up %s in Sinergy", redact_identity(identity_digits))
        envelope = by_identity_envelope(self._config.user, self._config.password, identity_digits)
        body = self._client.call(envelope, self._config.soap_action_by_cpf)
        outcome = decode_soap_response(body, BY_IDENTITY, identity_digits)
        self._dump_if_unusable(BY_IDENTITY, body, outcome)
        return outcome

    def list_active(self) -> DecodeOutcome:
        log.info("Fetching active employees from Sinergy")
        envelope = active_list_envelope(self._config.user, self._config.password)
        body = self._client.call(envelope, self._config.soap_action_active)
        outcome = decode_soap_response(body, ACTIVE_LIST)
        self._dump_if_unusable(ACTIVE_LIST, body, outcome)
        if isinstance(outcome, DecodeSuccessList):
            log.info("Sinergy returned %s active employees", len(outcome.records))
        return outcome

    def _dump_if_unusable(
        self, operation: SoapOperation, body: str, outcome: DecodeOutcome
    ) -> None:
        if not isinstance(outcome, DecodeFailure | DecodeEmpty):
            return
        kind = outcome.reason if isinstance(outcome, DecodeFailure) else "empty-result"
        suffix = ".html" if kind == DecodeFailureReason.HTML_RESPONSE else ".xml"
        self._dumper.dump(f"sinergy_{operation.name}_{kind}", body, suffix=suffix)
