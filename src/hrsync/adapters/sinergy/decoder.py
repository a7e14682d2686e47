"""Decode Sinergy SOAP responses into tagged outcomes.

The service wraps its payload twice: a SOAP envelope whose ``<Op>Result`` node
holds an XML document as (usually escaped) text. Each way this can go wrong maps
to its own ``DecodeFailureReason`` so callers can tell an intercepted request
from a rejected login or a changed contract. Steps run in a fixed order and the
first match wins.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from logging import getLogger
from xml.etree import ElementTree as ET
from xml.sax.saxutils import unescape

from hrsync.domain.identity import only_digits
from hrsync.domain.reconciliation.contracts import (
    DecodeEmpty,
    DecodeFailure,
    DecodeFailureReason,
    DecodeOutcome,
    DecodeSuccess,
    DecodeSuccessList,
)

log = getLogger(__name__)

LOGIN_REQUIRED_MARKER = "login necessário"
BASE64_MIN_LENGTH = 40

_HTML_OPENERS = ("<!doctype html", "<html")
_BASE64_TEXT = re.compile(r"^[A-Za-z0-9+/=\r\n]+$")
_EXTRA_ENTITIES = {"&quot;": '"', "&apos;": "'"}
_DETAIL_EXCERPT = 2000


@dataclass(frozen=True, slots=True)
class SoapOperation:
    """Where one SOAP operation keeps its records."""

    name: str
    containers: tuple[str, ...]
    record_element: str
    identity_attribute: str = "func_num_cpf"
    returns_list: bool = False

    @property
    def response_element(self) -> str:
        return f"{self.name}Response"

    @property
    def result_element(self) -> str:
        return f"{self.name}Result"


BY_IDENTITY = SoapOperation(
    name="getDadosFuncionariosPorCpf",
    containers=("Funcionarios", "funcionarios"),
    record_element="dadosFuncionario",
)

ACTIVE_LIST = SoapOperation(
    name="GetDadosFuncionariosAtivosCompleto",
    containers=("FuncAtivosCompleto",),
    record_element="dadosFuncionarioAtivosCompleto",
    returns_list=True,
)


def looks_like_html(body: str) -> bool:
    return body.strip().lower().startswith(_HTML_OPENERS)


def looks_like_base64(text: str) -> bool:
    stripped = text.strip()
    return len(stripped) >= BASE64_MIN_LENGTH and _BASE64_TEXT.match(stripped) is not None


def decode_entities(text: str) -> str:
    """Decode the five predefined XML entities, once."""

    return unescape(text, _EXTRA_ENTITIES)


def local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def decode_soap_response(
    body: str,
    operation: SoapOperation,
    requested_identity: str = "",
) -> DecodeOutcome:
    if looks_like_html(body):
        return DecodeFailure(
            DecodeFailureReason.HTML_RESPONSE,
            "Sinergy answered with an HTML page (request intercepted or blocked upstream)",
            body[:_DETAIL_EXCERPT],
        )

    try:
        envelope = ET.fromstring(body.strip())  # noqa: S314
    except ET.ParseError as exc:
        return DecodeFailure(
            DecodeFailureReason.MALFORMED_XML,
            f"SOAP envelope is not well-formed XML: {exc}",
            body[:_DETAIL_EXCERPT],
        )

    soap_body = _child(envelope, "Body")
    if soap_body is None:
        return DecodeFailure(DecodeFailureReason.MISSING_BODY, "SOAP Body element is missing")

    fault = _child(soap_body, "Fault", "fault")
    if fault is not None:
        return DecodeFailure(
            DecodeFailureReason.SOAP_FAULT,
            f"SOAP Fault returned by {operation.name}: {_fault_string(fault)}",
            ET.tostring(fault, encoding="unicode")[:_DETAIL_EXCERPT],
        )

    response = _child(soap_body, operation.response_element)
    result = _child(response, operation.result_element) if response is not None else None
    if result is None:
        return DecodeEmpty(f"{operation.result_element} is missing")
    if len(result) > 0:
        return DecodeEmpty(f"{operation.result_element} is not a plain string")
    result_text = result.text or ""
    if not result_text.strip():
        return DecodeEmpty(f"{operation.result_element} is empty")

    if LOGIN_REQUIRED_MARKER in result_text.lower():
        return DecodeFailure(
            DecodeFailureReason.AUTH_REJECTED,
            f"Sinergy rejected the security header: {result_text.strip()[:200]!r}",
        )

    trimmed = result_text.strip()
    inner = trimmed if trimmed.startswith("<") else decode_entities(trimmed).strip()
    if not inner.startswith("<"):
        if looks_like_base64(trimmed):
            return DecodeFailure(
                DecodeFailureReason.SUSPECTED_ENCODED_PAYLOAD,
                f"{operation.result_element} looks like base64 (encoded or compressed payload)",
                trimmed[:_DETAIL_EXCERPT],
            )
        return DecodeFailure(
            DecodeFailureReason.NOT_XML_AFTER_DECODE,
            f"{operation.result_element} is not XML after entity decoding",
            trimmed[:_DETAIL_EXCERPT],
        )

    try:
        document = ET.fromstring(inner)  # noqa: S314
    except ET.ParseError as exc:
        return DecodeFailure(
            DecodeFailureReason.MALFORMED_XML,
            f"{operation.result_element} holds malformed XML: {exc}",
            inner[:_DETAIL_EXCERPT],
        )

    root_name = local_name(document.tag)
    if root_name == operation.record_element:
        elements = [document]
    else:
        elements = [
            child for child in document if local_name(child.tag) == operation.record_element
        ]
        if not elements and root_name not in operation.containers:
            return DecodeFailure(
                DecodeFailureReason.UNEXPECTED_SHAPE,
                f"Unexpected root element {root_name!r} in {operation.result_element}",
                inner[:_DETAIL_EXCERPT],
            )

    records = tuple(_flatten(element) for element in elements)
    if operation.returns_list:
        return DecodeSuccessList(records)
    if not records:
        return DecodeEmpty(f"no {operation.record_element} record in {root_name}")
    return _select_record(records, operation, requested_identity)


def _select_record(
    records: tuple[dict[str, str], ...],
    operation: SoapOperation,
    requested_identity: str,
) -> DecodeSuccess:
    wanted = only_digits(requested_identity)
    if not wanted:
        return DecodeSuccess(records[0])
    for record in records:
        if only_digits(record.get(operation.identity_attribute)) == wanted:
            return DecodeSuccess(record)
    log.warning(
        "None of %s %s records matches the requested identity; using the first one",
        len(records),
        operation.record_element,
    )
    return DecodeSuccess(records[0], matched_requested_key=False)


def _child(element: ET.Element, *names: str) -> ET.Element | None:
    for child in element:
        if local_name(child.tag) in names:
            return child
    return None


def _fault_string(fault: ET.Element) -> str:
    for node in fault.iter():
        if local_name(node.tag) in {"faultstring", "Text"} and node.text and node.text.strip():
            return node.text.strip()
    return "".join(fault.itertext()).strip()[:200]


def _flatten(element: ET.Element) -> dict[str, str]:
    """Child element name -> trimmed text; the first occurrence of a name wins."""

    record: dict[str, str] = {}
    for child in element:
        record.setdefault(local_name(child.tag), (child.text or "").strip())
    return record
