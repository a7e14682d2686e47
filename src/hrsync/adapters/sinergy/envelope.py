"""SOAP 1.1 request envelopes for the Sinergy web service."""

from __future__ import annotations

from xml.sax.saxutils import escape

from hrsync.domain.identity import format_mask

SERVICE_NAMESPACE = "http://tempuri.org/"

_ENVELOPE = """<?xml version="1.0" encoding="utf-8"?>
<soap:Envelope xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"
               xmlns:xsd="http://www.w3.org/2001/XMLSchema"
               xmlns:soap="http://schemas.xmlsoap.org/soap/envelope/">
  <soap:Header>
    <AuthSoapHd xmlns="{namespace}">
      <Usuario>{user}</Usuario>
      <Senha>{password}</Senha>
    </AuthSoapHd>
  </soap:Header>
  <soap:Body>
    {body}
  </soap:Body>
</soap:Envelope>"""

_XML_ESCAPES = {'"': "&quot;", "'": "&apos;"}


def xml_escape(value: object) -> str:
    return escape("" if value is None else str(value), _XML_ESCAPES)


def build_envelope(user: str, password: str, body: str) -> str:
    return _ENVELOPE.format(
        namespace=SERVICE_NAMESPACE,
        user=xml_escape(user),
        password=xml_escape(password),
        body=body,
    )


def by_identity_envelope(user: str, password: str, identity_digits: str) -> str:
    """Lookup request for one employee; the service expects the masked CPF."""

    cpf = xml_escape(format_mask(identity_digits))
    body = (
        f'<getDadosFuncionariosPorCpf xmlns="{SERVICE_NAMESPACE}">\n'
        f"      <cpf>{cpf}</cpf>\n"
        "    </getDadosFuncionariosPorCpf>"
    )
    return build_envelope(user, password, body)


def active_list_envelope(user: str, password: str) -> str:
    return build_envelope(
        user,
        password,
        f'<GetDadosFuncionariosAtivosCompleto xmlns="{SERVICE_NAMESPACE}" />',
    )
