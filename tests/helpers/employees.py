"""Reusable fakes and builders for employee reconciliation tests."""

from __future__ import annotations

from typing import TYPE_CHECKING, Self

from hrsync.domain.canonicalization import Canonicalizer
from hrsync.domain.errors import TransportError
from hrsync.domain.mapping import DEFAULT_FIELD_TABLE
from hrsync.domain.reconciliation.contracts import (
    DecodeEmpty,
    DecodeSuccessList,
)
from hrsync.domain.types import CreatedCard, WorkflowCard, WorkflowField

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from types import TracebackType

    from hrsync.domain.mapping import FieldMappingTable
    from hrsync.domain.reconciliation.contracts import DecodeOutcome

SAMPLE_CPF_DIGITS = "48917993826"
SAMPLE_CPF_MASKED = "489.179.938-26"


def sinergy_record(**overrides: str) -> dict[str, str]:
    """A complete HR feed record; keyword arguments replace single attributes."""

    record = {
        "func_nom": "Maria Silva",
        "func_email_pessoal": "maria@example.com",
        "func_num_cpf": SAMPLE_CPF_MASKED,
        "func_num_rg": "12.345.678-9",
        "func_email": "maria.silva@empresa.com.br",
        "func_num_cel": "(11) 98765-4321",
        "func_num_tel_res": "(11) 3333-4444",
        "func_nom_end": "Rua das Flores, 100",
        "cid_cod": "3550308",
        "cid_nome": "São Paulo",
        "func_cod_cep": "01310-100",
        "func_sts_sexo": "F",
        "estcv_cod": "2",
        "func_dat_nasc": "15/03/1990",
        "func_dat_adm_banco": "01/12/2023",
        "ccu_nom": "Financeiro",
        "ccu_cod": "1001",
        "func_sts": "Ativo",
        "func_dat_dem": "",
        "func_sts_dem": "",
        "desc_motivo_rescisao": "",
        "desc_tipo_cargo": "Analyst",
        "func_location": "200",
        "func_local_trabalho_descricao": "Matriz",
        "cnpj_unidade": "12.345.678/0001-90",
        "func_local_trabalho_municipio": "São Paulo",
        "desc_escala": "Seg a Sex 08h-17h",
        "gestor_nome": "João Souza",
        "razao_social": "Empresa SA",
        "nom_vinculo": "CLT",
        "nom_sindicato": "Sindicato X",
        "func_num": "12345",
    }
    record.update(overrides)
    return record


def card_from_record(
    record: Mapping[str, str],
    *,
    card_id: str = "card-1",
    title: str = "Maria Silva",
    table: FieldMappingTable = DEFAULT_FIELD_TABLE,
    **field_overrides: str,
) -> WorkflowCard:
    """A card whose fields agree with ``record``; overrides are keyed by logical name."""

    canonical = Canonicalizer(table).from_authoritative_record(record)
    canonical.update(field_overrides)
    return WorkflowCard(
        id=card_id,
        title=title,
        fields=tuple(
            WorkflowField(name=mapping.label, value=canonical[mapping.logical_name])
            for mapping in table
        ),
    )


def make_card(card_id: str, cpf: str | None, *, title: str = "") -> WorkflowCard:
    fields = () if cpf is None else (WorkflowField(name="CPF", value=cpf),)
    return WorkflowCard(id=card_id, title=title or card_id, fields=fields)


class FakeAuthoritativeSource:
    """In-memory HR feed keyed by identity digits; unknown identities come back empty."""

    def __init__(
        self,
        records: Mapping[str, DecodeOutcome | Exception] | None = None,
        *,
        active: DecodeOutcome | None = None,
    ) -> None:
        self._records = dict(records or {})
        self._active = active if active is not None else DecodeSuccessList(())
        self.lookups: list[str] = []
        self.closed = False

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.closed = True

    def lookup(self, identity_digits: str) -> DecodeOutcome:
        self.lookups.append(identity_digits)
        entry = self._records.get(identity_digits, DecodeEmpty("no record"))
        if isinstance(entry, Exception):
            raise entry
        return entry

    def list_active(self) -> DecodeOutcome:
        return self._active


class FakeWorkflowStore:
    """Records every mutation; card ids or masked CPFs in ``fail_on`` raise ``TransportError``."""

    def __init__(self, *, fail_on: Iterable[str] = ()) -> None:
        self.fail_on = set(fail_on)
        self.updates: list[tuple[str, dict[str, str]]] = []
        self.created: list[dict[str, str]] = []

    def update_fields(self, card_id: str, values: Mapping[str, str]) -> None:
        if card_id in self.fail_on:
            raise TransportError("update rejected", status_code=500)
        self.updates.append((card_id, dict(values)))

    def create_card(self, values: Mapping[str, str]) -> CreatedCard:
        if values.get("cpf") in self.fail_on:
            raise TransportError("create rejected", status_code=500)
        self.created.append(dict(values))
        title = values.get("nome_do_colaborador", "")
        return CreatedCard(id=f"new-{len(self.created)}", title=title)
