"""Field mapping between the workflow store and the HR feed.

The table is the only place that decides which fields take part in comparison and
updates. It is an immutable value handed to the canonicalizer and the differ, so
tests can run the whole pipeline against a small synthetic table.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import StrEnum

type SourceComposer = Callable[[Mapping[str, str]], str]


class FieldKind(StrEnum):
    TEXT = "text"
    IDENTITY = "identity"
    DATE = "date"


@dataclass(frozen=True, slots=True, kw_only=True)
class FieldMapping:
    """One logical field and where it lives on each side.

    ``source_attributes`` are tried in order and the first non-blank one wins;
    ``fallback`` builds a value from several attributes when none of them is set.
    """

    logical_name: str
    label: str
    field_id: str
    source_attributes: tuple[str, ...] = ()
    kind: FieldKind = FieldKind.TEXT
    fallback: SourceComposer | None = None

    def __post_init__(self) -> None:
        if not self.source_attributes and self.fallback is None:
            raise ValueError(f"Field {self.logical_name!r} has no source attribute")


@dataclass(frozen=True, slots=True)
class FieldMappingTable:
    mappings: tuple[FieldMapping, ...]
    identity_field: str = "tax_id"
    status_field: str = "status"
    admission_field: str = "admission_date"
    _by_name: dict[str, FieldMapping] = field(
        init=False, repr=False, compare=False, default_factory=dict
    )

    def __post_init__(self) -> None:
        by_name: dict[str, FieldMapping] = {}
        field_ids: set[str] = set()
        for mapping in self.mappings:
            if mapping.logical_name in by_name:
                raise ValueError(f"Duplicate logical field {mapping.logical_name!r}")
            if mapping.field_id in field_ids:
                raise ValueError(f"Duplicate workflow field id {mapping.field_id!r}")
            by_name[mapping.logical_name] = mapping
            field_ids.add(mapping.field_id)

        for required in (self.identity_field, self.status_field, self.admission_field):
            if required not in by_name:
                raise ValueError(f"Mapping table lacks required field {required!r}")
        if by_name[self.identity_field].kind is not FieldKind.IDENTITY:
            raise ValueError(f"Identity field {self.identity_field!r} must be of kind identity")

        self._by_name.update(by_name)

    def __iter__(self) -> Iterator[FieldMapping]:
        return iter(self.mappings)

    def __len__(self) -> int:
        return len(self.mappings)

    def __contains__(self, logical_name: object) -> bool:
        return logical_name in self._by_name

    @property
    def logical_names(self) -> tuple[str, ...]:
        return tuple(mapping.logical_name for mapping in self.mappings)

    def get(self, logical_name: str) -> FieldMapping:
        return self._by_name[logical_name]

    @property
    def identity(self) -> FieldMapping:
        return self._by_name[self.identity_field]

    @property
    def status(self) -> FieldMapping:
        return self._by_name[self.status_field]

    @property
    def admission(self) -> FieldMapping:
        return self._by_name[self.admission_field]


def compose_mobile_phone(raw: Mapping[str, str]) -> str:
    """``(11) 98765-4321`` from the split area-code and number attributes."""

    area_code = (raw.get("func_celular_ddd") or "").strip()
    number = (raw.get("func_celular_numero") or "").strip()
    if not area_code or not number:
        return ""
    return f"({area_code}) {number}"


def _text(logical: str, label: str, field_id: str, *sources: str) -> FieldMapping:
    return FieldMapping(
        logical_name=logical,
        label=label,
        field_id=field_id,
        source_attributes=sources,
    )


def _date(logical: str, label: str, field_id: str, source: str) -> FieldMapping:
    return FieldMapping(
        logical_name=logical,
        label=label,
        field_id=field_id,
        source_attributes=(source,),
        kind=FieldKind.DATE,
    )


DEFAULT_FIELD_TABLE = FieldMappingTable(
    mappings=(
        _text("full_name", "Nome do colaborador", "nome_do_colaborador", "func_nom"),
        _text("personal_email", "E-mail Pessoal", "e_mail_pessoal", "func_email_pessoal"),
        FieldMapping(
            logical_name="tax_id",
            label="CPF",
            field_id="cpf",
            source_attributes=("func_num_cpf",),
            kind=FieldKind.IDENTITY,
        ),
        _text("national_id", "RG", "rg", "func_num_rg"),
        _text("corporate_email", "E-mail Corporativo (EDC)", "e_mail_edc", "func_email"),
        FieldMapping(
            logical_name="mobile_phone",
            label="Número de Celular",
            field_id="n_mero_de_celular",
            source_attributes=("func_num_cel",),
            fallback=compose_mobile_phone,
        ),
        _text("home_phone", "Número de Telefone", "n_mero_de_telefone", "func_num_tel_res"),
        _text("street_address", "Endereço Logradouro", "endere_o", "func_nom_end"),
        _text("city_code", "[DESATIVADO] Código Cidade", "c_digo_cidade", "cid_cod"),
        _text("city_name", "Nome Cidade", "nome_cidade", "cid_nome"),
        _text("postal_code", "CEP Cidade", "cep_cidade", "func_cod_cep"),
        _text("gender", "Gênero", "g_nero", "func_sts_sexo"),
        _text("marital_status", "Estado Civil", "estado_civil", "estcv_cod"),
        _date("birth_date", "Data de Nascimento", "data_de_nascimento", "func_dat_nasc"),
        _date("admission_date", "Data de Admissão", "data_de_admiss_o", "func_dat_adm_banco"),
        # The trailing space is part of the label as configured in the pipe.
        _text("cost_center_name", "Nome Centro de Custo ", "nome_centro_de_custo", "ccu_nom"),
        _text("cost_center_code", "Código Centro de Custo", "c_digo_centro_de_custo", "ccu_cod"),
        _text("status", "Status Colaborador", "status_colaborador", "func_sts"),
        _date("termination_date", "Data Demissão", "data_demiss_o", "func_dat_dem"),
        _text("termination_status", "Status Demissão", "status_demiss_o", "func_sts_dem"),
        _text(
            "termination_reason", "Motivo Demissão", "motivo_demiss_o", "desc_motivo_rescisao"
        ),
        _text("role", "Cargo", "cargo", "desc_tipo_cargo", "desc_funcao_cargo"),
        _text(
            "work_location_code",
            "[DESATIVADO] Código Local de Trabalho",
            "c_digo_local_de_trabalho",
            "func_location",
            "func_local_trab_codigo",
        ),
        _text(
            "work_location_name",
            "Nome Local de Trabalho",
            "nome_local_de_trabalho",
            "func_local_trabalho_descricao",
        ),
        _text("unit_tax_id", "CNPJ Unidade", "cnpj_unidade", "cnpj_unidade"),
        _text(
            "work_location_city",
            "Munícipio Local de Trabalho",
            "mun_cipio_local_de_trabalho",
            "func_local_trabalho_municipio",
        ),
        _text(
            "shift_description",
            "Escala de Horário Descrição",
            "escala_de_hor_rio_descri_o",
            "desc_escala",
        ),
        _text("manager_name", "Nome Gestor", "nome_gestor", "gestor_nome"),
        _text("company_name", "Razão Social", "raz_o_social", "razao_social"),
        _text("employment_type", "Nome do Vínculo", "nome_do_v_nculo", "nom_vinculo"),
        _text("union_name", "Nome do Sindicato", "nome_do_sindicato", "nom_sindicato"),
        _text("employee_number", "Matrícula", "matr_cula", "func_num"),
    )
)
