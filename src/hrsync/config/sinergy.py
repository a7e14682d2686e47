"""Sinergy (authoritative HR feed) configuration values."""

from __future__ import annotations

from dataclasses import dataclass, field

from .env import optional_env_var, require_env_vars
from .http_resilience import RateLimit, ResilienceConfig

SOAP_ACTION_BY_CPF = "http://tempuri.org/getDadosFuncionariosPorCpf"
SOAP_ACTION_ACTIVE = "http://tempuri.org/GetDadosFuncionariosAtivosCompleto"
SINERGY_TIMEOUT_SECONDS = 60.0


def _default_resilience() -> ResilienceConfig:
    return ResilienceConfig(
        name="sinergy",
        timeout_seconds=SINERGY_TIMEOUT_SECONDS,
        ratelimit=RateLimit(max_calls=2, per_seconds=1.0),
        default_headers={
            "Content-Type": "text/xml; charset=utf-8",
            "Accept": "text/xml, application/xml, */*",
            "User-Agent": "hrsync/1.0",
        },
    )


@dataclass(frozen=True, slots=True)
class SinergyConfig:
    """Holds Sinergy SOAP endpoint and credentials."""

    endpoint: str
    user: str
    password: str
    soap_action_by_cpf: str = SOAP_ACTION_BY_CPF
    soap_action_active: str = SOAP_ACTION_ACTIVE
    resilience: ResilienceConfig = field(default_factory=_default_resilience)


def get_sinergy_config(*, resilience: ResilienceConfig | None = None) -> SinergyConfig:
    values = require_env_vars(("SINERGY_ENDPOINT", "SINERGY_USER", "SINERGY_PASSWORD"))
    return SinergyConfig(
        endpoint=values["SINERGY_ENDPOINT"],
        user=values["SINERGY_USER"],
        password=values["SINERGY_PASSWORD"],
        soap_action_by_cpf=optional_env_var("SINERGY_SOAP_ACTION_BY_CPF", SOAP_ACTION_BY_CPF),
        soap_action_active=optional_env_var("SINERGY_SOAP_ACTION_ACTIVE", SOAP_ACTION_ACTIVE),
        resilience=resilience or _default_resilience(),
    )
