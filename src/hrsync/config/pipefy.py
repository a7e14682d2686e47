"""Pipefy (workflow store) configuration values."""

from __future__ import annotations

from dataclasses import dataclass, field

from .env import env_int, optional_env_var, require_env_vars
from .errors import InvalidConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig

PIPEFY_ENDPOINT = "https://api.pipefy.com/graphql"
PIPEFY_TOKEN_URL = "https://app.pipefy.com/oauth/token"  # noqa: S105
PIPEFY_TIMEOUT_SECONDS = 30.0
DEFAULT_PAGE_SIZE = 50


def _default_resilience() -> ResilienceConfig:
    return ResilienceConfig(
        name="pipefy",
        timeout_seconds=PIPEFY_TIMEOUT_SECONDS,
        ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
    )


@dataclass(frozen=True, slots=True)
class PipefyConfig:
    """Holds Pipefy API configuration values."""

    client_id: str
    client_secret: str
    endpoint: str = PIPEFY_ENDPOINT
    token_url: str = PIPEFY_TOKEN_URL
    active_phase_id: str | None = None
    pipe_id: int | None = None
    page_size: int = DEFAULT_PAGE_SIZE
    resilience: ResilienceConfig = field(default_factory=_default_resilience)

    def require_active_phase_id(self) -> str:
        if not self.active_phase_id:
            raise MissingConfigurationError("Missing configuration for: PIPEFY_ACTIVE_PHASE_ID")
        return self.active_phase_id

    def require_pipe_id(self) -> int:
        if self.pipe_id is None:
            raise MissingConfigurationError("Missing configuration for: PIPEFY_PIPE_ID")
        return self.pipe_id


def _parse_pipe_id(raw: str) -> int | None:
    if not raw:
        return None
    if not raw.isdigit():
        raise InvalidConfigurationError("PIPEFY_PIPE_ID", raw, "a numeric pipe id")
    return int(raw)


def get_pipefy_config(*, resilience: ResilienceConfig | None = None) -> PipefyConfig:
    values = require_env_vars(("PIPEFY_CLIENT_ID", "PIPEFY_CLIENT_SECRET"))

    page_size = env_int("PIPEFY_PAGE_SIZE", DEFAULT_PAGE_SIZE)
    if page_size <= 0:
        raise InvalidConfigurationError("PIPEFY_PAGE_SIZE", str(page_size), "a positive integer")

    return PipefyConfig(
        client_id=values["PIPEFY_CLIENT_ID"],
        client_secret=values["PIPEFY_CLIENT_SECRET"],
        endpoint=optional_env_var("PIPEFY_ENDPOINT", PIPEFY_ENDPOINT),
        token_url=optional_env_var("PIPEFY_TOKEN_URL", PIPEFY_TOKEN_URL),
        active_phase_id=optional_env_var("PIPEFY_ACTIVE_PHASE_ID", "") or None,
        pipe_id=_parse_pipe_id(optional_env_var("PIPEFY_PIPE_ID", "")),
        page_size=page_size,
        resilience=resilience or _default_resilience(),
    )
