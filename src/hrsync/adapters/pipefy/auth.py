"""OAuth client-credentials tokens for the Pipefy API."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from hrsync.domain.errors import ProtocolError, TransportError

from .schema import TokenResponse

if TYPE_CHECKING:
    from hrsync.adapters.http_resilience import ResilientClient
    from hrsync.config.pipefy import PipefyConfig

log = getLogger(__name__)

DEFAULT_EXPIRES_IN_SECONDS = 3600
REFRESH_MARGIN_SECONDS = 60.0


@dataclass(frozen=True, slots=True)
class AccessToken:
    value: str
    expires_at: float


class OAuthTokenProvider:
    """Cache one bearer token per process and refresh it shortly before it expires."""

    def __init__(
        self,
        config: PipefyConfig,
        *,
        clock: Callable[[], float] = time.monotonic,
        margin_seconds: float = REFRESH_MARGIN_SECONDS,
    ) -> None:
        self._config = config
        self._clock = clock
        self._margin = margin_seconds
        self._cached: AccessToken | None = None

    async def token(self, client: ResilientClient) -> str:
        cached = self._cached
        if cached is not None and cached.expires_at - self._margin > self._clock():
            return cached.value
        return await self._request_new_token(client)

    def invalidate(self) -> None:
        self._cached = None

    async def _request_new_token(self, client: ResilientClient) -> str:
        log.debug("Requesting a new Pipefy access token")
        response = await client.post(
            self._config.token_url,
            data={
                "grant_type": "client_credentials",
                "client_id": self._config.client_id,
                "client_secret": self._config.client_secret,
            },
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
        if not response.is_success:
            raise TransportError(
                f"Pipefy token request failed with HTTP {response.status_code}",
                status_code=response.status_code,
                body=response.text[:800],
            )

        try:
            payload = TokenResponse.model_validate_json(response.content)
        except ValidationError as exc:
            raise ProtocolError(
                "Pipefy token response is not valid JSON",
                reason="invalid-token-response",
                detail=response.text[:800],
            ) from exc
        if not payload.access_token:
            raise ProtocolError(
                "Pipefy token response has no access_token",
                reason="invalid-token-response",
            )

        expires_in = payload.expires_in or DEFAULT_EXPIRES_IN_SECONDS
        self._cached = AccessToken(
            value=payload.access_token,
            expires_at=self._clock() + expires_in,
        )
        log.debug("Pipefy access token obtained, expires in %s seconds", expires_in)
        return payload.access_token
