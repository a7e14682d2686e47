"""HTTP client for the Sinergy SOAP web service."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING, Self

import httpx

from hrsync.adapters.http_resilience import ResilienceConfig, ResilientClient, build_limiter
from hrsync.domain.errors import TransportError

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from aiolimiter import AsyncLimiter

    from hrsync.config.sinergy import SinergyConfig

log = getLogger(__name__)

type ClientFactory = Callable[[ResilienceConfig, AsyncLimiter | None], ResilientClient]

_ERROR_EXCERPT = 800


def _default_client_factory(
    config: ResilienceConfig, limiter: AsyncLimiter | None
) -> ResilientClient:
    return ResilientClient(config, limiter=limiter)


class SinergyClient:
    """Raw text in, raw text out: no parsing happens here.

    Calls run on one event loop owned by the instance, so the rate limit holds
    across consecutive calls. Close the client (or use it as a context manager)
    to release that loop.
    """

    def __init__(
        self,
        config: SinergyConfig,
        *,
        client_factory: ClientFactory = _default_client_factory,
    ) -> None:
        self.config = config
        self._client_factory = client_factory
        self._limiter = build_limiter(config.resilience.ratelimit)
        self._runner = asyncio.Runner()

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
        self._runner.close()

    def call(self, envelope: str, soap_action: str) -> str:
        return self._runner.run(self._call_async(envelope, soap_action))

    async def _call_async(self, envelope: str, soap_action: str) -> str:
        async with self._client_factory(self.config.resilience, self._limiter) as client:
            try:
                response = await client.post(
                    self.config.endpoint,
                    content=envelope.encode("utf-8"),
                    headers={"SOAPAction": soap_action},
                )
            except httpx.HTTPError as exc:
                raise TransportError(f"Sinergy request failed: {exc}") from exc

        text = response.text
        log.debug(
            "Sinergy HTTP %s (%s), %s characters: %s",
            response.status_code,
            response.headers.get("content-type"),
            len(text),
            text[:300],
        )
        if not response.is_success:
            log.error("Sinergy returned HTTP %s: %s", response.status_code, text[:_ERROR_EXCERPT])
            raise TransportError(
                f"Sinergy SOAP request failed with HTTP {response.status_code}",
                status_code=response.status_code,
                body=text[:_ERROR_EXCERPT],
            )
        return text
