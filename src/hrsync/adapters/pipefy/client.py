"""HTTP client for the Pipefy GraphQL API."""

from __future__ import annotations

import asyncio
import dataclasses
from logging import getLogger
from typing import TYPE_CHECKING, Self

import httpx
from pydantic import ValidationError

from hrsync.adapters.http_resilience import (
    NO_RETRY,
    ResilienceConfig,
    ResilientClient,
    build_limiter,
)
from hrsync.domain.errors import DataShapeError, GraphQLError, TransportError

from .auth import OAuthTokenProvider
from .schema import GraphQLResponse

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from types import TracebackType

    from aiolimiter import AsyncLimiter

    from hrsync.config.pipefy import PipefyConfig

log = getLogger(__name__)

type ClientFactory = Callable[[ResilienceConfig, AsyncLimiter | None], ResilientClient]

_ERROR_EXCERPT = 800


def _default_client_factory(
    config: ResilienceConfig, limiter: AsyncLimiter | None
) -> ResilientClient:
    return ResilientClient(config, limiter=limiter)


class PipefyClient:
    """Synchronous facade over the GraphQL endpoint.

    Each call opens its own resilient client on an event loop owned by the
    instance. The rate limiter and the bearer token are shared across calls.
    Close the client (or use it as a context manager) to release the loop.
    """

    def __init__(
        self,
        config: PipefyConfig,
        *,
        client_factory: ClientFactory = _default_client_factory,
        token_provider: OAuthTokenProvider | None = None,
    ) -> None:
        self.config = config
        self._client_factory = client_factory
        self._tokens = token_provider or OAuthTokenProvider(config)
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

    def call(
        self,
        query: str,
        variables: Mapping[str, object] | None = None,
        *,
        retry: bool = True,
    ) -> dict[str, object]:
        """Run ``query`` and return its ``data`` object.

        ``retry=False`` disables transport retries, for mutations that are not
        safe to replay.
        """

        resilience = self.config.resilience
        if not retry:
            resilience = dataclasses.replace(resilience, retry=NO_RETRY)
        return self._runner.run(self._call_async(resilience, query, dict(variables or {})))

    async def _call_async(
        self,
        resilience: ResilienceConfig,
        query: str,
        variables: dict[str, object],
    ) -> dict[str, object]:
        async with self._client_factory(resilience, self._limiter) as client:
            try:
                token = await self._tokens.token(client)
                response = await client.post(
                    self.config.endpoint,
                    json={"query": query, "variables": variables},
                    headers={"Authorization": f"Bearer {token}"},
                )
            except httpx.HTTPError as exc:
                raise TransportError(f"Pipefy request failed: {exc}") from exc
            if response.status_code == 401:  # noqa: PLR2004
                self._tokens.invalidate()
            return _parse_graphql_response(response.status_code, response.text)


def _parse_graphql_response(status_code: int, text: str) -> dict[str, object]:
    if not 200 <= status_code < 300:  # noqa: PLR2004
        log.error("Pipefy returned HTTP %s: %s", status_code, text[:_ERROR_EXCERPT])
        raise TransportError(
            f"Pipefy request failed with HTTP {status_code}",
            status_code=status_code,
            body=text[:_ERROR_EXCERPT],
        )

    try:
        payload = GraphQLResponse.model_validate_json(text)
    except ValidationError as exc:
        log.error("Pipefy response is not a JSON object: %s", text[:_ERROR_EXCERPT])
        raise TransportError(
            "Pipefy response is not a JSON object",
            status_code=status_code,
            body=text[:_ERROR_EXCERPT],
        ) from exc

    if payload.errors:
        log.debug("Pipefy GraphQL errors: %s", payload.errors)
        raise GraphQLError(payload.errors)

    if payload.data is None:
        raise DataShapeError("Pipefy response has no data object", payload=text[:_ERROR_EXCERPT])
    return payload.data

