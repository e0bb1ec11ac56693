"""Outbound Fetch — the one sanctioned network path for formula and sync table code.

Invariants:
    - One shared httpx.AsyncClient per process, opened in lifespan, closed on shutdown
    - Every call made through a bound fetch is logged with its invocation_id
    - Network-layer failures (httpx.HTTPError) map to OutboundFetchError;
      HTTP error statuses are returned as responses, not raised
    - No retries, no rate limiting: the entry decides what a failure means

Design Decisions:
    - Wrapper over raw client: entries never see timeouts, proxies or headers
      configuration (ADR: single responsibility, mirrors the API client wrapper)
    - bind() returns a closure rather than a per-call object: entries call
      `await context.fetch(url)` exactly like a plain fetch function
"""

import logging

import httpx

from coda_mcp.core.errors import ErrorContext, OutboundFetchError
from coda_mcp.core.execution_context import FetchFunc

logger = logging.getLogger(__name__)


class OutboundFetcher:
    """Owns the shared HTTP client and hands out invocation-bound fetch callables."""

    def __init__(
        self,
        timeout_seconds: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        self._client = client or httpx.AsyncClient(
            timeout=timeout_seconds, follow_redirects=True,
        )

    def bind(self, invocation_id: str) -> FetchFunc:
        """Return fetch(url, *, method="GET", **kwargs) attributed to one invocation."""

        async def fetch(url: str, *, method: str = "GET", **kwargs) -> httpx.Response:
            return await self._request(invocation_id, method, url, **kwargs)

        return fetch

    async def _request(
        self, invocation_id: str, method: str, url: str, **kwargs,
    ) -> httpx.Response:
        logger.info(
            "Outbound fetch %s %s", method.upper(), url,
            extra={"invocation_id": invocation_id, "url": url, "method": method.upper()},
        )
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.warning(
                f"Outbound fetch failed: {e}",
                extra={"invocation_id": invocation_id, "url": url},
            )
            raise OutboundFetchError(
                f"Fetch to {url} failed: {e}", url,
                ErrorContext(invocation_id=invocation_id),
            ) from e
        logger.debug(
            "Outbound fetch answered %s", response.status_code,
            extra={
                "invocation_id": invocation_id, "url": url,
                "status_code": response.status_code,
            },
        )
        return response

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    async def aclose(self) -> None:
        await self._client.aclose()
