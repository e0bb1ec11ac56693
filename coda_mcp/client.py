"""MCP Client — async HTTP caller for POST /mcp, including the sync paging loop.

Invariants:
    - send() returns the decoded envelope as-is; error envelopes are data, not exceptions
    - iter_sync_table() starts with continuation=None, echoes each response's
      token verbatim, and stops on the first page whose continuation is None
    - An error envelope mid-sequence raises McpClientError; pages already
      yielded stay delivered

Design Decisions:
    - httpx.AsyncClient with injectable transport: tests drive the ASGI app in-process
    - max_pages guard lives in the caller, never in the server: the server
      enforces no page limit
"""

import logging
from collections.abc import AsyncIterator
from typing import Any

import httpx

from coda_mcp.core.continuation import PaginationState, classify_continuation
from coda_mcp.core.domain_types import JsonRecord, McpAction
from coda_mcp.schemas.command import ErrorEnvelope, SyncPageEnvelope

logger = logging.getLogger(__name__)


class McpClientError(Exception):
    """Server answered with an error envelope, or paging exceeded max_pages."""


class McpClient:
    """Thin async client for the command protocol."""

    def __init__(
        self,
        base_url: str = "http://localhost:3000",
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 30.0,
    ):
        self._http = httpx.AsyncClient(
            base_url=base_url, transport=transport, timeout=timeout,
        )

    async def __aenter__(self) -> "McpClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def send(self, command: dict) -> dict:
        response = await self._http.post("/mcp", json=command)
        return response.json()

    async def list_formulas(self) -> list[dict]:
        body = _unwrap(await self.send({"action": McpAction.LIST_FORMULAS.value}))
        return body["formulas"]

    async def list_sync_tables(self) -> list[dict]:
        body = _unwrap(await self.send({"action": McpAction.LIST_SYNC_TABLES.value}))
        return body["syncTables"]

    async def execute_formula(
        self, name: str, *params: Any, timezone: str | None = None,
    ) -> Any:
        data: dict[str, Any] = {"formula": name, "parameters": list(params)}
        if timezone:
            data["timezone"] = timezone
        body = _unwrap(await self.send({
            "action": McpAction.EXECUTE_FORMULA.value, "data": data,
        }))
        return body["result"]

    async def iter_sync_table(
        self,
        name: str,
        params: list[Any] | None = None,
        *,
        timezone: str | None = None,
        max_pages: int | None = None,
    ) -> AsyncIterator[list[JsonRecord]]:
        """Yield each page of records until the server returns continuation=None."""
        continuation: Any = None
        pages = 0
        while True:
            if max_pages is not None and pages >= max_pages:
                raise McpClientError(
                    f'Sync table "{name}" still had pages after {max_pages} requests',
                )
            data: dict[str, Any] = {
                "syncTable": name,
                "parameters": list(params or []),
                "continuation": continuation,
            }
            if timezone:
                data["timezone"] = timezone
            page = SyncPageEnvelope.model_validate(_unwrap(await self.send({
                "action": McpAction.SYNC_TABLE.value, "data": data,
            })))
            pages += 1
            yield page.result
            state = classify_continuation(page.continuation, executed=True)
            if state is PaginationState.EXHAUSTED:
                logger.debug("Sync table %s exhausted after %s pages", name, pages)
                return
            continuation = page.continuation

    async def fetch_all(self, name: str, params: list[Any] | None = None, **kwargs) -> list[JsonRecord]:
        """Every record of a sync table, in page order."""
        records: list[JsonRecord] = []
        async for page in self.iter_sync_table(name, params, **kwargs):
            records.extend(page)
        return records


def _unwrap(body: dict) -> dict:
    if "error" in body:
        raise McpClientError(ErrorEnvelope.model_validate(body).error)
    return body
