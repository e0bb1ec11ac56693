"""Execution Context — per-invocation state handed to every formula and sync table.

Invariants:
    - One context per invocation; never cached, shared, or persisted
    - timezone defaults to "UTC" when absent or empty
    - continuation is None for every formula invocation and for a sync table's
      first page; otherwise it is the caller's token, passed through verbatim
    - Entries may overwrite continuation; the dispatcher reads it after execute()

Design Decisions:
    - Mutable dataclass: the continuation handoff is an assignment by the entry,
      matching how sync tables already signal "more pages"
    - fetch is injected, not imported: entries never see network configuration,
      only the invocation-bound capability (ADR: one sanctioned outbound path)
"""

import uuid
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Protocol

from coda_mcp.core.domain_types import McpAction

DEFAULT_TIMEZONE = "UTC"

FetchFunc = Callable[..., Awaitable[Any]]


class FetchBinder(Protocol):
    """Anything that can hand out an invocation-bound fetch callable."""

    def bind(self, invocation_id: str) -> FetchFunc: ...


@dataclass
class ExecutionContext:
    """What an executing entry sees."""
    fetch: FetchFunc
    timezone: str = DEFAULT_TIMEZONE
    continuation: str | None = None
    invocation_id: str = field(default_factory=lambda: uuid.uuid4().hex)


def build_execution_context(
    data: dict | None, *, action: McpAction, fetcher: FetchBinder,
) -> ExecutionContext:
    """Build a fresh context from a command's data. Total: never raises."""
    data = data if isinstance(data, dict) else {}
    invocation_id = uuid.uuid4().hex
    return ExecutionContext(
        fetch=fetcher.bind(invocation_id),
        timezone=_resolve_timezone(data.get("timezone")),
        continuation=_resolve_continuation(action, data.get("continuation")),
        invocation_id=invocation_id,
    )


def _resolve_timezone(value: object) -> str:
    if isinstance(value, str) and value:
        return value
    return DEFAULT_TIMEZONE


def _resolve_continuation(action: McpAction, value: object) -> Any:
    # Formulas never receive a caller-supplied continuation.
    if action is not McpAction.SYNC_TABLE:
        return None
    return value or None
