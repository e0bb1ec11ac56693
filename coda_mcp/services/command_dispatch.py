"""Command Dispatch — explicit routing from McpAction to handler, plus the error boundary.

Invariants:
    - Every action->handler mapping is visible — no getattr magic, no auto-discovery
    - Actions outside McpAction raise UnsupportedActionError before any lookup
    - Each executeFormula/syncTable invocation gets a fresh ExecutionContext
    - syncTable reports context.continuation as it stands AFTER execute()
    - Entry failures are wrapped in EntityExecutionError carrying only the
      entry's own message
    - No state between calls except the catalog (read-only here)

Design Decisions:
    - Explicit dict over getattr: every mapping visible in one place
    - Two entry points: execute() raises typed errors (HTTP maps them to a
      status), respond() folds them into {"error": ...} (socket frames)
    - No timeout and no cancellation around execute(): a hung entry blocks only
      its own invocation
"""

import logging
from collections.abc import Awaitable, Callable, Mapping
from types import MappingProxyType
from typing import Any

from coda_mcp.core.catalog import Catalog, ExecuteFunc
from coda_mcp.core.domain_types import EntityKind, McpAction
from coda_mcp.core.errors import (
    CodaMcpError,
    EntityExecutionError,
    ErrorContext,
    InvalidFieldError,
    MissingFieldError,
    UnknownEntityError,
    UnsupportedActionError,
)
from coda_mcp.core.execution_context import (
    ExecutionContext, FetchBinder, build_execution_context,
)
from coda_mcp.schemas.command import McpCommand

logger = logging.getLogger(__name__)

ActionHandler = Callable[[dict], Awaitable[dict]]


class CommandDispatch:
    """Routes McpAction -> handler. Explicit registration, no auto-discovery."""

    def __init__(self, catalog: Catalog, fetcher: FetchBinder):
        self._catalog = catalog
        self._fetcher = fetcher

        # ADR: every mapping explicit — adding an action requires editing
        # McpAction and this dict
        self._handlers: dict[McpAction, ActionHandler] = {
            McpAction.LIST_FORMULAS: self._list_formulas,
            McpAction.LIST_SYNC_TABLES: self._list_sync_tables,
            McpAction.EXECUTE_FORMULA: self._execute_formula,
            McpAction.SYNC_TABLE: self._sync_table,
        }

    @property
    def handlers(self) -> Mapping[McpAction, ActionHandler]:
        return MappingProxyType(self._handlers)

    async def execute(self, command: McpCommand) -> dict:
        """Run one command. Returns the success envelope or raises CodaMcpError."""
        action = McpAction.parse(command.action)
        logger.info(
            "Received MCP command: %s", command.action,
            extra={"action": str(command.action)},
        )
        if action is None:
            raise UnsupportedActionError(
                command.action, ErrorContext(action=str(command.action)),
            )
        return await self._handlers[action](command.data or {})

    async def respond(self, command: McpCommand) -> dict:
        """Run one command; every CodaMcpError becomes {"error": message}."""
        try:
            return await self.execute(command)
        except CodaMcpError as e:
            logger.warning(f"Command failed: {e.message}", extra=e.log_extra())
            return e.to_response()

    # ─── Handlers ─────────────────────────────────────────────────

    async def _list_formulas(self, data: dict) -> dict:
        return {"formulas": self._catalog.list_formulas()}

    async def _list_sync_tables(self, data: dict) -> dict:
        return {"syncTables": self._catalog.list_sync_tables()}

    async def _execute_formula(self, data: dict) -> dict:
        action = McpAction.EXECUTE_FORMULA
        name = _require_name(data, "formula", "Formula name not provided", action)
        formula = self._catalog.get_formula(name)
        if formula is None:
            raise UnknownEntityError(
                EntityKind.FORMULA.value, name,
                ErrorContext(action=action.value, entity_name=name),
            )
        args = _arguments(data, action)
        context = build_execution_context(data, action=action, fetcher=self._fetcher)
        result = await self._run_entry(name, formula.execute, args, context, action)
        return {"result": result}

    async def _sync_table(self, data: dict) -> dict:
        action = McpAction.SYNC_TABLE
        name = _require_name(data, "syncTable", "Sync table name not provided", action)
        table = self._catalog.get_sync_table(name)
        if table is None:
            raise UnknownEntityError(
                EntityKind.SYNC_TABLE.value, name,
                ErrorContext(action=action.value, entity_name=name),
            )
        args = _arguments(data, action)
        context = build_execution_context(data, action=action, fetcher=self._fetcher)
        records = await self._run_entry(name, table.formula.execute, args, context, action)
        # Post-execution value: the entry may have advanced or cleared it.
        return {"result": records, "continuation": context.continuation}

    async def _run_entry(
        self,
        name: str,
        execute: ExecuteFunc,
        args: list[Any],
        context: ExecutionContext,
        action: McpAction,
    ) -> Any:
        try:
            return await execute(args, context)
        except Exception as e:
            logger.warning(
                f"Entry '{name}' failed: {e}",
                exc_info=True,
                extra={
                    "action": action.value, "entity_name": name,
                    "invocation_id": context.invocation_id,
                },
            )
            raise EntityExecutionError(
                _failure_message(e), name,
                ErrorContext(
                    action=action.value, entity_name=name,
                    invocation_id=context.invocation_id,
                    debug_info={"exception_type": type(e).__name__},
                ),
            ) from e


def _require_name(data: dict, field: str, missing_message: str, action: McpAction) -> str:
    name = data.get(field)
    if not name:
        raise MissingFieldError(missing_message, field, ErrorContext(action=action.value))
    if not isinstance(name, str):
        raise InvalidFieldError(
            f"{field} must be a string", field, ErrorContext(action=action.value),
        )
    return name


def _arguments(data: dict, action: McpAction) -> list[Any]:
    params = data.get("parameters")
    if params is None:
        return []
    if not isinstance(params, list):
        raise InvalidFieldError(
            "Parameters must be a list", "parameters",
            ErrorContext(action=action.value),
        )
    return list(params)


def _failure_message(exc: Exception) -> str:
    if isinstance(exc, CodaMcpError):
        return exc.message
    return str(exc) or type(exc).__name__
