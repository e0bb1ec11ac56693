"""Catalog — name-keyed registry of formulas and sync tables.

Invariants:
    - Names are unique per collection at any instant (dict semantics)
    - Registering an existing name replaces the entry (last write wins) and
      keeps its original listing position
    - Listings follow insertion order — reproducible within a process run
    - Entries are frozen dataclasses: a lookup sees either the old or the new
      descriptor, never a mix of fields

Design Decisions:
    - Owned value, not a module-level dict: built once at startup, handed to
      every CommandDispatch (ADR: no ambient global state)
    - Lock on registration only: lookups are plain dict reads, and a single
      dict assignment swaps the whole descriptor
    - Duplicate names log a warning instead of raising: existing registration
      call sites rely on replacement
"""

import logging
import threading
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from coda_mcp.core.domain_types import EntityKind, JsonRecord, ParameterType

if TYPE_CHECKING:
    from coda_mcp.core.execution_context import ExecutionContext

logger = logging.getLogger(__name__)

ExecuteFunc = Callable[[list[Any], "ExecutionContext"], Awaitable[Any]]


@dataclass(frozen=True)
class ParameterSpec:
    """Declared formula parameter. Never checked against passed arguments."""
    name: str
    description: str
    type: ParameterType | str = ParameterType.STRING
    required: bool | None = None

    def to_dict(self) -> dict:
        declared = {
            "name": self.name,
            "type": self.type.value if isinstance(self.type, ParameterType) else self.type,
            "description": self.description,
        }
        if self.required is not None:
            declared["required"] = self.required
        return declared


@dataclass(frozen=True)
class Formula:
    """Named request/response function."""
    name: str
    description: str
    execute: ExecuteFunc
    parameters: tuple[ParameterSpec, ...] = ()

    def describe(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "parameters": [p.to_dict() for p in self.parameters],
        }


@dataclass(frozen=True)
class SyncFormula:
    """Page producer of a sync table; signals more pages via context.continuation."""
    execute: ExecuteFunc


@dataclass(frozen=True)
class SyncTable:
    """Named paginated data source."""
    name: str
    description: str
    identity_name: str
    formula: SyncFormula
    schema: JsonRecord = field(default_factory=dict)

    def describe(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "identityName": self.identity_name,
        }


class Catalog:
    """Formulas and sync tables, looked up by name."""

    def __init__(self) -> None:
        self._formulas: dict[str, Formula] = {}
        self._sync_tables: dict[str, SyncTable] = {}
        self._lock = threading.Lock()

    # ─── Registration ─────────────────────────────────────────────

    def register_formula(self, formula: Formula) -> Formula:
        """Insert or replace by formula.name. Never fails."""
        with self._lock:
            self._warn_if_shadowing(EntityKind.FORMULA, formula.name, self._formulas)
            self._formulas[formula.name] = formula
        return formula

    def register_sync_table(self, table: SyncTable) -> SyncTable:
        """Insert or replace by table.name. Never fails."""
        with self._lock:
            self._warn_if_shadowing(EntityKind.SYNC_TABLE, table.name, self._sync_tables)
            self._sync_tables[table.name] = table
        return table

    # ─── Lookup ───────────────────────────────────────────────────

    def get_formula(self, name: str) -> Formula | None:
        return self._formulas.get(name)

    def get_sync_table(self, name: str) -> SyncTable | None:
        return self._sync_tables.get(name)

    # ─── Listing ──────────────────────────────────────────────────

    def list_formulas(self) -> list[dict]:
        """{name, description, parameters} per formula, insertion order."""
        return [f.describe() for f in list(self._formulas.values())]

    def list_sync_tables(self) -> list[dict]:
        """{name, description, identityName} per sync table, insertion order."""
        return [t.describe() for t in list(self._sync_tables.values())]

    def formula_names(self) -> list[str]:
        return list(self._formulas)

    def sync_table_names(self) -> list[str]:
        return list(self._sync_tables)

    def counts(self) -> dict[str, int]:
        return {
            "formulas": len(self._formulas),
            "sync_tables": len(self._sync_tables),
        }

    @staticmethod
    def _warn_if_shadowing(kind: EntityKind, name: str, entries: dict) -> None:
        if name in entries:
            logger.warning(
                "%s %r registered twice; the later registration replaces the earlier one",
                kind.value, name, extra={"entity_name": name},
            )
