"""Domain Types — closed enums and value aliases shared across the codebase.

Invariants:
    - McpAction is the closed command set — any other action string is rejected
      before routing, never matched ad hoc
    - All valid states encoded as Enums — no raw string matching
    - JsonValue is what formulas receive and return; nothing checks it against
      the declared ParameterType

Design Decisions:
    - str Enums: serialize to JSON without custom encoders (ADR: wire envelope is JSON)
    - NewType for names/tokens: zero runtime cost, full type-checker support
"""

from enum import Enum
from typing import Any, NewType, Union


# ─── Identity Types ──────────────────────────────────────────────

EntityName = NewType("EntityName", str)
ContinuationToken = NewType("ContinuationToken", str)
InvocationId = NewType("InvocationId", str)


# ─── Value Types ─────────────────────────────────────────────────

JsonValue = Union[
    None, bool, int, float, str, list[Any], dict[str, Any],
]
JsonRecord = dict[str, Any]


# ─── Enums ───────────────────────────────────────────────────────

class McpAction(str, Enum):
    """The four command actions. Adding one requires a dispatch handler."""
    LIST_FORMULAS = "listFormulas"
    LIST_SYNC_TABLES = "listSyncTables"
    EXECUTE_FORMULA = "executeFormula"
    SYNC_TABLE = "syncTable"

    @classmethod
    def parse(cls, value: object) -> "McpAction | None":
        """Return the matching action, or None for anything outside the set."""
        if not isinstance(value, str):
            return None
        try:
            return cls(value)
        except ValueError:
            return None


class ParameterType(str, Enum):
    """Declarative parameter type tags (informational, never enforced)."""
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    ARRAY = "array"
    OBJECT = "object"


class EntityKind(str, Enum):
    """Catalog collections — used in log lines and error messages."""
    FORMULA = "Formula"
    SYNC_TABLE = "Sync table"
