"""Command Schemas — Pydantic models for the wire envelopes at both transport boundaries.

Invariants:
    - McpCommand.action is kept as the caller's raw value: unknown actions are a
      dispatch error (with the action in the message), not a validation error
    - McpCommand.data must be an object when present; its fields are read by
      the dispatcher, not here
    - Response models mirror the envelopes the dispatcher returns

Design Decisions:
    - Loose `data: dict` over per-action models: argument values are opaque JSON
      and per-action field checks produce the protocol's own error messages
    - extra="ignore": unknown top-level keys are tolerated
"""

from typing import Any

from pydantic import BaseModel, ConfigDict


class McpCommand(BaseModel):
    """Decoded request envelope: {action, data?}."""
    model_config = ConfigDict(extra="ignore")

    action: Any = None
    data: dict[str, Any] | None = None


class ErrorEnvelope(BaseModel):
    """Failure response."""
    error: str


class SyncPageEnvelope(BaseModel):
    """Sync table page response."""
    result: Any
    continuation: Any = None  # opaque: echoed back verbatim, never parsed
