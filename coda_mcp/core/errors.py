"""Error Hierarchy — typed, categorized exceptions for every command failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - to_response() produces the wire envelope {"error": message} and nothing else
    - ErrorContext feeds logs only; it never reaches the caller
    - No stack traces or exception reprs in user-facing messages

Design Decisions:
    - Single hierarchy with CodaMcpError base: FastAPI global handler and the
      socket adapter both catch one type (ADR: uniform error shape)
    - Command failures keep http_status 500: existing HTTP callers key on the
      envelope, not the status; only transport-level payload problems are 400
      (ADR: wire compatibility)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    UNSUPPORTED = "unsupported"
    ENTITY = "entity"
    EXTERNAL_API = "external_api"
    TRANSPORT = "transport"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Context for error observability (logs only)."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    action: str | None = None
    entity_name: str | None = None
    invocation_id: str | None = None
    debug_info: dict[str, Any] | None = None


class CodaMcpError(Exception):
    """Base exception for all command and transport errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to the wire error envelope."""
        return {"error": self.message}

    def log_extra(self) -> dict:
        """Structured fields for logger.*(extra=...)."""
        return {
            "error_code": self.code,
            "action": self.context.action,
            "entity_name": self.context.entity_name,
            "invocation_id": self.context.invocation_id,
        }


# ─── Transport-level Errors ─────────────────────────────────────

class MalformedRequestError(CodaMcpError):
    """Payload is not valid JSON, not an object, or has the wrong content type."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "MALFORMED_REQUEST", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )


class TransportError(CodaMcpError):
    """Socket-level failure unrelated to command content."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "TRANSPORT_FAILURE", ErrorCategory.TRANSPORT,
            ErrorSeverity.ERROR, context, 500,
        )


# ─── Command Errors ─────────────────────────────────────────────

class MissingFieldError(CodaMcpError):
    """Required `data` field absent from the command."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "MISSING_FIELD", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context,
        )
        self.field = field


class InvalidFieldError(CodaMcpError):
    """A `data` field is present with the wrong envelope shape."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_FIELD", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context,
        )
        self.field = field


class UnknownEntityError(CodaMcpError):
    """Formula or sync table name absent from the catalog."""
    def __init__(
        self, entity_type: str, entity_name: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f'{entity_type} "{entity_name}" not found',
            "UNKNOWN_ENTITY", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context,
        )
        self.entity_type = entity_type
        self.entity_name = entity_name


class UnsupportedActionError(CodaMcpError):
    """Action outside the fixed command set."""
    def __init__(self, action: Any, context: ErrorContext | None = None):
        super().__init__(
            f"Unsupported MCP command: {action}",
            "UNSUPPORTED_ACTION", ErrorCategory.UNSUPPORTED,
            ErrorSeverity.WARNING, context,
        )
        self.action = action


class EntityExecutionError(CodaMcpError):
    """The invoked formula or sync table raised."""
    def __init__(
        self, message: str, entity_name: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "ENTITY_EXECUTION_FAILED", ErrorCategory.ENTITY,
            ErrorSeverity.ERROR, context,
        )
        self.entity_name = entity_name


class OutboundFetchError(CodaMcpError):
    """An entry's outbound fetch failed at the network layer."""
    def __init__(self, message: str, url: str, context: ErrorContext | None = None):
        super().__init__(
            message, "OUTBOUND_FETCH_FAILED", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.ERROR, context, 502,
        )
        self.url = url
