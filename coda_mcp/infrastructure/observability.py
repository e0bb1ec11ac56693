"""Structured Logging — one JSON object per line, correlated by invocation and connection.

Invariants:
    - Every line carries timestamp, level, logger and message
    - Correlation fields (action, entity_name, invocation_id, connection_id, ...)
      appear only when the call site passed them via extra=
    - httpx/httpcore request chatter stays at WARNING: OutboundFetcher already
      logs each outbound call with its invocation_id

Design Decisions:
    - Plain logging.Formatter subclass, no structlog: the field set is small and fixed
    - setup_logging runs from lifespan; calling it again swaps our handler in place
"""

import json
import logging
from datetime import datetime, timezone

_CORRELATION_FIELDS = (
    "action", "entity_name", "invocation_id", "error_code",
    "connection_id", "path", "url", "method", "status_code",
)

_HANDLER_NAME = "coda_mcp"
_QUIET_LOGGERS = ("httpx", "httpcore")
_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"


class JSONFormatter(logging.Formatter):
    """Render a LogRecord as a single-line JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(_correlation(record))
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def _correlation(record: logging.LogRecord) -> dict:
    fields = {}
    for key in _CORRELATION_FIELDS:
        value = getattr(record, key, None)
        if value is not None:
            fields[key] = value
    return fields


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Install the root handler. fmt: "json" or anything else for plain text."""
    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        JSONFormatter() if fmt == "json" else logging.Formatter(_TEXT_FORMAT)
    )
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
