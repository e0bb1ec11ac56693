"""Command Codec — raw transport payload → McpCommand, and response → text frame.

Invariants:
    - decode_command raises MalformedRequestError only; it never reaches the catalog
    - Non-UTF-8 bytes, invalid JSON, non-object payloads and non-object `data`
      are all MalformedRequestError
    - encode_response output is plain JSON text (one frame per response)

Design Decisions:
    - Shared by both adapters so HTTP bodies and socket frames decode identically
    - A non-object `data` is rejected here for every action, listFormulas and
      listSyncTables included: the envelope shape is checked once, before any
      action is looked at, so a malformed command never reaches dispatch
    - jsonable_encoder before json.dumps: entry results go through the same
      conversion FastAPI applies to HTTP responses
"""

import json

from fastapi.encoders import jsonable_encoder
from pydantic import ValidationError

from coda_mcp.core.errors import MalformedRequestError
from coda_mcp.schemas.command import McpCommand

JSON_MEDIA_TYPE = "application/json"


def is_json_content_type(header: str | None) -> bool:
    """True for application/json, with or without parameters such as charset."""
    if not header:
        return False
    return header.split(";", 1)[0].strip().lower() == JSON_MEDIA_TYPE


def decode_command(raw: str | bytes) -> McpCommand:
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedRequestError("Payload is not valid UTF-8") from e
    try:
        payload = json.loads(raw)
    except ValueError as e:
        raise MalformedRequestError("Invalid JSON payload") from e
    if not isinstance(payload, dict):
        raise MalformedRequestError("Command must be a JSON object")
    try:
        return McpCommand.model_validate(payload)
    except ValidationError as e:
        raise MalformedRequestError("Command data must be a JSON object") from e


def encode_response(envelope: dict) -> str:
    return json.dumps(jsonable_encoder(envelope), ensure_ascii=False)
