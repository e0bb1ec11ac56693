"""MCP over WebSocket — /ws, many command/response cycles per connection.

Invariants:
    - One text frame in → one text frame out, in order: the next frame is read
      only after the previous response was sent
    - Every frame answers with an envelope; bad frames never close the connection
    - Optional welcome text frame on connect (WS_WELCOME_MESSAGE, empty disables)
    - Transport failures are logged and close the connection; the process keeps serving

Design Decisions:
    - dispatch.respond() (non-raising): a socket has no status code, so errors
      travel as {"error": ...} frames
    - Serial loop over per-frame tasks: callers can rely on response order
"""

import logging
import uuid

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from starlette.websockets import WebSocketState

from coda_mcp.api.dependencies import get_dispatch
from coda_mcp.api.error_handlers import SERVER_ERROR
from coda_mcp.api.routes.command_codec import decode_command, encode_response
from coda_mcp.config import get_settings
from coda_mcp.core.errors import ErrorContext, MalformedRequestError, TransportError
from coda_mcp.services.command_dispatch import CommandDispatch

logger = logging.getLogger(__name__)
router = APIRouter(tags=["mcp"])

_INTERNAL_ERROR_CLOSE = 1011


@router.websocket("/ws")
async def command_socket(
    websocket: WebSocket, dispatch: CommandDispatch = Depends(get_dispatch),
):
    """Serve MCP commands until either side closes."""
    connection_id = uuid.uuid4().hex[:12]
    log_extra = {"connection_id": connection_id}
    await websocket.accept()
    logger.info("WebSocket connection established", extra=log_extra)

    welcome = get_settings().ws_welcome_message
    try:
        if welcome:
            await websocket.send_text(welcome)
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
            frame = message.get("text")
            if frame is None:
                frame = message.get("bytes") or b""
            await websocket.send_text(await _answer_frame(dispatch, frame, connection_id))
    except WebSocketDisconnect:
        pass
    except Exception as e:
        failure = TransportError(
            f"WebSocket transport failed: {e}", ErrorContext(debug_info=log_extra),
        )
        logger.error(
            failure.message, exc_info=True,
            extra={**log_extra, "error_code": failure.code},
        )
        await _close(websocket, connection_id)
        return
    logger.info("WebSocket connection closed", extra=log_extra)


async def _answer_frame(
    dispatch: CommandDispatch, frame: str | bytes, connection_id: str,
) -> str:
    """Encoded reply for one frame. Failures here stay scoped to this frame."""
    try:
        command = decode_command(frame)
    except MalformedRequestError as e:
        logger.warning(
            f"Malformed WebSocket frame: {e.message}",
            extra={"connection_id": connection_id, "error_code": e.code},
        )
        return encode_response(e.to_response())
    try:
        # Encoding sits inside the guard: an unserializable entry result is
        # this command's failure, not the connection's
        return encode_response(await dispatch.respond(command))
    except Exception as e:
        logger.error(
            f"Unhandled exception while answering frame: {e}",
            exc_info=True, extra={"connection_id": connection_id},
        )
        return encode_response({"error": SERVER_ERROR})


async def _close(websocket: WebSocket, connection_id: str) -> None:
    if websocket.application_state == WebSocketState.DISCONNECTED:
        return
    if websocket.client_state == WebSocketState.DISCONNECTED:
        return
    try:
        await websocket.close(code=_INTERNAL_ERROR_CLOSE)
    except RuntimeError as e:
        logger.debug(
            f"WebSocket already closed: {e}", extra={"connection_id": connection_id},
        )
