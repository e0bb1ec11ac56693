"""MCP over HTTP — POST /mcp, one command envelope in, one response envelope out.

Invariants:
    - Content type must be application/json before the body is even read
    - Malformed payloads answer 400; command failures answer 500 with {"error": ...}
    - Route holds no business logic — CommandDispatch does the work

Design Decisions:
    - dispatch.execute() (raising) over respond(): the global CodaMcpError
      handler picks the status code, so errors surface the same way as every
      other route failure
"""

import logging

from fastapi import APIRouter, Depends, Request

from coda_mcp.api.dependencies import get_dispatch
from coda_mcp.api.routes.command_codec import decode_command, is_json_content_type
from coda_mcp.core.errors import MalformedRequestError
from coda_mcp.services.command_dispatch import CommandDispatch

logger = logging.getLogger(__name__)
router = APIRouter(tags=["mcp"])


@router.post("/mcp")
async def post_command(
    request: Request, dispatch: CommandDispatch = Depends(get_dispatch),
):
    """Run one MCP command."""
    if not is_json_content_type(request.headers.get("content-type")):
        raise MalformedRequestError("Expected JSON content type")
    command = decode_command(await request.body())
    return await dispatch.execute(command)
