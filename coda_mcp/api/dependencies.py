"""Route dependencies shared by the HTTP and WebSocket adapters."""

from fastapi.requests import HTTPConnection

from coda_mcp.services.command_dispatch import CommandDispatch


def get_dispatch(connection: HTTPConnection) -> CommandDispatch:
    """The CommandDispatch built in lifespan (works for requests and sockets)."""
    return connection.app.state.dispatch
