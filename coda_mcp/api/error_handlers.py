"""Error Handlers — global exception handlers mapping failures to {"error": ...} envelopes.

Invariants:
    - CodaMcpError → its http_status + to_response()
    - RequestValidationError → 400 envelope
    - 404/405 from routing → 404 {"error": "Endpoint not found"}
    - Exception (catch-all) → 500 {"error": "Server error"}, never leaks internal details

Design Decisions:
    - Four-layer handler: domain (CodaMcpError), validation (Pydantic),
      routing (HTTPException), catch-all (Exception)
    - Extracted from main.py to keep the app module import fan-out small
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from coda_mcp.core.errors import CodaMcpError

logger = logging.getLogger(__name__)

ENDPOINT_NOT_FOUND = "Endpoint not found"
SERVER_ERROR = "Server error"


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_coda_error_handler(app)
    _register_validation_error_handler(app)
    _register_http_error_handler(app)
    _register_generic_error_handler(app)


def _register_coda_error_handler(app: FastAPI) -> None:

    @app.exception_handler(CodaMcpError)
    async def coda_error_handler(request: Request, exc: CodaMcpError):
        """Handle all command and transport errors."""
        logger.warning(
            f"CodaMcpError: {exc.message}",
            extra={**exc.log_extra(), "path": request.url.path},
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_http_error_handler(app: FastAPI) -> None:

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        """Unknown paths and wrong methods both answer 404."""
        if exc.status_code in (
            status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED,
        ):
            return JSONResponse(
                status_code=status.HTTP_404_NOT_FOUND,
                content={"error": ENDPOINT_NOT_FOUND},
            )
        return JSONResponse(
            status_code=exc.status_code, content={"error": str(exc.detail)},
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": SERVER_ERROR},
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    """Single-string envelope: first failing field and its message."""
    errors = exc.errors()
    if not errors:
        return {"error": "Invalid request data"}
    first = errors[0]
    field = ".".join(str(loc) for loc in first["loc"])
    return {"error": f"Invalid request data: {field}: {first['msg']}"}
