"""Coda MCP Server — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Catalog and CommandDispatch built once in lifespan, before traffic is accepted
    - Global error handlers map every failure to an {"error": ...} envelope
    - Only POST /mcp and /ws answer; generated docs/OpenAPI routes are disabled

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Shared httpx client closed on shutdown via OutboundFetcher.aclose()
    - redirect_slashes off: /mcp/ is "any other path", not a redirect to /mcp
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from coda_mcp.api.error_handlers import register_error_handlers
from coda_mcp.api.routes import mcp_http, mcp_socket
from coda_mcp.config import get_settings
from coda_mcp.infrastructure.observability import setup_logging
from coda_mcp.infrastructure.outbound_fetch import OutboundFetcher
from coda_mcp.services.command_dispatch import CommandDispatch
from coda_mcp.services.pack_registry import build_default_catalog

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    catalog = build_default_catalog(include_examples=settings.load_example_packs)
    fetcher = OutboundFetcher(timeout_seconds=settings.fetch_timeout_seconds)
    app.state.catalog = catalog
    app.state.fetcher = fetcher
    app.state.dispatch = CommandDispatch(catalog, fetcher)
    counts = catalog.counts()
    logger.info(
        "MCP Framework server is running on port %s (%s formulas, %s sync tables)",
        settings.port, counts["formulas"], counts["sync_tables"],
    )
    try:
        yield
    finally:
        await fetcher.aclose()
        logger.info("MCP Framework server shutting down")


app = FastAPI(
    title="Coda MCP Server",
    version="1.0.0",
    lifespan=lifespan,
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
    redirect_slashes=False,
)

register_error_handlers(app)

# Routes — explicit registration
app.include_router(mcp_http.router)
app.include_router(mcp_socket.router)
