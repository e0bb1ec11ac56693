"""Service test fixtures — FastAPI app wired to a test dispatch, HTTP and socket clients.

Invariants:
    - Every test gets a fresh catalog and a FakeFetcher (no network)
    - app.state.dispatch is set directly: httpx ASGITransport does not run lifespan
    - Original app.state is restored after each test

Design Decisions:
    - Patch app.state instead of building a second app: routes and error
      handlers under test are exactly the production ones
"""

import pytest
from httpx import ASGITransport, AsyncClient
from starlette.testclient import TestClient

from coda_mcp.main import app
from coda_mcp.services.command_dispatch import CommandDispatch


@pytest.fixture
def wired_app(dispatch):
    """The production app with a test CommandDispatch installed."""
    missing = object()
    original = getattr(app.state, "dispatch", missing)
    app.state.dispatch = dispatch
    yield app
    if original is missing:
        del app.state.dispatch
    else:
        app.state.dispatch = original


@pytest.fixture
def install_catalog(wired_app, fake_fetcher):
    """Swap in a custom catalog: install_catalog(catalog) -> CommandDispatch."""

    def _install(catalog):
        wired_app.state.dispatch = CommandDispatch(catalog, fake_fetcher)
        return wired_app.state.dispatch

    return _install


@pytest.fixture
async def client(wired_app):
    async with AsyncClient(
        transport=ASGITransport(app=wired_app), base_url="http://test",
    ) as c:
        yield c


@pytest.fixture
def socket_client(wired_app):
    """Starlette TestClient (no lifespan) for /ws."""
    return TestClient(wired_app)
