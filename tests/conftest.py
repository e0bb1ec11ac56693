"""Root conftest — shared test configuration and fakes."""

import os

import httpx
import pytest

# Ensure tests never reach a real weather API with a real key
os.environ.setdefault("WEATHER_API_KEY", "test-weather-key")
os.environ.setdefault("LOG_FORMAT", "text")

from coda_mcp.core.catalog import Catalog, Formula  # noqa: E402
from coda_mcp.services.command_dispatch import CommandDispatch  # noqa: E402
from coda_mcp.services.pack_registry import build_default_catalog  # noqa: E402


class FakeFetcher:
    """Stands in for OutboundFetcher: records calls, answers with canned responses.

    responses: url -> httpx.Response | Exception (raised) ; default 200 {}.
    """

    def __init__(self):
        self.calls: list[dict] = []
        self.responses: dict[str, object] = {}

    def bind(self, invocation_id: str):
        async def fetch(url: str, *, method: str = "GET", **kwargs):
            self.calls.append({
                "invocation_id": invocation_id, "url": url,
                "method": method, "kwargs": kwargs,
            })
            answer = self.responses.get(url)
            if isinstance(answer, Exception):
                raise answer
            if answer is None:
                return httpx.Response(200, json={})
            return answer

        return fetch


@pytest.fixture
def fake_fetcher():
    return FakeFetcher()


@pytest.fixture
def default_catalog():
    return build_default_catalog()


@pytest.fixture
def dispatch(default_catalog, fake_fetcher):
    return CommandDispatch(default_catalog, fake_fetcher)


def _make_formula(name: str, execute=None, description: str = "", parameters=()):
    """Formula with a trivial body unless one is given."""

    async def _echo(args, context):
        return {"args": args, "timezone": context.timezone}

    return Formula(
        name=name,
        description=description or f"{name} formula",
        parameters=tuple(parameters),
        execute=execute or _echo,
    )


@pytest.fixture
def empty_catalog():
    return Catalog()


@pytest.fixture
def hello_only_catalog():
    from coda_mcp.services.define_formulas import HELLO
    catalog = Catalog()
    catalog.register_formula(HELLO)
    return catalog


@pytest.fixture
def make_formula():
    return _make_formula
