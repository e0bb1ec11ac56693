"""MCP Client — drives the app in-process through httpx ASGITransport.

Tests cover:
    - Convenience calls return unwrapped results
    - iter_sync_table echoes tokens and stops on continuation=None
    - Error envelopes and max_pages raise McpClientError
"""

import pytest
from httpx import ASGITransport

from coda_mcp.client import McpClient, McpClientError
from coda_mcp.core.catalog import Catalog, SyncFormula, SyncTable


@pytest.fixture
async def mcp(wired_app):
    async with McpClient("http://test", transport=ASGITransport(app=wired_app)) as c:
        yield c


async def test_execute_formula(mcp):
    assert await mcp.execute_formula("Hello", "Coda MCP") == "Hello, Coda MCP!"


async def test_list_calls(mcp):
    names = [f["name"] for f in await mcp.list_formulas()]
    assert names == ["Hello", "CurrentTime", "GetWeather", "FormatCurrency"]
    assert [t["name"] for t in await mcp.list_sync_tables()] == ["Users", "Products"]


async def test_send_returns_error_envelope_as_data(mcp):
    assert await mcp.send({"action": "bogusAction"}) == {
        "error": "Unsupported MCP command: bogusAction",
    }


async def test_execute_unknown_formula_raises(mcp):
    with pytest.raises(McpClientError, match='Formula "Nope" not found'):
        await mcp.execute_formula("Nope")


async def test_users_drive_to_exhaustion(mcp):
    pages = [page async for page in mcp.iter_sync_table("Users")]
    assert len(pages) == 5
    ids = [r["id"] for page in pages for r in page]
    assert ids == [f"user-{i}" for i in range(1, 51)]
    assert len(set(ids)) == 50


async def test_fetch_all_products(mcp):
    records = await mcp.fetch_all("Products")
    assert len(records) == 30
    assert records[-1]["id"] == "product-30"


async def test_max_pages_guard(mcp, install_catalog):
    async def endless(args, context):
        context.continuation = "again"
        return [{"id": "x"}]

    catalog = Catalog()
    catalog.register_sync_table(SyncTable(
        name="Endless", description="never exhausts", identity_name="id",
        formula=SyncFormula(execute=endless),
    ))
    install_catalog(catalog)
    with pytest.raises(McpClientError, match="still had pages after 3"):
        pages = []
        async for page in mcp.iter_sync_table("Endless", max_pages=3):
            pages.append(page)
    assert len(pages) == 3


async def test_unknown_sync_table_raises(mcp):
    with pytest.raises(McpClientError, match='Sync table "Nope" not found'):
        async for _ in mcp.iter_sync_table("Nope"):
            pass


async def test_non_string_tokens_are_echoed_verbatim(mcp, install_catalog):
    seen = []

    async def cursor_pages(args, context):
        seen.append(context.continuation)
        cursor = context.continuation or {"offset": 0}
        offset = cursor["offset"]
        context.continuation = {"offset": offset + 2} if offset < 4 else None
        return [{"id": f"row-{offset}"}, {"id": f"row-{offset + 1}"}]

    catalog = Catalog()
    catalog.register_sync_table(SyncTable(
        name="Cursor", description="object-valued tokens", identity_name="id",
        formula=SyncFormula(execute=cursor_pages),
    ))
    install_catalog(catalog)
    records = await mcp.fetch_all("Cursor")
    assert [r["id"] for r in records] == [f"row-{i}" for i in range(6)]
    assert seen == [None, {"offset": 2}, {"offset": 4}]
