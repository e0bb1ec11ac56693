"""Sync Table Handlers — page producers for the bundled sync tables.

Invariants:
    - One page per call; page number decoded from context.continuation
    - context.continuation is always reassigned: next page token, or None on the last page
    - Record ids are stable across calls for the same page (identity column "id")
"""

import random
from datetime import datetime, timedelta, timezone
from typing import Any

from coda_mcp.core.continuation import next_page_token, parse_page_token
from coda_mcp.core.domain_types import JsonRecord
from coda_mcp.core.execution_context import ExecutionContext

PAGE_SIZE = 10
USERS_LAST_PAGE = 5
PRODUCTS_LAST_PAGE = 3
PRODUCT_CATEGORIES = ("Electronics", "Clothing", "Home", "Books", "Toys")


def _page_ids(page: int) -> range:
    first = (page - 1) * PAGE_SIZE + 1
    return range(first, first + PAGE_SIZE)


def _iso_utc(moment: datetime) -> str:
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


async def sync_users(args: list[Any], context: ExecutionContext) -> list[JsonRecord]:
    page = parse_page_token(context.continuation)
    now = datetime.now(timezone.utc)
    users = [
        {
            "id": f"user-{user_id}",
            "name": f"User {user_id}",
            "email": f"user{user_id}@example.com",
            "role": "admin" if offset % 3 == 0 else "user",
            "createdAt": _iso_utc(now - timedelta(days=user_id)),
        }
        for offset, user_id in enumerate(_page_ids(page))
    ]
    context.continuation = next_page_token(page, USERS_LAST_PAGE)
    return users


async def sync_products(args: list[Any], context: ExecutionContext) -> list[JsonRecord]:
    page = parse_page_token(context.continuation)
    products = [
        {
            "id": f"product-{product_id}",
            "name": f"Product {product_id}",
            "price": round(20 + random.random() * 100, 2),
            "category": PRODUCT_CATEGORIES[product_id % len(PRODUCT_CATEGORIES)],
            "inStock": random.random() > 0.2,
        }
        for product_id in _page_ids(page)
    ]
    context.continuation = next_page_token(page, PRODUCTS_LAST_PAGE)
    return products
