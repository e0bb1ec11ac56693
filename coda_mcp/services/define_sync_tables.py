"""Define Sync Tables — declarations of the bundled paginated tables."""

from coda_mcp.core.catalog import SyncFormula, SyncTable
from coda_mcp.services import handle_sync_tables

USERS = SyncTable(
    name="Users",
    description="Fetches a list of users",
    identity_name="id",
    schema={
        "properties": {
            "id": {"type": "string"},
            "name": {"type": "string"},
            "email": {"type": "string"},
            "role": {"type": "string"},
            "createdAt": {"type": "string", "format": "date-time"},
        },
        "required": ["id", "name", "email"],
    },
    formula=SyncFormula(execute=handle_sync_tables.sync_users),
)

PRODUCTS = SyncTable(
    name="Products",
    description="Fetches a list of products",
    identity_name="id",
    schema={
        "properties": {
            "id": {"type": "string"},
            "name": {"type": "string"},
            "price": {"type": "number"},
            "category": {"type": "string"},
            "inStock": {"type": "boolean"},
        },
        "required": ["id", "name", "price"],
    },
    formula=SyncFormula(execute=handle_sync_tables.sync_products),
)

# Users, then Products — listing order follows registration order
SYNC_TABLES_EXAMPLES = [USERS, PRODUCTS]
