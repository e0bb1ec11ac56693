"""Pack Registry — assembles the startup Catalog from the define_* modules.

Invariants:
    - build_default_catalog() returns a new Catalog on every call (no shared instance)
    - Builtin formulas register first, then examples — listing order is stable
    - include_examples=False yields only the builtin formulas and no sync tables

Design Decisions:
    - Explicit imports from each define_*.py: no auto-discovery
    - Registration happens before the transports start accepting traffic
"""

import logging

from coda_mcp.core.catalog import Catalog
from coda_mcp.services.define_formulas import FORMULAS_BUILTIN, FORMULAS_EXAMPLES
from coda_mcp.services.define_sync_tables import SYNC_TABLES_EXAMPLES

logger = logging.getLogger(__name__)


def build_default_catalog(include_examples: bool = True) -> Catalog:
    """Catalog with the builtin formulas, plus the example packs if requested."""
    catalog = Catalog()
    for formula in FORMULAS_BUILTIN:
        catalog.register_formula(formula)
    if not include_examples:
        return catalog

    for formula in FORMULAS_EXAMPLES:
        catalog.register_formula(formula)
        logger.info("Registered formula %s", formula.name, extra={"entity_name": formula.name})
    for table in SYNC_TABLES_EXAMPLES:
        catalog.register_sync_table(table)
        logger.info("Registered sync table %s", table.name, extra={"entity_name": table.name})
    return catalog
