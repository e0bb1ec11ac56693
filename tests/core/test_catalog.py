"""Catalog tests — name uniqueness, replacement, and listing round-trips.

Tests cover:
    - Lookup returns the registered entry, None for unknown names
    - Re-registering a name leaves exactly one entry: the latest
    - Replacement keeps the original listing position
    - listFormulas/listSyncTables mirror registrations exactly, both directions
    - Duplicate registration logs a warning
"""

import logging

import pytest

from coda_mcp.core.catalog import (
    Catalog, Formula, ParameterSpec, SyncFormula, SyncTable,
)
from coda_mcp.core.domain_types import ParameterType


async def _noop(args, context):
    return None


def _table(name: str, description: str = "table", identity: str = "id") -> SyncTable:
    return SyncTable(
        name=name, description=description, identity_name=identity,
        formula=SyncFormula(execute=_noop),
    )


def test_get_formula_returns_registered_entry(empty_catalog, make_formula):
    formula = make_formula("Echo")
    empty_catalog.register_formula(formula)
    assert empty_catalog.get_formula("Echo") is formula


def test_get_unknown_names_return_none(empty_catalog):
    assert empty_catalog.get_formula("Missing") is None
    assert empty_catalog.get_sync_table("Missing") is None


def test_register_returns_the_entry(empty_catalog, make_formula):
    formula = make_formula("Echo")
    table = _table("Rows")
    assert empty_catalog.register_formula(formula) is formula
    assert empty_catalog.register_sync_table(table) is table


@pytest.mark.parametrize("first_desc,second_desc", [
    ("first", "second"),
    ("same", "same"),
    ("", "non-empty"),
])
def test_duplicate_formula_name_keeps_latest_only(
    empty_catalog, make_formula, first_desc, second_desc,
):
    first = make_formula("Dup", description=first_desc or "x")
    second = make_formula("Dup", description=second_desc)
    empty_catalog.register_formula(first)
    empty_catalog.register_formula(second)

    assert empty_catalog.get_formula("Dup") is second
    listed = [f for f in empty_catalog.list_formulas() if f["name"] == "Dup"]
    assert len(listed) == 1
    assert listed[0]["description"] == second.description


def test_duplicate_sync_table_name_keeps_latest_only(empty_catalog):
    empty_catalog.register_sync_table(_table("Rows", "old", "id"))
    newer = _table("Rows", "new", "uuid")
    empty_catalog.register_sync_table(newer)

    assert empty_catalog.get_sync_table("Rows") is newer
    assert empty_catalog.list_sync_tables() == [
        {"name": "Rows", "description": "new", "identityName": "uuid"},
    ]


def test_replacement_keeps_listing_position(empty_catalog, make_formula):
    for name in ("A", "B", "C"):
        empty_catalog.register_formula(make_formula(name))
    empty_catalog.register_formula(make_formula("A", description="replaced"))

    assert empty_catalog.formula_names() == ["A", "B", "C"]
    assert empty_catalog.list_formulas()[0]["description"] == "replaced"


def test_formula_and_sync_table_namespaces_are_separate(empty_catalog, make_formula):
    empty_catalog.register_formula(make_formula("Users"))
    empty_catalog.register_sync_table(_table("Users"))
    assert empty_catalog.counts() == {"formulas": 1, "sync_tables": 1}


def test_list_formulas_round_trips_every_registration(empty_catalog, make_formula):
    registered = [
        make_formula("One", parameters=[
            ParameterSpec("x", "first arg", ParameterType.NUMBER, True),
        ]),
        make_formula("Two", parameters=[
            ParameterSpec("a", "A", ParameterType.STRING, False),
            ParameterSpec("b", "B", "custom-tag"),
        ]),
        make_formula("Three"),
    ]
    for f in registered:
        empty_catalog.register_formula(f)

    listed = {f["name"]: f for f in empty_catalog.list_formulas()}
    assert set(listed) == {f.name for f in registered}
    for f in registered:
        assert listed[f.name]["description"] == f.description
        assert listed[f.name]["parameters"] == [p.to_dict() for p in f.parameters]


def test_listing_is_insertion_ordered(empty_catalog, make_formula):
    names = ["Zeta", "Alpha", "Mid"]
    for name in names:
        empty_catalog.register_formula(make_formula(name))
    assert [f["name"] for f in empty_catalog.list_formulas()] == names
    assert [f["name"] for f in empty_catalog.list_formulas()] == names


def test_parameter_spec_serializes_in_declared_key_order():
    spec = ParameterSpec(
        name="name", type=ParameterType.STRING,
        description="The name to greet.", required=True,
    )
    assert list(spec.to_dict().items()) == [
        ("name", "name"),
        ("type", "string"),
        ("description", "The name to greet."),
        ("required", True),
    ]


def test_parameter_spec_omits_unset_required():
    spec = ParameterSpec(name="n", description="d")
    assert "required" not in spec.to_dict()


def test_entries_are_frozen(make_formula):
    formula = make_formula("Frozen")
    with pytest.raises(AttributeError):
        formula.name = "Other"


def test_duplicate_registration_logs_warning(empty_catalog, make_formula, caplog):
    empty_catalog.register_formula(make_formula("Dup"))
    with caplog.at_level(logging.WARNING, logger="coda_mcp.core.catalog"):
        empty_catalog.register_formula(make_formula("Dup"))
    assert any("registered twice" in r.getMessage() for r in caplog.records)


def test_first_registration_does_not_warn(empty_catalog, make_formula, caplog):
    with caplog.at_level(logging.WARNING, logger="coda_mcp.core.catalog"):
        empty_catalog.register_formula(make_formula("Fresh"))
    assert not caplog.records


def test_catalogs_are_independent(make_formula):
    a, b = Catalog(), Catalog()
    a.register_formula(make_formula("OnlyInA"))
    assert b.get_formula("OnlyInA") is None


def test_formula_describe_shape():
    async def body(args, context):
        return None

    formula = Formula(name="F", description="desc", execute=body)
    assert formula.describe() == {"name": "F", "description": "desc", "parameters": []}
