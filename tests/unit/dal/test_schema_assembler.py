import pytest

from common.errors import CatalogQueryError
from dal.mssql.schema_introspector import MssqlSchemaIntrospector
from dal.schema_assembler import SchemaAssembler
from tests._support.catalog_fakes import FakeCatalogConn

TABLES = {
    "Customers": [("Id", "int"), ("Email", "nvarchar")],
    "Orders": [("Id", "int"), ("CustomerId", "int")],
    "Products": [("Sku", "varchar")],
}
FKS = [("Orders", "CustomerId", "Customers", "Id")]


@pytest.mark.asyncio
@pytest.mark.parametrize("batch_columns", [False, True])
async def test_assemble_builds_tables_and_references(batch_columns):
    """Both column strategies produce the same schema in catalog order."""
    conn = FakeCatalogConn(tables=TABLES, fks=FKS)
    assembler = SchemaAssembler(MssqlSchemaIntrospector(conn), batch_columns=batch_columns)

    schema = await assembler.assemble()

    assert schema.table_names() == ["Customers", "Orders", "Products"]
    assert [(c.name, c.data_type) for c in schema.tables[0].columns] == [
        ("Id", "int"),
        ("Email", "nvarchar"),
    ]
    assert len(schema.references) == 1
    assert schema.references[0].foreign_table_name == "Customers"


@pytest.mark.asyncio
async def test_assemble_queries_columns_per_table_then_foreign_keys_once():
    """The default strategy issues one column query per table, then one FK query."""
    conn = FakeCatalogConn(tables=TABLES, fks=FKS)

    await SchemaAssembler(MssqlSchemaIntrospector(conn)).assemble()

    assert conn.column_lookups() == ["Customers", "Orders", "Products"]
    assert sum("sys.foreign_keys" in sql for sql, _ in conn.calls) == 1
    assert "sys.foreign_keys" in conn.calls[-1][0]


@pytest.mark.asyncio
async def test_assemble_keeps_tables_without_columns():
    """A table with no columns still yields an (empty) table definition."""
    conn = FakeCatalogConn(tables={"Empty": []})

    schema = await SchemaAssembler(MssqlSchemaIntrospector(conn)).assemble()

    assert schema.table_names() == ["Empty"]
    assert schema.tables[0].columns == []


@pytest.mark.asyncio
async def test_failure_on_second_table_stops_before_third():
    """A column fetch failure aborts immediately with the original error."""
    error = CatalogQueryError("connection lost")
    conn = FakeCatalogConn(tables=TABLES, fks=FKS, fail_on_table="Orders", error=error)

    with pytest.raises(CatalogQueryError) as exc_info:
        await SchemaAssembler(MssqlSchemaIntrospector(conn)).assemble()

    assert exc_info.value is error
    assert conn.column_lookups() == ["Customers", "Orders"]
    assert not any("sys.foreign_keys" in sql for sql, _ in conn.calls)


@pytest.mark.asyncio
async def test_duplicate_columns_become_catalog_error():
    """Conflicting catalog rows surface as CatalogQueryError, not a validation error."""
    conn = FakeCatalogConn(tables={"Users": [("Id", "int"), ("Id", "int")]})

    with pytest.raises(CatalogQueryError) as exc_info:
        await SchemaAssembler(MssqlSchemaIntrospector(conn)).assemble()

    assert exc_info.value.category == "invalid_metadata"


@pytest.mark.asyncio
@pytest.mark.parametrize("batch_columns", [False, True])
async def test_same_named_tables_in_different_schemas_stay_separate(batch_columns):
    """Each schema's table keeps its own columns instead of merging into one."""
    conn = FakeCatalogConn(
        tables={
            ("audit", "Users"): [("Id", "int"), ("ChangedAt", "datetime2")],
            ("dbo", "Users"): [("Id", "int"), ("Name", "varchar")],
        }
    )
    assembler = SchemaAssembler(MssqlSchemaIntrospector(conn), batch_columns=batch_columns)

    schema = await assembler.assemble()

    assert schema.table_names() == ["Users", "Users"]
    assert [[c.name for c in table.columns] for table in schema.tables] == [
        ["Id", "ChangedAt"],
        ["Id", "Name"],
    ]


@pytest.mark.asyncio
async def test_view_sharing_a_table_name_is_ignored_by_both_strategies():
    """Per-table and batched column reads agree when a view shadows a table name."""
    tables = {"Orders": [("Id", "int"), ("UserId", "int")]}
    views = {("rpt", "Orders"): [("Id", "int"), ("Total", "money")]}

    per_table = await SchemaAssembler(
        MssqlSchemaIntrospector(FakeCatalogConn(tables=tables, views=views))
    ).assemble()
    batched = await SchemaAssembler(
        MssqlSchemaIntrospector(FakeCatalogConn(tables=tables, views=views)),
        batch_columns=True,
    ).assemble()

    assert [c.name for c in per_table.tables[0].columns] == ["Id", "UserId"]
    assert per_table == batched
