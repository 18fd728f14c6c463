import logging
from typing import Any, Dict, List, Sequence, Set

from common.errors import CatalogQueryError
from common.interfaces.schema_introspector import SchemaIntrospector
from schema import ColumnDef, ForeignKeyDef, TableRef

logger = logging.getLogger(__name__)

TABLES_QUERY = """
    SELECT TABLE_SCHEMA, TABLE_NAME
    FROM INFORMATION_SCHEMA.TABLES
    WHERE TABLE_TYPE = 'BASE TABLE'
    ORDER BY TABLE_NAME, TABLE_SCHEMA
"""

COLUMNS_QUERY = """
    SELECT c.COLUMN_NAME, c.DATA_TYPE
    FROM INFORMATION_SCHEMA.COLUMNS AS c
    INNER JOIN INFORMATION_SCHEMA.TABLES AS t
        ON t.TABLE_SCHEMA = c.TABLE_SCHEMA AND t.TABLE_NAME = c.TABLE_NAME
    WHERE t.TABLE_TYPE = 'BASE TABLE'
    AND c.TABLE_SCHEMA = %s
    AND c.TABLE_NAME = %s
    ORDER BY c.ORDINAL_POSITION
"""

BATCH_COLUMNS_QUERY = """
    SELECT c.TABLE_SCHEMA, c.TABLE_NAME, c.COLUMN_NAME, c.DATA_TYPE
    FROM INFORMATION_SCHEMA.COLUMNS AS c
    INNER JOIN INFORMATION_SCHEMA.TABLES AS t
        ON t.TABLE_SCHEMA = c.TABLE_SCHEMA AND t.TABLE_NAME = c.TABLE_NAME
    WHERE t.TABLE_TYPE = 'BASE TABLE'
    ORDER BY c.TABLE_NAME, c.TABLE_SCHEMA, c.ORDINAL_POSITION
"""

FOREIGN_KEYS_QUERY = """
    SELECT
        tp.name AS TABLE_NAME,
        cp.name AS COLUMN_NAME,
        tr.name AS REFERENCED_TABLE_NAME,
        cr.name AS REFERENCED_COLUMN_NAME
    FROM sys.foreign_keys AS fk
    INNER JOIN sys.foreign_key_columns AS fkc
        ON fk.object_id = fkc.constraint_object_id
    INNER JOIN sys.tables AS tp
        ON fkc.parent_object_id = tp.object_id
    INNER JOIN sys.columns AS cp
        ON fkc.parent_object_id = cp.object_id AND fkc.parent_column_id = cp.column_id
    INNER JOIN sys.tables AS tr
        ON fkc.referenced_object_id = tr.object_id
    INNER JOIN sys.columns AS cr
        ON fkc.referenced_object_id = cr.object_id AND fkc.referenced_column_id = cr.column_id
    ORDER BY tp.name, fk.name, fkc.constraint_column_id
"""


class MssqlSchemaIntrospector(SchemaIntrospector):
    """SQL Server implementation of SchemaIntrospector using INFORMATION_SCHEMA and sys views.

    Tables are tracked by ``(schema, name)`` so same-named tables in different
    schemas stay separate. Column lookups only accept tables this instance has
    already listed; schema and name are always sent as bound parameters.
    """

    def __init__(self, conn: Any) -> None:
        self._conn = conn
        self._known_tables: Set[TableRef] = set()

    async def list_tables(self) -> List[TableRef]:
        """List schema-qualified base tables in the current database."""
        rows = await self._conn.fetch(TABLES_QUERY)
        tables = [TableRef(table_schema=row["TABLE_SCHEMA"], name=row["TABLE_NAME"]) for row in rows]
        self._known_tables.update(tables)
        return tables

    async def list_table_names(self) -> List[str]:
        """List base table names in the current database."""
        return [table.name for table in await self.list_tables()]

    async def list_columns(self, table_name: str, table_schema: str) -> List[ColumnDef]:
        """List columns of a single base table in ordinal order."""
        self._require_known_table(TableRef(table_schema=table_schema, name=table_name))
        rows = await self._conn.fetch(COLUMNS_QUERY, table_schema, table_name)
        return [_column_from_row(row) for row in rows]

    async def list_columns_batch(
        self, tables: Sequence[TableRef]
    ) -> Dict[TableRef, List[ColumnDef]]:
        """List columns for the given tables with one query.

        Every requested table gets an entry, empty when the catalog returned no
        columns for it. Per-table ordinal order is preserved.
        """
        for table in tables:
            self._require_known_table(table)

        columns: Dict[TableRef, List[ColumnDef]] = {table: [] for table in tables}
        rows = await self._conn.fetch(BATCH_COLUMNS_QUERY)
        for row in rows:
            key = TableRef(table_schema=row["TABLE_SCHEMA"], name=row["TABLE_NAME"])
            bucket = columns.get(key)
            if bucket is not None:
                bucket.append(_column_from_row(row))
        return columns

    async def list_foreign_keys(self) -> List[ForeignKeyDef]:
        """List every foreign key column pair, composite keys included."""
        rows = await self._conn.fetch(FOREIGN_KEYS_QUERY)
        return [
            ForeignKeyDef(
                table_name=row["TABLE_NAME"],
                column_name=row["COLUMN_NAME"],
                foreign_table_name=row["REFERENCED_TABLE_NAME"],
                foreign_column_name=row["REFERENCED_COLUMN_NAME"],
            )
            for row in rows
        ]

    def _require_known_table(self, table: TableRef) -> None:
        if table not in self._known_tables:
            logger.warning(
                "Refusing column lookup for unlisted table %r.%r", table.table_schema, table.name
            )
            raise CatalogQueryError(
                f"Table '{table.table_schema}.{table.name}' was not returned by list_tables.",
                category="invalid_request",
            )


def _column_from_row(row: Dict[str, Any]) -> ColumnDef:
    return ColumnDef(name=row["COLUMN_NAME"], data_type=row["DATA_TYPE"])
