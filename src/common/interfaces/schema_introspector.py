from typing import Dict, List, Protocol, Sequence, runtime_checkable

from schema import ColumnDef, ForeignKeyDef, TableRef


@runtime_checkable
class SchemaIntrospector(Protocol):
    """Protocol for read-only catalog introspection (tables, columns, foreign keys)."""

    async def list_tables(self) -> List[TableRef]:
        """List schema-qualified base tables, excluding views."""
        ...

    async def list_table_names(self) -> List[str]:
        """List base table names, excluding views."""
        ...

    async def list_columns(self, table_name: str, table_schema: str) -> List[ColumnDef]:
        """List the columns of one previously listed table in catalog order."""
        ...

    async def list_columns_batch(
        self, tables: Sequence[TableRef]
    ) -> Dict[TableRef, List[ColumnDef]]:
        """List columns for several tables with a single catalog query."""
        ...

    async def list_foreign_keys(self) -> List[ForeignKeyDef]:
        """List one entry per column pair of every foreign key."""
        ...
