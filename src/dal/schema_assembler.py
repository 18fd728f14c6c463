"""Assemble a DatabaseSchema from a catalog introspector."""

import logging
from typing import List

from pydantic import ValidationError

from common.errors import CatalogQueryError
from common.interfaces.schema_introspector import SchemaIntrospector
from schema import ColumnDef, DatabaseSchema, ForeignKeyDef, TableDef, TableRef

logger = logging.getLogger(__name__)


class SchemaAssembler:
    """Drive catalog reads in order and build the canonical schema model.

    Tables are fetched first, then each table's columns in table order
    (one query per table unless ``batch_columns`` is set), then all foreign
    keys in one query. The first failure propagates and no schema is built.
    """

    def __init__(self, introspector: SchemaIntrospector, batch_columns: bool = False) -> None:
        self._introspector = introspector
        self._batch_columns = batch_columns

    async def assemble(self) -> DatabaseSchema:
        """Build the full schema (tables, then references)."""
        tables = await self.assemble_tables()
        references = await self.assemble_references()
        return DatabaseSchema(tables=tables, references=references)

    async def assemble_tables(self) -> List[TableDef]:
        """Fetch base tables and their columns, preserving catalog order."""
        table_refs = await self._introspector.list_tables()
        logger.info("Found %d base tables", len(table_refs))

        if self._batch_columns:
            columns_by_table = await self._introspector.list_columns_batch(table_refs)
            tables = [_build_table(ref, columns_by_table[ref]) for ref in table_refs]
        else:
            tables = []
            for ref in table_refs:
                columns = await self._introspector.list_columns(ref.name, ref.table_schema)
                tables.append(_build_table(ref, columns))

        logger.info(
            "Fetched %d columns across %d tables",
            sum(len(table.columns) for table in tables),
            len(tables),
        )
        return tables

    async def assemble_references(self) -> List[ForeignKeyDef]:
        """Fetch all foreign key column pairs with a single query."""
        references = await self._introspector.list_foreign_keys()
        logger.info("Found %d foreign key references", len(references))
        return references


def _build_table(ref: TableRef, columns: List[ColumnDef]) -> TableDef:
    # Class names stay unqualified; the schema only scopes the column lookup.
    try:
        return TableDef(name=ref.name, columns=columns)
    except ValidationError as exc:
        raise CatalogQueryError(
            f"Catalog returned inconsistent columns for table "
            f"'{ref.table_schema}.{ref.name}': {exc}",
            category="invalid_metadata",
        ) from exc
