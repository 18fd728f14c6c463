"""Canonical schema models shared by the catalog reader and the diagram renderer."""

from .column_def import ColumnDef
from .database_schema import DatabaseSchema
from .foreign_key_def import ForeignKeyDef
from .table_def import TableDef
from .table_ref import TableRef

__all__ = ["ColumnDef", "DatabaseSchema", "ForeignKeyDef", "TableDef", "TableRef"]
