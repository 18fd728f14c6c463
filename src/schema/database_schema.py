from typing import List

from pydantic import BaseModel, Field

from .foreign_key_def import ForeignKeyDef
from .table_def import TableDef


class DatabaseSchema(BaseModel):
    """Introspected tables and foreign-key references of one database.

    Built once per diagram run and handed from the assembler to the renderer.
    """

    tables: List[TableDef] = Field(default_factory=list)
    references: List[ForeignKeyDef] = Field(default_factory=list)

    model_config = {"frozen": True}

    def table_names(self) -> List[str]:
        """Return table names in schema order."""
        return [table.name for table in self.tables]
