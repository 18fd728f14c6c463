from typing import List

from pydantic import BaseModel, Field, field_validator

from .column_def import ColumnDef


class TableDef(BaseModel):
    """Canonical representation of a base table and its columns in catalog order."""

    name: str
    columns: List[ColumnDef] = Field(default_factory=list)

    model_config = {"frozen": True}

    @field_validator("columns")
    @classmethod
    def _unique_column_names(cls, columns: List[ColumnDef]) -> List[ColumnDef]:
        seen = set()
        for column in columns:
            if column.name in seen:
                raise ValueError(f"Duplicate column name '{column.name}'")
            seen.add(column.name)
        return columns
