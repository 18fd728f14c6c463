from pydantic import BaseModel


class ColumnDef(BaseModel):
    """Canonical representation of a table column as reported by the catalog."""

    name: str
    data_type: str

    model_config = {"frozen": True}
