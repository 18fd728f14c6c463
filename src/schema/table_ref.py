from pydantic import BaseModel


class TableRef(BaseModel):
    """Schema-qualified name of a base table as listed by the catalog."""

    table_schema: str
    name: str

    model_config = {"frozen": True}
