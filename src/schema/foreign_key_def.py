from pydantic import BaseModel


class ForeignKeyDef(BaseModel):
    """One column pair of a foreign key constraint.

    Composite keys produce one instance per participating column.
    """

    table_name: str
    column_name: str
    foreign_table_name: str
    foreign_column_name: str

    model_config = {"frozen": True}
