"""PlantUML class-diagram rendering for an introspected schema.

The output is a lossless transcription of the schema: tables and references
appear in schema order, with no deduplication, sorting or cycle handling.
"""

from typing import List

from schema import DatabaseSchema, ForeignKeyDef, TableDef

START_MARKER = "@startuml"
END_MARKER = "@enduml"


def render(schema: DatabaseSchema) -> str:
    """Render a schema as PlantUML markup, one newline-terminated line per element."""
    lines: List[str] = [START_MARKER]
    for table in schema.tables:
        lines.extend(render_class_block(table))
    for reference in schema.references:
        lines.append(render_reference(reference))
    lines.append(END_MARKER)
    return "".join(f"{line}\n" for line in lines)


def render_class_block(table: TableDef) -> List[str]:
    """Return the class block lines for one table."""
    lines = [f"class {table.name} {{"]
    lines.extend(f"  {column.name} : {column.data_type}" for column in table.columns)
    lines.append("}")
    return lines


def render_reference(reference: ForeignKeyDef) -> str:
    """Return the relationship line for one foreign key column pair.

    The trailing label repeats the source column name.
    """
    return (
        f"{reference.table_name}::{reference.column_name} --> "
        f"{reference.foreign_table_name}::{reference.foreign_column_name} : "
        f"{reference.column_name}"
    )
