"""Data Abstraction Layer (DAL) for catalog introspection.

Exposes the SQL Server catalog reader and the assembler that turns catalog
rows into the canonical schema model.
"""

from dal.schema_assembler import SchemaAssembler

__all__ = ["SchemaAssembler"]
