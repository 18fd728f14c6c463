"""SQL Server-backed DAL components."""

from .config import MssqlConfig
from .query_target import MssqlQueryTargetDatabase
from .schema_introspector import MssqlSchemaIntrospector

__all__ = [
    "MssqlConfig",
    "MssqlQueryTargetDatabase",
    "MssqlSchemaIntrospector",
]
