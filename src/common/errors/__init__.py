"""Error taxonomy for the schema diagram pipeline."""

from common.errors.classification import classify_error
from common.errors.exceptions import (
    CatalogQueryError,
    DatabaseConnectionError,
    DiagramError,
    OutputWriteError,
)

__all__ = [
    "CatalogQueryError",
    "DatabaseConnectionError",
    "DiagramError",
    "OutputWriteError",
    "classify_error",
]
