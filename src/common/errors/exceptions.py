"""Exceptions raised by the pipeline stages.

Every stage fails fast: the first error aborts the run and reaches the CLI,
which reports it and exits non-zero.
"""

from typing import Optional


class DiagramError(Exception):
    """Base class for pipeline failures surfaced to the operator."""

    default_category = "unknown"

    def __init__(self, message: str, category: Optional[str] = None) -> None:
        """Initialize the error with a provider-agnostic category."""
        super().__init__(message)
        self.category = category or self.default_category


class DatabaseConnectionError(DiagramError):
    """The database could not be reached, rejected the login, or timed out."""

    default_category = "connectivity"


class CatalogQueryError(DiagramError):
    """A catalog query was rejected, failed mid-flight, or was refused locally."""

    default_category = "syntax"


class OutputWriteError(DiagramError):
    """The diagram file could not be created or written."""

    default_category = "io"
