"""Read-only SQL enforcement for catalog connections."""

import re

import sqlglot
from opentelemetry import trace
from sqlglot import exp

from common.errors import CatalogQueryError

ALLOWED_STATEMENT_TYPES = {"select", "union", "intersect", "except"}

_FALLBACK_MUTATION_PREFIX = {
    "INSERT",
    "UPDATE",
    "DELETE",
    "DROP",
    "ALTER",
    "CREATE",
    "TRUNCATE",
    "MERGE",
    "GRANT",
    "REVOKE",
    "EXEC",
    "EXECUTE",
}
_SQL_COMMENT_RE = re.compile(r"(--[^\n]*|/\*.*?\*/)", flags=re.DOTALL)
# pymssql uses pyformat placeholders; sqlglot understands qmark.
_PYFORMAT_PLACEHOLDER_RE = re.compile(r"%s")


def is_mutating_sql(sql: str, dialect: str = "tsql") -> bool:
    """Best-effort detection of mutating SQL statements."""
    if not isinstance(sql, str) or not sql.strip():
        return True

    stripped = _SQL_COMMENT_RE.sub(" ", sql).strip()
    parseable = _PYFORMAT_PLACEHOLDER_RE.sub("?", stripped)
    try:
        expressions = sqlglot.parse(parseable, read=dialect)
    except Exception:
        expressions = None

    if expressions:
        if len(expressions) != 1:
            return True
        expression = expressions[0]
        if expression is None:
            return True
        if expression.key not in ALLOWED_STATEMENT_TYPES:
            return True

        forbidden_nodes = (
            exp.Insert,
            exp.Update,
            exp.Delete,
            exp.Drop,
            exp.Alter,
            exp.Create,
            exp.Command,
            exp.Grant,
            exp.Merge,
            exp.TruncateTable,
        )
        for node in expression.walk():
            if isinstance(node, forbidden_nodes):
                return True
        return False

    # Fallback lexical guard for parser failures.
    if not stripped:
        return True
    first_token = stripped.split(maxsplit=1)[0].upper()
    return first_token in _FALLBACK_MUTATION_PREFIX


def enforce_read_only_sql(sql: str, provider: str) -> None:
    """Raise CatalogQueryError when a mutating statement reaches a catalog connection."""
    if not is_mutating_sql(sql):
        return

    span = trace.get_current_span()
    if span and span.is_recording():
        stripped = _SQL_COMMENT_RE.sub(" ", sql or "").lstrip()
        statement_type = stripped.split(maxsplit=1)[0].upper() if stripped else "UNKNOWN"
        span.add_event(
            "dal.read_only.blocked",
            attributes={"provider": provider, "statement_type": statement_type},
        )
    raise CatalogQueryError(
        f"Read-only enforcement blocked non-SELECT statement for provider '{provider}'.",
        category="read_only",
    )
