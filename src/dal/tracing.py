import hashlib
from typing import Awaitable, Optional

from common.observability.context import run_id_var
from common.observability.metrics import is_metrics_enabled


def trace_enabled() -> bool:
    """Return True when DAL query tracing is enabled or OTEL exporter defaults apply."""
    return is_metrics_enabled("DAL_TRACE_QUERIES")


def _hash_sql(sql: str) -> str:
    return hashlib.sha256(sql.encode("utf-8")).hexdigest()


async def trace_query_operation(
    name: str,
    provider: str,
    execution_model: str,
    sql: Optional[str],
    operation: Awaitable,
):
    """Trace a DAL query operation with OTEL when enabled."""
    if not trace_enabled():
        return await operation

    from opentelemetry import trace

    tracer = trace.get_tracer("dal")
    with tracer.start_as_current_span(name) as span:
        run_id = run_id_var.get()
        if run_id:
            span.set_attribute("run_id", run_id)
        span.set_attribute("db.provider", provider)
        span.set_attribute("db.execution_model", execution_model)
        if sql:
            span.set_attribute("db.statement_hash", _hash_sql(sql))
        try:
            result = await operation
            span.set_attribute("db.status", "ok")
            return result
        except Exception:
            span.set_attribute("db.status", "error")
            raise
