import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Sequence

import pymssql

from common.errors import CatalogQueryError, DatabaseConnectionError, classify_error
from dal.mssql.config import MssqlConfig
from dal.tracing import trace_query_operation
from dal.util.read_only import enforce_read_only_sql

logger = logging.getLogger(__name__)

PROVIDER = "mssql"
APP_NAME = "schema-diagram"


class MssqlQueryTargetDatabase:
    """SQL Server catalog access using pymssql."""

    @classmethod
    @asynccontextmanager
    async def connect(cls, config: MssqlConfig) -> AsyncIterator["_MssqlConnection"]:
        """Open one connection for the whole run and close it on every exit path."""
        logger.info(
            "Connecting to SQL Server host=%s port=%s database=%s user=%s",
            config.host,
            config.port,
            config.database,
            config.user,
        )
        try:
            conn = await asyncio.to_thread(_connect, config)
        except (pymssql.Error, OSError) as exc:
            raise DatabaseConnectionError(
                f"Could not connect to SQL Server at {config.host}:{config.port}: {exc}",
                category=classify_error(exc),
            ) from exc

        try:
            yield _MssqlConnection(conn)
        finally:
            await asyncio.to_thread(conn.close)
            logger.debug("Closed SQL Server connection to %s", config.host)


class _MssqlConnection:
    """Adapter providing asyncpg-like fetch helpers over a pymssql connection."""

    def __init__(self, conn: Any) -> None:
        self._conn = conn

    async def fetch(self, sql: str, *params: Any) -> List[Dict[str, Any]]:
        """Run one read-only query with bound parameters and return dict rows."""
        enforce_read_only_sql(sql, PROVIDER)

        async def _run():
            try:
                return await asyncio.to_thread(_fetch, self._conn, sql, params)
            except pymssql.Error as exc:
                raise CatalogQueryError(
                    f"Catalog query failed: {exc}", category=classify_error(exc)
                ) from exc

        return await trace_query_operation(
            "dal.query.execute",
            provider=PROVIDER,
            execution_model="sync",
            sql=sql,
            operation=_run(),
        )


def _connect(config: MssqlConfig) -> Any:
    return pymssql.connect(
        server=config.host,
        port=str(config.port),
        user=config.user,
        password=config.password,
        database=config.database,
        login_timeout=config.login_timeout_seconds,
        appname=APP_NAME,
    )


def _fetch(conn: Any, sql: str, params: Sequence[Any]) -> List[Dict[str, Any]]:
    with conn.cursor(as_dict=True) as cursor:
        cursor.execute(sql, tuple(params) or None)
        rows = cursor.fetchall()
    return [dict(row) for row in rows]
