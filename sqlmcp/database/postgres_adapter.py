"""
PostgreSQL backend adapter built on an asyncpg connection pool.

Statements and positional parameters are forwarded to asyncpg unchanged, so
placeholders use the server-native `$1, $2, ...` form.
"""
import time
from typing import Any, Dict, List, Optional, Sequence

import asyncpg

from sqlmcp.core.exceptions import DatabaseConnectionError, QueryError
from sqlmcp.core.logging_config import get_logger
from sqlmcp.database.models import ConnectionConfig, QueryResult

logger = get_logger(__name__)

POOL_MAX_SIZE = 10

# Bound and returned as text so JSON strings such as "2024-01-01" reach the
# server unchanged and the server infers the value
TEXT_CODEC_TYPES = ("date", "time", "timetz", "timestamp", "timestamptz", "interval", "numeric")


async def _init_connection(conn: asyncpg.Connection) -> None:
    for typename in TEXT_CODEC_TYPES:
        await conn.set_type_codec(
            typename,
            schema="pg_catalog",
            encoder=str,
            decoder=str,
            format="text",
        )


class PostgresAdapter:
    """Runs statements against PostgreSQL through a bounded asyncpg pool."""

    _PROBE_QUERY = "SELECT NOW()"

    _TABLES_QUERY = """
        SELECT table_name
        FROM information_schema.tables
        WHERE table_schema = current_schema()
        ORDER BY table_name
    """

    _COLUMNS_QUERY = """
        SELECT column_name, data_type, is_nullable, column_default
        FROM information_schema.columns
        WHERE table_schema = current_schema() AND table_name = $1
        ORDER BY ordinal_position
    """

    def __init__(self) -> None:
        self._pool: Optional[asyncpg.Pool] = None
        self._config: Optional[ConnectionConfig] = None

    @property
    def is_open(self) -> bool:
        return self._pool is not None

    async def connect(self, config: ConnectionConfig) -> None:
        """
        Open the pool and verify it with a round-trip query.

        Raises:
            DatabaseConnectionError: If the pool cannot be created or the probe fails
        """
        try:
            pool = await asyncpg.create_pool(
                host=config.host,
                port=config.port,
                database=config.database,
                user=config.user,
                password=config.password,
                ssl="require" if config.ssl else "disable",
                min_size=0,
                max_size=POOL_MAX_SIZE,
                init=_init_connection,
            )
        except Exception as exc:
            raise DatabaseConnectionError(str(exc)) from exc

        self._pool = pool
        self._config = config
        try:
            await self.test_connection()
        except DatabaseConnectionError:
            await self.close()
            raise
        logger.info(f"PostgreSQL pool ready for {config.describe()}")

    async def test_connection(self) -> None:
        """Run the liveness probe on a pooled connection."""
        pool = self._require_pool()
        try:
            async with pool.acquire() as conn:
                await conn.fetchval(self._PROBE_QUERY)
        except Exception as exc:
            raise DatabaseConnectionError(str(exc)) from exc

    async def run_query(self, sql: str, params: Optional[Sequence[Any]] = None) -> QueryResult:
        pool = self._require_pool()
        started = time.perf_counter()
        try:
            async with pool.acquire() as conn:
                try:
                    statement = await conn.prepare(sql)
                except asyncpg.PostgresSyntaxError:
                    if params:
                        raise
                    # Several statements in one text only run over the simple query protocol
                    status = await conn.execute(sql)
                    records, attributes = [], []
                else:
                    records = await statement.fetch(*(params or ()))
                    attributes = statement.get_attributes()
                    status = statement.get_statusmsg()
        except Exception as exc:
            raise QueryError(str(exc)) from exc

        rows = [dict(record) for record in records]
        result = QueryResult(
            rows=rows,
            row_count=_row_count(status, rows),
            fields=[{"name": attr.name, "dataTypeID": attr.type.oid} for attr in attributes],
        )
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(f"Query completed: {status or 'OK'} ({result.row_count} rows) in {elapsed_ms:.2f}ms")
        return result

    async def list_tables(self) -> List[str]:
        pool = self._require_pool()
        try:
            records = await pool.fetch(self._TABLES_QUERY)
        except Exception as exc:
            raise QueryError(str(exc)) from exc
        return [record["table_name"] for record in records]

    async def describe_table(self, table_name: str) -> List[Dict[str, Any]]:
        pool = self._require_pool()
        try:
            records = await pool.fetch(self._COLUMNS_QUERY, table_name)
        except Exception as exc:
            raise QueryError(str(exc)) from exc
        return [dict(record) for record in records]

    async def close(self) -> None:
        """Release every pooled connection. Safe to call more than once."""
        pool, self._pool = self._pool, None
        if pool is None:
            return
        await pool.close()
        logger.info("PostgreSQL pool closed")

    def _require_pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise DatabaseConnectionError("PostgreSQL connection not initialized")
        return self._pool


def _row_count(status: Optional[str], rows: List[Dict[str, Any]]) -> int:
    """Take the count from a command tag such as 'SELECT 3' or 'INSERT 0 1'."""
    tokens = (status or "").split()
    if tokens and tokens[-1].isdigit():
        return int(tokens[-1])
    return len(rows)
