"""
MySQL backend adapter built on a pooled SQLAlchemy engine.

The engine only manages the connection pool. Each statement checks out one
DB-API connection from mysql-connector-python and runs on a worker thread:
statements with parameters go through a prepared cursor, so placeholders are
the server-native positional `?` and values are bound by the server.
"""
import asyncio
import time
from typing import Any, Dict, List, Optional, Sequence

import mysql.connector
from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine
from sqlalchemy.exc import SQLAlchemyError

from sqlmcp.core.exceptions import DatabaseConnectionError, QueryError
from sqlmcp.core.logging_config import get_logger
from sqlmcp.database.models import ConnectionConfig, QueryResult

logger = get_logger(__name__)

POOL_SIZE = 10

DRIVER_ERRORS = (SQLAlchemyError, mysql.connector.Error)


def _driver_message(exc: Exception) -> str:
    """Prefer the driver's own message over SQLAlchemy's wrapper text."""
    original = getattr(exc, "orig", None)
    return str(original) if original is not None else str(exc)


def build_engine(config: ConnectionConfig) -> Engine:
    """
    Create the pooled engine for a MySQL target.

    The pool holds at most POOL_SIZE connections; nothing is opened until the
    first checkout.
    """
    url = URL.create(
        "mysql+mysqlconnector",
        username=config.user,
        password=config.password,
        host=config.host,
        port=config.port,
        database=config.database,
    )
    if config.ssl:
        connect_args = {"ssl_disabled": False, "ssl_verify_cert": False, "ssl_verify_identity": False}
    else:
        connect_args = {"ssl_disabled": True}

    return create_engine(
        url,
        pool_size=POOL_SIZE,
        max_overflow=0,
        pool_pre_ping=True,
        pool_recycle=3600,
        connect_args=connect_args,
    )


class MySQLAdapter:
    """Runs statements against MySQL through a bounded connection pool."""

    _PROBE_QUERY = "SELECT NOW()"

    def __init__(self) -> None:
        self._engine: Optional[Engine] = None
        self._config: Optional[ConnectionConfig] = None

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    async def connect(self, config: ConnectionConfig) -> None:
        """
        Create the pool and verify it with a round-trip query.

        Raises:
            DatabaseConnectionError: If the engine cannot be built or the probe fails
        """
        try:
            self._engine = build_engine(config)
        except DRIVER_ERRORS as exc:
            raise DatabaseConnectionError(_driver_message(exc)) from exc
        self._config = config
        try:
            await self.test_connection()
        except DatabaseConnectionError:
            await self.close()
            raise
        logger.info(f"MySQL pool ready for {config.describe()}")

    async def test_connection(self) -> None:
        """Run the liveness probe on a pooled connection."""
        try:
            await asyncio.to_thread(self._execute, self._PROBE_QUERY)
        except QueryError as exc:
            raise DatabaseConnectionError(str(exc)) from exc

    async def run_query(self, sql: str, params: Optional[Sequence[Any]] = None) -> QueryResult:
        started = time.perf_counter()
        result = await asyncio.to_thread(self._execute, sql, params)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(f"Query completed: {result.row_count} rows in {elapsed_ms:.2f}ms")
        return result

    async def list_tables(self) -> List[str]:
        database = self._require_config().database
        result = await asyncio.to_thread(self._execute, f"SHOW TABLES FROM {database}")
        column = f"Tables_in_{database}"
        return [row[column] for row in result.rows]

    async def describe_table(self, table_name: str) -> List[Dict[str, Any]]:
        result = await asyncio.to_thread(self._execute, f"DESCRIBE {table_name}")
        return result.rows

    async def close(self) -> None:
        """Dispose of the pool. Safe to call more than once."""
        engine, self._engine = self._engine, None
        if engine is None:
            return
        await asyncio.to_thread(engine.dispose)
        logger.info("MySQL pool closed")

    def _execute(self, sql: str, params: Optional[Sequence[Any]] = None) -> QueryResult:
        """
        Run one statement on a pooled connection and commit it.

        Raises:
            QueryError: If the driver rejects the statement or the checkout fails
        """
        engine = self._require_engine()
        try:
            connection = engine.raw_connection()
        except DRIVER_ERRORS as exc:
            raise QueryError(_driver_message(exc)) from exc

        try:
            cursor = connection.cursor(prepared=True) if params else connection.cursor()
            try:
                if params:
                    cursor.execute(sql, tuple(params))
                else:
                    cursor.execute(sql)
                result = _collect(cursor)
            finally:
                cursor.close()
            connection.commit()
            return result
        except DRIVER_ERRORS as exc:
            raise QueryError(_driver_message(exc)) from exc
        finally:
            # Returns the connection to the pool, rolling back anything uncommitted
            connection.close()

    def _require_engine(self) -> Engine:
        if self._engine is None:
            raise DatabaseConnectionError("MySQL connection not initialized")
        return self._engine

    def _require_config(self) -> ConnectionConfig:
        if self._config is None or self._engine is None:
            raise DatabaseConnectionError("MySQL connection not initialized")
        return self._config


def _collect(cursor) -> QueryResult:
    description = cursor.description
    if description is None:
        return QueryResult(row_count=max(cursor.rowcount, 0))
    columns = [column[0] for column in description]
    rows = [dict(zip(columns, row)) for row in cursor.fetchall()]
    return QueryResult(
        rows=rows,
        row_count=len(rows),
        fields=[{"name": column[0], "type": column[1]} for column in description],
    )
