"""Shared fixtures: fake adapters and canned environments."""

from __future__ import annotations

from typing import Any

import pytest

from sqlmcp.core.exceptions import DatabaseConnectionError, QueryError
from sqlmcp.database.models import ConnectionConfig, DatabaseType, QueryResult
from sqlmcp.database.session import SessionManager

POSTGRES_ENV = {
    "DB_TYPE": "postgresql",
    "DB_HOST": "localhost",
    "DB_PORT": "5432",
    "DB_DATABASE": "mydb",
    "DB_USER": "postgres",
    "DB_PASSWORD": "pw",
}

MYSQL_ENV = {
    "DB_TYPE": "mysql",
    "MYSQL_HOST": "db.internal",
    "MYSQL_PORT": "3306",
    "MYSQL_DATABASE": "shop",
    "MYSQL_USER": "root",
    "MYSQL_PASSWORD": "secret",
}


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


class FakeAdapter:
    """In-memory stand-in for a backend adapter."""

    def __init__(self, db_type: DatabaseType, *, fail_connect: str | None = None) -> None:
        self.db_type = db_type
        self.fail_connect = fail_connect
        self.config: ConnectionConfig | None = None
        self.closed = False
        self.close_calls = 0
        self.queries: list[tuple[str, list[Any]]] = []
        self.tables: list[str] = ["orders", "users"]
        self.query_error: str | None = None

    async def connect(self, config: ConnectionConfig) -> None:
        if self.fail_connect:
            raise DatabaseConnectionError(self.fail_connect)
        self.config = config

    async def test_connection(self) -> None:
        return None

    async def run_query(self, sql: str, params=None) -> QueryResult:  # type: ignore[no-untyped-def]
        if self.query_error:
            raise QueryError(self.query_error)
        self.queries.append((sql, list(params or [])))
        return QueryResult(
            rows=[{"id": 123, "name": "alice"}],
            row_count=1,
            fields=[{"name": "id", "dataTypeID": 23}, {"name": "name", "dataTypeID": 25}],
        )

    async def list_tables(self) -> list[str]:
        return list(self.tables)

    async def describe_table(self, table_name: str) -> list[dict[str, Any]]:
        return [
            {"column_name": "id", "data_type": "integer", "is_nullable": "NO", "column_default": None},
        ]

    async def close(self) -> None:
        self.close_calls += 1
        self.closed = True


class FakeAdapterFactory:
    """Records every adapter it hands out."""

    def __init__(self, *, fail_connect: str | None = None) -> None:
        self.fail_connect = fail_connect
        self.created: list[FakeAdapter] = []

    def __call__(self, db_type: DatabaseType) -> FakeAdapter:
        adapter = FakeAdapter(db_type, fail_connect=self.fail_connect)
        self.created.append(adapter)
        return adapter


@pytest.fixture
def adapter_factory() -> FakeAdapterFactory:
    return FakeAdapterFactory()


@pytest.fixture
def session(adapter_factory: FakeAdapterFactory) -> SessionManager:
    return SessionManager(environ={}, adapter_factory=adapter_factory)


@pytest.fixture
def postgres_session(adapter_factory: FakeAdapterFactory) -> SessionManager:
    return SessionManager(environ=dict(POSTGRES_ENV), adapter_factory=adapter_factory)
