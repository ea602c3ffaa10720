"""Tests for the MySQL adapter against a fake pooled engine."""

from __future__ import annotations

from typing import Any

import mysql.connector
import pytest

from sqlmcp.core.exceptions import DatabaseConnectionError, QueryError
from sqlmcp.database import mysql_adapter
from sqlmcp.database.models import ConnectionConfig, DatabaseType
from sqlmcp.database.mysql_adapter import MySQLAdapter, build_engine

CONFIG = ConnectionConfig(
    type=DatabaseType.MYSQL,
    host="db.internal",
    port=3306,
    database="shop",
    user="root",
    password="secret",
)


class FakeCursor:
    def __init__(self, engine: "FakeEngine", prepared: bool) -> None:
        self.engine = engine
        self.prepared = prepared
        self.description: list[tuple] | None = None
        self.rowcount = -1
        self._rows: list[tuple] = []

    def execute(self, sql: str, params: tuple | None = None) -> None:
        self.engine.executed.append((sql, params, self.prepared))
        if self.engine.query_error:
            raise mysql.connector.Error(self.engine.query_error)
        description, rows, rowcount = self.engine.results.get(sql, ([("NOW()", 12)], [("2024-01-01",)], 1))
        self.description = description
        self._rows = rows
        self.rowcount = rowcount

    def fetchall(self) -> list[tuple]:
        return self._rows

    def close(self) -> None:
        return None


class FakeConnection:
    def __init__(self, engine: "FakeEngine") -> None:
        self.engine = engine

    def cursor(self, prepared: bool = False) -> FakeCursor:
        return FakeCursor(self.engine, prepared)

    def commit(self) -> None:
        self.engine.commits += 1

    def close(self) -> None:
        self.engine.released += 1


class FakeEngine:
    def __init__(self) -> None:
        self.executed: list[tuple[str, tuple | None, bool]] = []
        self.results: dict[str, tuple[list[tuple] | None, list[tuple], int]] = {}
        self.query_error: str | None = None
        self.checkout_error: str | None = None
        self.commits = 0
        self.released = 0
        self.disposed = 0

    def raw_connection(self) -> FakeConnection:
        if self.checkout_error:
            raise mysql.connector.Error(self.checkout_error)
        return FakeConnection(self)

    def dispose(self) -> None:
        self.disposed += 1


@pytest.fixture
def engine(monkeypatch: pytest.MonkeyPatch) -> FakeEngine:
    fake = FakeEngine()
    monkeypatch.setattr(mysql_adapter, "build_engine", lambda config: fake)
    return fake


@pytest.fixture
async def adapter(engine: FakeEngine) -> MySQLAdapter:
    adapter = MySQLAdapter()
    await adapter.connect(CONFIG)
    return adapter


def test_build_engine_bounds_the_pool() -> None:
    engine = build_engine(CONFIG)

    assert engine.url.drivername == "mysql+mysqlconnector"
    assert engine.url.database == "shop"
    assert engine.pool.size() == 10
    engine.dispose()


@pytest.mark.anyio
async def test_connect_probes_the_server(engine: FakeEngine) -> None:
    adapter = MySQLAdapter()

    await adapter.connect(CONFIG)

    assert engine.executed == [("SELECT NOW()", None, False)]
    assert adapter.is_open


@pytest.mark.anyio
async def test_failed_probe_disposes_engine(engine: FakeEngine) -> None:
    engine.checkout_error = "Access denied for user 'root'"
    adapter = MySQLAdapter()

    with pytest.raises(DatabaseConnectionError, match="Access denied"):
        await adapter.connect(CONFIG)

    assert engine.disposed == 1
    assert not adapter.is_open


@pytest.mark.anyio
async def test_parameterized_query_uses_prepared_cursor(adapter: MySQLAdapter, engine: FakeEngine) -> None:
    sql = "SELECT id, name FROM users WHERE id = ?"
    engine.results[sql] = ([("id", 3), ("name", 253)], [(123, "alice")], 1)

    result = await adapter.run_query(sql, [123])

    assert engine.executed[-1] == (sql, (123,), True)
    assert result.to_dict() == {
        "rows": [{"id": 123, "name": "alice"}],
        "rowCount": 1,
        "fields": [{"name": "id", "type": 3}, {"name": "name", "type": 253}],
    }


@pytest.mark.anyio
async def test_write_statement_reports_affected_rows(adapter: MySQLAdapter, engine: FakeEngine) -> None:
    sql = "UPDATE users SET active = 1"
    engine.results[sql] = (None, [], 3)
    commits_before = engine.commits

    result = await adapter.run_query(sql)

    assert engine.executed[-1] == (sql, None, False)
    assert result.row_count == 3
    assert result.rows == []
    assert result.fields == []
    assert engine.commits == commits_before + 1


@pytest.mark.anyio
async def test_driver_error_becomes_query_error(adapter: MySQLAdapter, engine: FakeEngine) -> None:
    engine.query_error = "Table 'shop.nope' doesn't exist"
    released_before = engine.released

    with pytest.raises(QueryError, match="doesn't exist"):
        await adapter.run_query("SELECT * FROM nope")

    assert engine.released == released_before + 1


@pytest.mark.anyio
async def test_list_tables_reads_database_column(adapter: MySQLAdapter, engine: FakeEngine) -> None:
    engine.results["SHOW TABLES FROM shop"] = ([("Tables_in_shop", 253)], [("orders",), ("users",)], 2)

    assert await adapter.list_tables() == ["orders", "users"]


@pytest.mark.anyio
async def test_describe_table_returns_rows(adapter: MySQLAdapter, engine: FakeEngine) -> None:
    engine.results["DESCRIBE users"] = (
        [("Field", 253), ("Type", 252), ("Null", 253), ("Key", 253), ("Default", 252), ("Extra", 253)],
        [("id", "int", "NO", "PRI", None, "auto_increment")],
        1,
    )

    columns = await adapter.describe_table("users")

    assert columns == [
        {"Field": "id", "Type": "int", "Null": "NO", "Key": "PRI", "Default": None, "Extra": "auto_increment"},
    ]


@pytest.mark.anyio
async def test_close_is_idempotent(adapter: MySQLAdapter, engine: FakeEngine) -> None:
    await adapter.close()
    await adapter.close()

    assert engine.disposed == 1
    with pytest.raises(DatabaseConnectionError):
        await adapter.list_tables()
