"""Tests for the HTTP surface."""

from __future__ import annotations

import json

import pytest
from fastapi.testclient import TestClient

from conftest import FakeAdapterFactory, POSTGRES_ENV
from sqlmcp import __version__
from sqlmcp.api.main import create_app
from sqlmcp.database.session import SessionManager


@pytest.fixture
def client(postgres_session: SessionManager):
    app = create_app(postgres_session, auto_connect_on_startup=False)
    with TestClient(app) as test_client:
        yield test_client


def test_health(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["version"] == __version__


def test_readiness_reports_session_status(client: TestClient) -> None:
    assert client.get("/health/ready").json()["database"] == {"connected": False}

    client.post("/tools/connect_database", json={})
    database = client.get("/health/ready").json()["database"]

    assert database["connected"] is True
    assert database["type"] == "postgresql"
    assert "password" not in database


def test_tool_catalogue(client: TestClient) -> None:
    tools = client.get("/tools").json()

    assert [tool["name"] for tool in tools][0] == "connect_database"
    assert len(tools) == 5
    assert tools[3]["inputSchema"]["required"] == ["tableName"]


def test_call_tool_round_trip(client: TestClient) -> None:
    connected = client.post("/tools/connect_database", json={}).json()
    assert connected["isError"] is False
    assert connected["content"][0]["text"].startswith("Successfully connected to PostgreSQL")

    result = client.post("/tools/execute_query", json={"query": "SELECT 1"}).json()

    assert result["isError"] is False
    assert json.loads(result["content"][0]["text"])["rowCount"] == 1


def test_tool_failure_is_a_successful_response(client: TestClient) -> None:
    response = client.post("/tools/list_tables")

    assert response.status_code == 200
    assert response.json()["isError"] is True
    assert response.json()["content"][0]["text"].startswith("Error: Not connected")


def test_unknown_tool_is_404(client: TestClient) -> None:
    response = client.post("/tools/drop_everything", json={})

    assert response.status_code == 404
    assert response.json()["error"] == "unknown_tool"


def test_lifespan_auto_connects_and_disconnects() -> None:
    factory = FakeAdapterFactory()
    session = SessionManager(environ=dict(POSTGRES_ENV), adapter_factory=factory)

    with TestClient(create_app(session)):
        assert session.is_connected

    assert not session.is_connected
    assert factory.created[0].closed
