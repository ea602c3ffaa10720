"""Tests for the MCP server wiring, using an in-memory client session."""

from __future__ import annotations

import json

import pytest
from mcp.shared.memory import create_connected_server_and_client_session

from sqlmcp.core.config import get_settings
from sqlmcp.database.session import SessionManager
from sqlmcp.server.stdio import build_server, initialization_options
from sqlmcp.services.tool_service import ToolService


@pytest.fixture
def server(postgres_session: SessionManager):
    return build_server(ToolService(postgres_session))


def test_initialization_options_identify_server(server) -> None:
    options = initialization_options(server, get_settings())

    assert options.server_name == "postgres-mysql-mcp-server"
    assert options.server_version == "1.0.0"
    assert options.capabilities.tools is not None


@pytest.mark.anyio
async def test_lists_tools(server) -> None:
    async with create_connected_server_and_client_session(server) as client:
        result = await client.list_tools()

    names = [tool.name for tool in result.tools]
    assert names == ["connect_database", "execute_query", "list_tables", "describe_table", "disconnect_database"]


@pytest.mark.anyio
async def test_connect_then_query(server) -> None:
    async with create_connected_server_and_client_session(server) as client:
        connected = await client.call_tool("connect_database", {})
        queried = await client.call_tool("execute_query", {"query": "SELECT * FROM users WHERE id = $1", "params": [123]})

    assert not connected.isError
    assert connected.content[0].text == "Successfully connected to PostgreSQL database: mydb@localhost:5432"
    assert not queried.isError
    assert json.loads(queried.content[0].text)["rows"] == [{"id": 123, "name": "alice"}]


@pytest.mark.anyio
async def test_failures_are_flagged(server) -> None:
    async with create_connected_server_and_client_session(server) as client:
        result = await client.call_tool("list_tables", {})

    assert result.isError
    assert result.content[0].text == "Error: Not connected to any database. Call connect_database first."
