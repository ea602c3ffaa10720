"""
Tool Service - the tool-invocation boundary.

Maps tool names onto session operations and turns every outcome into a
single text response:
1. Validate arguments against the tool's model
2. Run the session operation
3. Serialize the result (JSON for structured payloads)
4. Convert any failure into an `Error: <message>` response

Both transports (MCP stdio and HTTP) call into this service, so they report
results and failures identically.
"""
import json
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Awaitable, Callable, Dict, Optional

from pydantic import BaseModel, ValidationError

from sqlmcp.core.exceptions import DatabaseToolError, ToolArgumentError, UnknownToolError
from sqlmcp.core.logging_config import get_logger
from sqlmcp.database.models import ConnectionConfig
from sqlmcp.database.session import SessionManager
from sqlmcp.models.tools import (
    ConnectDatabaseArgs,
    DescribeTableArgs,
    ExecuteQueryArgs,
    TOOLS,
    TOOLS_BY_NAME,
    ToolDefinition,
)

logger = get_logger(__name__)

DISCONNECTED_MESSAGE = "Disconnected from database"


@dataclass
class ToolResponse:
    """Text result of one tool call."""
    text: str
    is_error: bool = False

    def to_dict(self) -> dict:
        """Convert to the MCP CallToolResult shape."""
        return {
            "content": [{"type": "text", "text": self.text}],
            "isError": self.is_error,
        }


def _json_default(value: Any) -> str:
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


def to_json(payload: Any) -> str:
    """Serialize a payload the way every structured tool result is returned."""
    return json.dumps(payload, indent=2, default=_json_default)


def connection_message(config: ConnectionConfig) -> str:
    return (
        f"Successfully connected to {config.type.label} database: "
        f"{config.database}@{config.host}:{config.port}"
    )


class ToolService:
    """
    Dispatches tool calls to a SessionManager.

    Example:
        >>> service = ToolService(SessionManager())
        >>> response = await service.call("list_tables", {})
        >>> response.is_error
        True
    """

    def __init__(self, session: SessionManager):
        self.session = session
        self._handlers: Dict[str, Callable[[BaseModel], Awaitable[str]]] = {
            "connect_database": self._connect_database,
            "execute_query": self._execute_query,
            "list_tables": self._list_tables,
            "describe_table": self._describe_table,
            "disconnect_database": self._disconnect_database,
        }

    @staticmethod
    def list_tools() -> tuple:
        """The tool catalogue, in advertised order."""
        return TOOLS

    async def call(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> ToolResponse:
        """
        Invoke a tool by name. Never raises.

        Args:
            name: Tool name from the catalogue
            arguments: Raw arguments as received from the transport

        Returns:
            ToolResponse with the result text, or the failure text and is_error set
        """
        try:
            tool = TOOLS_BY_NAME.get(name)
            if tool is None:
                raise UnknownToolError(name)
            args = self._parse_arguments(tool, arguments)
            text = await self._handlers[name](args)
            return ToolResponse(text=text)
        except DatabaseToolError as exc:
            logger.warning(f"Tool '{name}' failed ({exc.error_code}): {exc.message}")
            return ToolResponse(text=f"Error: {exc.message}", is_error=True)
        except Exception as exc:
            logger.exception(f"Unexpected error in tool '{name}'")
            return ToolResponse(text=f"Error: {exc}", is_error=True)

    @staticmethod
    def _parse_arguments(tool: ToolDefinition, arguments: Optional[Dict[str, Any]]) -> BaseModel:
        try:
            return tool.args_model.model_validate(arguments or {})
        except ValidationError as exc:
            first = exc.errors()[0]
            field = ".".join(str(part) for part in first.get("loc", ())) or None
            if field:
                message = f"Invalid arguments for {tool.name}: {field}: {first.get('msg')}"
            else:
                message = f"Invalid arguments for {tool.name}: {first.get('msg')}"
            raise ToolArgumentError(message, field=field) from exc

    async def _connect_database(self, args: ConnectDatabaseArgs) -> str:
        config = await self.session.connect(args.to_partial())
        return connection_message(config)

    async def _execute_query(self, args: ExecuteQueryArgs) -> str:
        result = await self.session.execute_query(args.query, args.params)
        return to_json(result.to_dict())

    async def _list_tables(self, args: BaseModel) -> str:
        tables = await self.session.list_tables()
        return to_json({"tables": tables})

    async def _describe_table(self, args: DescribeTableArgs) -> str:
        columns = await self.session.describe_table(args.table_name)
        return to_json({"table": args.table_name, "columns": columns})

    async def _disconnect_database(self, args: BaseModel) -> str:
        await self.session.disconnect()
        return DISCONNECTED_MESSAGE
