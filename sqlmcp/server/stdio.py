"""
MCP stdio transport.

Wires the tool catalogue and ToolService into a low-level MCP Server, runs
the startup auto-connect, and serves requests over stdin/stdout until the
input closes or SIGINT/SIGTERM arrives. The session is always disconnected
before the process exits.

Run with: python -m sqlmcp
"""
import asyncio
import signal
from typing import Any, Dict, List, Optional

import mcp.types as types
from mcp.server import NotificationOptions, Server
from mcp.server.models import InitializationOptions
from mcp.server.stdio import stdio_server

from sqlmcp.core.config import Settings, get_settings, load_environment
from sqlmcp.core.logging_config import get_logger, setup_logging
from sqlmcp.database.bootstrap import auto_connect
from sqlmcp.database.session import SessionManager
from sqlmcp.services.tool_service import ToolService

logger = get_logger(__name__)


class ToolCallFailed(Exception):
    """Carries a failure response out of the call_tool handler so MCP flags it with isError."""


def build_server(tools: ToolService, settings: Optional[Settings] = None) -> Server:
    """
    Create the MCP server for a ToolService.

    Args:
        tools: Service that executes tool calls
        settings: Supplies the server name. Defaults to get_settings().

    Returns:
        Configured low-level MCP Server
    """
    settings = settings or get_settings()
    server = Server(settings.app_name)

    @server.list_tools()
    async def handle_list_tools() -> List[types.Tool]:
        return [
            types.Tool(
                name=tool.name,
                description=tool.description,
                inputSchema=tool.input_schema(),
            )
            for tool in tools.list_tools()
        ]

    @server.call_tool()
    async def handle_call_tool(name: str, arguments: Dict[str, Any]) -> List[types.TextContent]:
        response = await tools.call(name, arguments)
        if response.is_error:
            raise ToolCallFailed(response.text)
        return [types.TextContent(type="text", text=response.text)]

    return server


def initialization_options(server: Server, settings: Settings) -> InitializationOptions:
    return InitializationOptions(
        server_name=settings.app_name,
        server_version=settings.server_version,
        capabilities=server.get_capabilities(
            notification_options=NotificationOptions(),
            experimental_capabilities={},
        ),
    )


def _install_signal_handlers(task: asyncio.Task) -> None:
    loop = asyncio.get_running_loop()
    for signum in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(signum, task.cancel)
        except (NotImplementedError, RuntimeError):
            # Signal handlers are unavailable on Windows event loops and off the main thread
            logger.debug(f"Cannot install handler for {signum!r}")


async def serve(session: Optional[SessionManager] = None) -> None:
    """
    Run the MCP server over stdio.

    Args:
        session: Session to serve. A new one reading os.environ is created when omitted.
    """
    settings = get_settings()
    session = session or SessionManager()
    server = build_server(ToolService(session), settings)

    await auto_connect(session)

    current = asyncio.current_task()
    if current is not None:
        _install_signal_handlers(current)

    try:
        async with stdio_server() as (read_stream, write_stream):
            logger.info(f"{settings.app_name} {settings.server_version} running on stdio")
            await server.run(read_stream, write_stream, initialization_options(server, settings))
    except asyncio.CancelledError:
        logger.info("Shutdown requested, closing database session")
    finally:
        await session.disconnect()
        logger.info("MCP SQL Server stopped")


def main() -> None:
    """Console entry point."""
    load_environment()
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_dir)
    try:
        asyncio.run(serve())
    except KeyboardInterrupt:
        pass
