"""
Tool Routes - the tool catalogue over HTTP.

The same ToolService backs the MCP transport, so a tool behaves identically
whichever surface invokes it. Tool-level failures (not connected, rejected
SQL, ...) are returned with status 200 and `isError: true`.
"""
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Request

from sqlmcp.core.exceptions import UnknownToolError
from sqlmcp.core.logging_config import get_logger
from sqlmcp.models.api import ErrorResponse, ToolCallResponse, ToolInfo
from sqlmcp.models.tools import TOOLS_BY_NAME
from sqlmcp.services.tool_service import ToolService

logger = get_logger(__name__)

router = APIRouter(
    prefix="/tools",
    tags=["Tools"],
)


def _tool_service(request: Request) -> ToolService:
    return request.app.state.tools


@router.get(
    "",
    response_model=List[ToolInfo],
    summary="List available tools",
)
async def list_tools(request: Request) -> List[ToolInfo]:
    return [
        ToolInfo(name=tool.name, description=tool.description, inputSchema=tool.input_schema())
        for tool in _tool_service(request).list_tools()
    ]


@router.post(
    "/{name}",
    response_model=ToolCallResponse,
    summary="Invoke a tool",
    description="Call a tool with a JSON object of arguments.",
    responses={404: {"model": ErrorResponse, "description": "Unknown tool name"}},
)
async def call_tool(
    name: str,
    request: Request,
    arguments: Optional[Dict[str, Any]] = Body(default=None),
) -> ToolCallResponse:
    if name not in TOOLS_BY_NAME:
        raise UnknownToolError(name)

    logger.info(f"HTTP tool call: {name}")
    response = await _tool_service(request).call(name, arguments)
    return ToolCallResponse.model_validate(response.to_dict())
