"""
Services module - business logic orchestration.

This module provides:
- ToolService: dispatches tool calls to the database session
"""
from sqlmcp.services.tool_service import ToolService, ToolResponse, to_json, connection_message

__all__ = [
    "ToolService",
    "ToolResponse",
    "to_json",
    "connection_message",
]
