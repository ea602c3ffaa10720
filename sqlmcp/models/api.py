"""
Request and Response models for the HTTP surface.
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field


class TextContent(BaseModel):
    """One text item of a tool result."""
    type: Literal["text"] = "text"
    text: str


class ToolCallResponse(BaseModel):
    """Result of POST /tools/{name}; mirrors the MCP CallToolResult shape."""
    content: List[TextContent]
    isError: bool = Field(default=False, description="True when the tool call failed")


class ToolInfo(BaseModel):
    """Catalogue entry returned by GET /tools."""
    name: str
    description: str
    inputSchema: Dict[str, Any]


class HealthResponse(BaseModel):
    """Response model for health check endpoints."""
    status: str = Field(..., examples=["healthy"])
    version: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    database: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Connection status (readiness check only)"
    )


class ErrorResponse(BaseModel):
    """Body returned for request-level failures."""
    error: str
    message: str
    details: Optional[str] = None
