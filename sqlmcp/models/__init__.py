"""
Models module - tool argument schemas and the tool catalogue.
"""
from sqlmcp.models.tools import (
    ConnectDatabaseArgs,
    ExecuteQueryArgs,
    DescribeTableArgs,
    NoArgs,
    ToolDefinition,
    TOOLS,
    TOOLS_BY_NAME,
)

__all__ = [
    "ConnectDatabaseArgs",
    "ExecuteQueryArgs",
    "DescribeTableArgs",
    "NoArgs",
    "ToolDefinition",
    "TOOLS",
    "TOOLS_BY_NAME",
]
