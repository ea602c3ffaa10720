"""
Server module - MCP stdio transport.
"""
from sqlmcp.server.stdio import build_server, serve, main

__all__ = [
    "build_server",
    "serve",
    "main",
]
