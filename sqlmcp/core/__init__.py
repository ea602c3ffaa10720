"""
Core module - Configuration and cross-cutting concerns.

This module provides:
- config.py         : Environment-based settings and .env loading
- logging_config.py : Centralized logging setup
- exceptions.py     : Error kinds shared by every layer
"""
from sqlmcp.core.config import get_settings, load_environment, Settings, SERVER_NAME
from sqlmcp.core.logging_config import setup_logging, get_logger
from sqlmcp.core.exceptions import (
    DatabaseToolError,
    ConfigurationError,
    ConfigIncompleteError,
    DatabaseConnectionError,
    NotConnectedError,
    QueryError,
    UnsupportedBackendError,
    ToolArgumentError,
    UnknownToolError,
)

__all__ = [
    "get_settings",
    "load_environment",
    "Settings",
    "SERVER_NAME",
    "setup_logging",
    "get_logger",
    "DatabaseToolError",
    "ConfigurationError",
    "ConfigIncompleteError",
    "DatabaseConnectionError",
    "NotConnectedError",
    "QueryError",
    "UnsupportedBackendError",
    "ToolArgumentError",
    "UnknownToolError",
]
