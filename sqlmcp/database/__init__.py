"""
Database module - PostgreSQL/MySQL session layer.

This module handles:
- Connection configuration resolution (explicit fields + environment)
- Backend adapters for PostgreSQL (asyncpg) and MySQL (SQLAlchemy pool)
- The single-slot session and its startup auto-connect
"""
from sqlmcp.database.models import (
    ConnectionConfig,
    DatabaseType,
    PartialConnectionConfig,
    QueryResult,
)
from sqlmcp.database.resolver import detect_database_type, read_environment, resolve_config
from sqlmcp.database.adapters import BackendAdapter, create_adapter
from sqlmcp.database.postgres_adapter import PostgresAdapter
from sqlmcp.database.mysql_adapter import MySQLAdapter
from sqlmcp.database.session import SessionManager
from sqlmcp.database.bootstrap import auto_connect

__all__ = [
    # Models
    "ConnectionConfig",
    "DatabaseType",
    "PartialConnectionConfig",
    "QueryResult",
    # Resolver
    "detect_database_type",
    "read_environment",
    "resolve_config",
    # Adapters
    "BackendAdapter",
    "create_adapter",
    "PostgresAdapter",
    "MySQLAdapter",
    # Session
    "SessionManager",
    "auto_connect",
]
