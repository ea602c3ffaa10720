"""
Custom Exceptions - Error kinds raised by the database tools.

Every exception carries an error code and an HTTP-style status code so both
the MCP transport and the HTTP surface can report failures consistently.
The message text of driver errors is kept verbatim.
"""
from typing import Iterable, Optional


class DatabaseToolError(Exception):
    """
    Base exception for all tool errors.

    Subclass this for specific error types.
    """
    status_code: int = 500
    error_code: str = "internal_error"

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        """Convert to error response dict."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details
        }


class ConfigurationError(DatabaseToolError):
    """Raised when a configuration value cannot be used (e.g. a non-numeric port)."""
    status_code = 400
    error_code = "invalid_config"


class ConfigIncompleteError(ConfigurationError):
    """Raised when the merged connection configuration is missing required fields."""
    error_code = "config_incomplete"

    def __init__(self, missing: Iterable[str], hint: str):
        self.missing = tuple(missing)
        missing_text = ", ".join(self.missing) if self.missing else "type"
        super().__init__(
            message=f"Incomplete database configuration (missing: {missing_text}). {hint}",
            details=f"missing={missing_text}"
        )


class DatabaseConnectionError(DatabaseToolError):
    """Raised when a backend driver fails to open or probe a connection."""
    status_code = 502
    error_code = "connection_error"


class NotConnectedError(DatabaseToolError):
    """Raised when an operation needs an active connection and there is none."""
    status_code = 409
    error_code = "not_connected"

    def __init__(self, message: str = "Not connected to any database. Call connect_database first."):
        super().__init__(message)


class QueryError(DatabaseToolError):
    """Raised when the database rejects a submitted statement."""
    status_code = 400
    error_code = "query_error"


class UnsupportedBackendError(DatabaseToolError):
    """Raised when a database type outside {postgresql, mysql} reaches adapter selection."""
    status_code = 400
    error_code = "unsupported_backend"

    def __init__(self, db_type: object):
        super().__init__(
            message=f"Unsupported database type: {db_type}",
            details=f"type={db_type}"
        )
        self.db_type = db_type


class ToolArgumentError(DatabaseToolError):
    """Raised when tool arguments fail validation."""
    status_code = 422
    error_code = "invalid_arguments"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, details=f"field={field}" if field else None)
        self.field = field


class UnknownToolError(DatabaseToolError):
    """Raised when a tool name is not part of the catalogue."""
    status_code = 404
    error_code = "unknown_tool"

    def __init__(self, name: str):
        super().__init__(message=f"Unknown tool: {name}", details=f"tool={name}")
        self.name = name
