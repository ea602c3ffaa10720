"""
Configuration management via environment variables.

Process-level settings (logging, HTTP surface, identity) are read from the
environment. A `.env` file is loaded with python-dotenv by the entry points
through `load_environment()` before settings are first accessed.

Database connection variables (DB_*, POSTGRES_*, MYSQL_*) are deliberately not
part of Settings: they are consumed by `sqlmcp.database.resolver`, which reads
them from an injectable mapping.
"""
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from sqlmcp import __version__

SERVER_NAME = "postgres-mysql-mcp-server"


def load_environment(env_file: Optional[Path] = None) -> bool:
    """
    Load variables from a .env file into os.environ.

    Variables already present in the environment are not overridden.

    Args:
        env_file: Explicit path to a .env file. Defaults to searching from
            the current working directory.

    Returns:
        True if a .env file was found and loaded
    """
    if env_file is not None:
        return load_dotenv(env_file)
    return load_dotenv(Path.cwd() / ".env")


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Attributes:
        app_name: Server identity reported to clients and used in logs
        app_env: Environment name (development, production)
        log_level: Console logging verbosity
        log_dir: Directory for daily log files; file logging is off when unset
        http_host: Bind address for the HTTP surface
        http_port: Bind port for the HTTP surface
        server_version: Version reported during the MCP handshake
    """
    app_name: str
    app_env: str
    log_level: str
    log_dir: Optional[str]
    http_host: str
    http_port: int
    server_version: str

    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.app_env.lower() == "development"


def _get_env(key: str, default: Optional[str] = None) -> Optional[str]:
    value = os.environ.get(key)
    if value is None or value.strip() == "":
        return default
    return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings instance built from the current environment

    Raises:
        ValueError: If HTTP_PORT is not an integer
    """
    http_port = _get_env("HTTP_PORT", "8000")
    try:
        port = int(http_port)
    except ValueError:
        raise ValueError(f"HTTP_PORT must be an integer, got '{http_port}'")

    return Settings(
        app_name=_get_env("APP_NAME", SERVER_NAME),
        app_env=_get_env("APP_ENV", "production"),
        log_level=_get_env("LOG_LEVEL", "INFO").upper(),
        log_dir=_get_env("LOG_DIR"),
        http_host=_get_env("HTTP_HOST", "127.0.0.1"),
        http_port=port,
        server_version=__version__,
    )
