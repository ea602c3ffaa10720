"""
Connection configuration resolution.

Merges connection fields supplied by the caller with fields found in the
environment. Precedence, from strongest to weakest:

1. explicit caller-supplied fields
2. backend-specific variables (POSTGRES_*, MYSQL_*)
3. generic variables (DB_*), honoured for PostgreSQL only

Resolution is a pure function of its inputs: the environment is passed in as
a mapping (defaulting to os.environ) and nothing is cached or mutated.
"""
import os
from typing import Mapping, Optional

from sqlmcp.core.exceptions import ConfigIncompleteError, ConfigurationError, UnsupportedBackendError
from sqlmcp.core.logging_config import get_logger
from sqlmcp.database.models import ConnectionConfig, DatabaseType, PartialConnectionConfig

logger = get_logger(__name__)

TYPE_VARIABLES = ("DB_TYPE", "DATABASE_TYPE")
CONNECTION_FIELDS = ("host", "port", "database", "user", "password")

# Variable prefixes searched per backend, in precedence order
NAMESPACES = {
    DatabaseType.POSTGRESQL: ("POSTGRES", "DB"),
    DatabaseType.MYSQL: ("MYSQL",),
}

CONFIG_HINT = (
    "Provide all parameters or set environment variables:\n"
    "For PostgreSQL: DB_TYPE=postgresql, DB_HOST, DB_PORT, DB_DATABASE, DB_USER, DB_PASSWORD "
    "(or POSTGRES_HOST, POSTGRES_PORT, POSTGRES_DATABASE, POSTGRES_USER, POSTGRES_PASSWORD)\n"
    "For MySQL: DB_TYPE=mysql, MYSQL_HOST, MYSQL_PORT, MYSQL_DATABASE, MYSQL_USER, MYSQL_PASSWORD"
)


def _lookup(environ: Mapping[str, str], name: str) -> Optional[str]:
    value = environ.get(name)
    if value is None or value == "":
        return None
    return value


def _first(environ: Mapping[str, str], names) -> Optional[str]:
    for name in names:
        value = _lookup(environ, name)
        if value is not None:
            return value
    return None


def _parse_port(value, source: str) -> Optional[int]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ConfigurationError(f"Invalid port {value!r} in {source}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"Invalid port {value!r} in {source}")


def detect_database_type(environ: Optional[Mapping[str, str]] = None) -> Optional[DatabaseType]:
    """
    Work out which backend the environment describes.

    An explicit DB_TYPE/DATABASE_TYPE wins; unrecognised values fall back to
    PostgreSQL with a warning. Without one, any MYSQL_* connection variable
    selects MySQL, and a PostgreSQL or generic host/database selects
    PostgreSQL.

    Args:
        environ: Environment mapping. Defaults to os.environ.

    Returns:
        The detected backend, or None when nothing is configured
    """
    environ = os.environ if environ is None else environ

    declared = _first(environ, TYPE_VARIABLES)
    if declared is not None:
        normalized = declared.strip().lower()
        if normalized == DatabaseType.MYSQL.value:
            return DatabaseType.MYSQL
        if normalized != DatabaseType.POSTGRESQL.value:
            logger.warning(f"Unrecognised database type '{declared}', defaulting to postgresql")
        return DatabaseType.POSTGRESQL

    mysql_names = [f"MYSQL_{name.upper()}" for name in CONNECTION_FIELDS + ("ssl",)]
    if _first(environ, mysql_names) is not None:
        return DatabaseType.MYSQL

    postgres_names = ("POSTGRES_HOST", "DB_HOST", "POSTGRES_DATABASE", "DB_DATABASE")
    if _first(environ, postgres_names) is not None:
        return DatabaseType.POSTGRESQL

    return None


def read_environment(
    environ: Optional[Mapping[str, str]] = None,
    db_type: Optional[DatabaseType] = None,
) -> PartialConnectionConfig:
    """
    Collect the connection fields the environment provides for one backend.

    Args:
        environ: Environment mapping. Defaults to os.environ.
        db_type: Backend whose namespace to read. Detected when omitted.

    Returns:
        Partial configuration; fields absent from the environment are None

    Raises:
        ConfigurationError: If a port variable is not an integer
    """
    environ = os.environ if environ is None else environ
    db_type = db_type or detect_database_type(environ)
    if db_type is None:
        return PartialConnectionConfig()

    prefixes = NAMESPACES[db_type]
    values = {}
    for name in CONNECTION_FIELDS:
        names = [f"{prefix}_{name.upper()}" for prefix in prefixes]
        values[name] = _first(environ, names)
        if name == "port" and values[name] is not None:
            source = next(n for n in names if _lookup(environ, n) is not None)
            values[name] = _parse_port(values[name], source)

    ssl_names = {"DB_SSL", f"{prefixes[0]}_SSL"}
    ssl = True if any(environ.get(name) == "true" for name in ssl_names) else None

    return PartialConnectionConfig(type=db_type, ssl=ssl, **values)


def _coerce_explicit(explicit: PartialConnectionConfig) -> PartialConnectionConfig:
    db_type = explicit.type
    if db_type not in (None, "") and not isinstance(db_type, DatabaseType):
        try:
            db_type = DatabaseType(str(db_type).lower())
        except ValueError:
            raise UnsupportedBackendError(db_type)
    port = explicit.port
    if port not in (None, "") and not isinstance(port, int):
        port = _parse_port(port, "port argument")
    return PartialConnectionConfig(
        type=db_type or None,
        host=explicit.host,
        port=port,
        database=explicit.database,
        user=explicit.user,
        password=explicit.password,
        ssl=explicit.ssl,
    )


def resolve_config(
    explicit: Optional[PartialConnectionConfig] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ConnectionConfig:
    """
    Build a complete connection configuration.

    Args:
        explicit: Fields supplied by the caller; each one overrides the
            environment. An explicit type also selects which environment
            namespace is read.
        environ: Environment mapping. Defaults to os.environ.

    Returns:
        Complete ConnectionConfig

    Raises:
        ConfigIncompleteError: If required fields are missing after merging
        ConfigurationError: If a port value is not an integer
        UnsupportedBackendError: If the explicit type is not a supported backend
    """
    environ = os.environ if environ is None else environ
    explicit = _coerce_explicit(explicit or PartialConnectionConfig())

    db_type = explicit.type or detect_database_type(environ)
    from_env = read_environment(environ, db_type) if db_type else PartialConnectionConfig()
    merged = explicit.merged_over(from_env)

    missing = merged.missing_fields()
    if missing:
        raise ConfigIncompleteError(missing, CONFIG_HINT)

    return ConnectionConfig(
        type=merged.type,
        host=merged.host,
        port=merged.port,
        database=merged.database,
        user=merged.user,
        password=merged.password,
        ssl=bool(merged.ssl),
    )
