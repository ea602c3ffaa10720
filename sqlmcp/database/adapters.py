"""Backend adapter protocol and the registry that selects a variant by type."""
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence, runtime_checkable

from sqlmcp.core.exceptions import UnsupportedBackendError
from sqlmcp.database.models import ConnectionConfig, DatabaseType, QueryResult
from sqlmcp.database.mysql_adapter import MySQLAdapter
from sqlmcp.database.postgres_adapter import PostgresAdapter


@runtime_checkable
class BackendAdapter(Protocol):
    """Operations every backend implements."""

    async def connect(self, config: ConnectionConfig) -> None:
        """Open the pool for `config` and probe it."""

    async def test_connection(self) -> None:
        """Round-trip a trivial query on the open pool."""

    async def run_query(self, sql: str, params: Optional[Sequence[Any]] = None) -> QueryResult:
        """Run a statement verbatim with positional parameters."""

    async def list_tables(self) -> List[str]:
        """Table names in the default schema, ordered as the backend reports them."""

    async def describe_table(self, table_name: str) -> List[Dict[str, Any]]:
        """Column records in the backend's native shape."""

    async def close(self) -> None:
        """Release pooled connections; idempotent."""


AdapterFactory = Callable[[DatabaseType], BackendAdapter]

ADAPTERS: Dict[DatabaseType, Callable[[], BackendAdapter]] = {
    DatabaseType.POSTGRESQL: PostgresAdapter,
    DatabaseType.MYSQL: MySQLAdapter,
}


def create_adapter(db_type: DatabaseType) -> BackendAdapter:
    """
    Instantiate the adapter registered for `db_type`.

    Raises:
        UnsupportedBackendError: If no adapter is registered for the type
    """
    try:
        factory = ADAPTERS[DatabaseType(db_type)]
    except (KeyError, ValueError):
        raise UnsupportedBackendError(getattr(db_type, "value", db_type))
    return factory()
