"""
Session Manager - the single active database connection.

A SessionManager is either Disconnected (no config, no adapter) or Connected
(one resolved config and the adapter that owns its pool). Connecting while
already Connected tears the previous pool down first, and a failed connect
leaves the session Disconnected.

The manager is a plain object passed to whoever needs it; tests build as many
independent sessions as they like. It does not serialize concurrent callers:
overlapping connect/disconnect calls race on the single slot.

Example:
    >>> session = SessionManager()
    >>> await session.connect(PartialConnectionConfig(type=DatabaseType.POSTGRESQL, ...))
    >>> result = await session.execute_query("SELECT * FROM users WHERE id = $1", [123])
    >>> await session.disconnect()
"""
from typing import Any, Dict, List, Mapping, Optional, Sequence

from sqlmcp.core.exceptions import NotConnectedError
from sqlmcp.core.logging_config import get_logger
from sqlmcp.database.adapters import AdapterFactory, BackendAdapter, create_adapter
from sqlmcp.database.models import ConnectionConfig, PartialConnectionConfig, QueryResult
from sqlmcp.database.resolver import resolve_config

logger = get_logger(__name__)


class SessionManager:
    """Owns at most one connected backend adapter."""

    def __init__(
        self,
        environ: Optional[Mapping[str, str]] = None,
        adapter_factory: AdapterFactory = create_adapter,
    ):
        """
        Args:
            environ: Environment mapping used to fill in connection fields.
                Defaults to os.environ at resolution time.
            adapter_factory: Builds an adapter for a database type.
        """
        self._environ = environ
        self._adapter_factory = adapter_factory
        self._config: Optional[ConnectionConfig] = None
        self._adapter: Optional[BackendAdapter] = None

    @property
    def environ(self) -> Optional[Mapping[str, str]]:
        return self._environ

    @property
    def is_connected(self) -> bool:
        return self._adapter is not None

    @property
    def active_config(self) -> Optional[ConnectionConfig]:
        return self._config

    def status(self) -> Dict[str, Any]:
        """Describe the current connection without exposing the password."""
        if self._config is None:
            return {"connected": False}
        return {"connected": True, **self._config.to_dict()}

    async def connect(self, explicit: Optional[PartialConnectionConfig] = None) -> ConnectionConfig:
        """
        Resolve a configuration and connect to it.

        Args:
            explicit: Caller-supplied fields; missing ones come from the environment.

        Returns:
            The configuration now in use

        Raises:
            ConfigIncompleteError: If required fields are missing (no network call is made)
            DatabaseConnectionError: If the backend cannot be reached or probed
        """
        config = resolve_config(explicit, self._environ)
        return await self.open(config)

    async def open(self, config: ConnectionConfig) -> ConnectionConfig:
        """
        Connect to an already resolved configuration.

        Any existing connection is closed first, even if the new one then fails.
        """
        await self.disconnect()

        adapter = self._adapter_factory(config.type)
        logger.info(f"Connecting to {config.describe()} (ssl={config.ssl})")
        try:
            await adapter.connect(config)
        except Exception as exc:
            logger.error(f"Failed to connect to {config.describe()}: {exc}")
            raise

        self._config = config
        self._adapter = adapter
        logger.info(f"Session connected: {config.describe()}")
        return config

    async def execute_query(self, sql: str, params: Optional[Sequence[Any]] = None) -> QueryResult:
        """
        Run a statement on the active connection.

        Raises:
            NotConnectedError: If no connection is active
            QueryError: If the database rejects the statement
        """
        adapter = self._require_adapter()
        logger.info(f"Executing query: {sql[:100]}")
        return await adapter.run_query(sql, list(params) if params else [])

    async def list_tables(self) -> List[str]:
        return await self._require_adapter().list_tables()

    async def describe_table(self, table_name: str) -> List[Dict[str, Any]]:
        return await self._require_adapter().describe_table(table_name)

    async def disconnect(self) -> bool:
        """
        Close the active connection, if any.

        Returns:
            True if a connection was closed, False if there was none
        """
        adapter, config = self._adapter, self._config
        if adapter is None:
            return False

        self._adapter = None
        self._config = None
        await adapter.close()
        logger.info(f"Session disconnected from {config.describe()}")
        return True

    def _require_adapter(self) -> BackendAdapter:
        if self._adapter is None:
            raise NotConnectedError()
        return self._adapter
