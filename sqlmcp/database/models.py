"""
Value types shared by the resolver, the adapters and the session manager.
"""
from dataclasses import dataclass, field, fields as dataclass_fields
from enum import Enum
from typing import Any, Dict, List, Optional


class DatabaseType(str, Enum):
    """Supported backends."""
    POSTGRESQL = "postgresql"
    MYSQL = "mysql"

    @property
    def label(self) -> str:
        """Display name used in user-facing messages."""
        return "PostgreSQL" if self is DatabaseType.POSTGRESQL else "MySQL"


REQUIRED_FIELDS = ("type", "host", "port", "database", "user", "password")


@dataclass(frozen=True)
class ConnectionConfig:
    """A complete description of one database target."""
    type: DatabaseType
    host: str
    port: int
    database: str
    user: str
    password: str
    ssl: bool = False

    def describe(self) -> str:
        """Render the target for logs, without the password."""
        return f"{self.type.value}://{self.user}@{self.host}:{self.port}/{self.database}"

    def to_dict(self) -> Dict[str, Any]:
        """Connection details safe to report back to callers."""
        return {
            "type": self.type.value,
            "host": self.host,
            "port": self.port,
            "database": self.database,
            "user": self.user,
            "ssl": self.ssl,
        }


@dataclass(frozen=True)
class PartialConnectionConfig:
    """
    Connection fields that may or may not be present.

    `ssl` stays None when it was not provided, so an explicit False can
    override an environment-derived True.
    """
    type: Optional[DatabaseType] = None
    host: Optional[str] = None
    port: Optional[int] = None
    database: Optional[str] = None
    user: Optional[str] = None
    password: Optional[str] = None
    ssl: Optional[bool] = None

    def missing_fields(self) -> List[str]:
        """Names of required fields that are still absent."""
        return [name for name in REQUIRED_FIELDS if getattr(self, name) in (None, "")]

    def merged_over(self, fallback: "PartialConnectionConfig") -> "PartialConnectionConfig":
        """Return a copy where every absent field is taken from `fallback`."""
        values = {}
        for item in dataclass_fields(self):
            value = getattr(self, item.name)
            values[item.name] = getattr(fallback, item.name) if value in (None, "") else value
        return PartialConnectionConfig(**values)


@dataclass
class QueryResult:
    """
    Normalized output of a statement, independent of the backend.

    `fields` entries keep the backend's own type descriptor: PostgreSQL
    reports `dataTypeID` (type OID), MySQL reports `type` (field type code).
    """
    rows: List[Dict[str, Any]] = field(default_factory=list)
    row_count: int = 0
    fields: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the wire shape returned by execute_query."""
        return {
            "rows": self.rows,
            "rowCount": self.row_count,
            "fields": self.fields,
        }
