"""
Tool argument models and the tool catalogue.

These Pydantic models define the contract between the client and the server:
they validate incoming arguments and generate the JSON Schema advertised for
each tool.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Literal, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field

from sqlmcp.database.models import DatabaseType, PartialConnectionConfig

ParamValue = Union[str, int, float, bool, None]


class ConnectDatabaseArgs(BaseModel):
    """Arguments for connect_database; every field may come from the environment instead."""
    model_config = ConfigDict(extra="ignore")

    type: Optional[Literal["postgresql", "mysql"]] = Field(
        default=None,
        description="Database type (optional if using env vars)"
    )
    host: Optional[str] = Field(default=None, description="Database host (optional if using env vars)")
    port: Optional[int] = Field(default=None, description="Database port (optional if using env vars)")
    database: Optional[str] = Field(default=None, description="Database name (optional if using env vars)")
    user: Optional[str] = Field(default=None, description="Database user (optional if using env vars)")
    password: Optional[str] = Field(default=None, description="Database password (optional if using env vars)")
    ssl: Optional[bool] = Field(default=None, description="Use SSL connection (optional)")

    def to_partial(self) -> PartialConnectionConfig:
        return PartialConnectionConfig(
            type=DatabaseType(self.type) if self.type else None,
            host=self.host,
            port=self.port,
            database=self.database,
            user=self.user,
            password=self.password,
            ssl=self.ssl,
        )


class ExecuteQueryArgs(BaseModel):
    """Arguments for execute_query."""
    model_config = ConfigDict(extra="ignore")

    query: str = Field(..., description="SQL query to execute")
    params: Optional[List[ParamValue]] = Field(
        default=None,
        description="Query parameters (for parameterized queries)"
    )


class DescribeTableArgs(BaseModel):
    """Arguments for describe_table."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    table_name: str = Field(..., alias="tableName", description="Name of the table to describe")


class NoArgs(BaseModel):
    """Tools that take no arguments."""
    model_config = ConfigDict(extra="ignore")


@dataclass(frozen=True)
class ToolDefinition:
    """One entry of the tool catalogue."""
    name: str
    description: str
    args_model: Type[BaseModel]

    def input_schema(self) -> Dict[str, Any]:
        """JSON Schema for the tool's arguments."""
        schema = self.args_model.model_json_schema(by_alias=True)
        schema.setdefault("properties", {})
        return schema


CONNECT_DATABASE = ToolDefinition(
    name="connect_database",
    description=(
        "Connect to a PostgreSQL or MySQL database. Parameters can be provided directly or "
        "loaded from environment variables. If no parameters are provided, will use environment "
        "variables (DB_TYPE, DB_HOST, DB_PORT, DB_DATABASE, DB_USER, DB_PASSWORD, DB_SSL). "
        "For PostgreSQL: POSTGRES_HOST, POSTGRES_PORT, etc. For MySQL: MYSQL_HOST, MYSQL_PORT, etc."
    ),
    args_model=ConnectDatabaseArgs,
)

EXECUTE_QUERY = ToolDefinition(
    name="execute_query",
    description=(
        "Execute a SQL query on the connected database. Returns query results. "
        "Use $1, $2, ... placeholders for PostgreSQL and ? for MySQL."
    ),
    args_model=ExecuteQueryArgs,
)

LIST_TABLES = ToolDefinition(
    name="list_tables",
    description="List all tables in the connected database",
    args_model=NoArgs,
)

DESCRIBE_TABLE = ToolDefinition(
    name="describe_table",
    description="Get schema information for a specific table",
    args_model=DescribeTableArgs,
)

DISCONNECT_DATABASE = ToolDefinition(
    name="disconnect_database",
    description="Disconnect from the current database",
    args_model=NoArgs,
)

TOOLS = (
    CONNECT_DATABASE,
    EXECUTE_QUERY,
    LIST_TABLES,
    DESCRIBE_TABLE,
    DISCONNECT_DATABASE,
)

TOOLS_BY_NAME = {tool.name: tool for tool in TOOLS}
