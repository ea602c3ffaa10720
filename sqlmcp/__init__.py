"""
sqlmcp - PostgreSQL/MySQL tools for the Model Context Protocol.

Exposes one database session at a time through five tools:
connect_database, execute_query, list_tables, describe_table and
disconnect_database.
"""
__version__ = "1.0.0"
