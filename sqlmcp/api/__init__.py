"""
API module - HTTP surface for the database tools.
"""
from sqlmcp.api.main import create_app

__all__ = ["create_app"]
