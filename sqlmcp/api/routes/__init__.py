"""
API Routes module - Endpoint definitions.

- health.py : Health and readiness endpoints
- tools.py  : Tool catalogue and invocation
"""
from sqlmcp.api.routes.health import router as health_router
from sqlmcp.api.routes.tools import router as tools_router

__all__ = [
    "health_router",
    "tools_router",
]
