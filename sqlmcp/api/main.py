"""
FastAPI Application Entry Point.

Serves the database tools over HTTP as an alternative to the MCP stdio
transport. It handles:
1. Application initialization around one SessionManager
2. Router registration
3. Exception handlers for request-level errors
4. Startup auto-connect and shutdown disconnect

Run with: sqlmcp-http
"""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from sqlmcp.api.routes import health_router, tools_router
from sqlmcp.core.config import get_settings, load_environment
from sqlmcp.core.exceptions import DatabaseToolError
from sqlmcp.core.logging_config import get_logger, setup_logging
from sqlmcp.database.bootstrap import auto_connect
from sqlmcp.database.session import SessionManager
from sqlmcp.services.tool_service import ToolService

logger = get_logger(__name__)


def create_app(
    session: Optional[SessionManager] = None,
    auto_connect_on_startup: bool = True,
) -> FastAPI:
    """
    Build the HTTP application.

    Args:
        session: Session to serve. A new one reading os.environ is created when omitted.
        auto_connect_on_startup: Run the environment auto-connect in the lifespan.

    Returns:
        Configured FastAPI application
    """
    settings = get_settings()
    session = session or SessionManager()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting {settings.app_name} HTTP surface in {settings.app_env} mode")
        if auto_connect_on_startup:
            await auto_connect(session)

        yield

        logger.info(f"Shutting down {settings.app_name}")
        await session.disconnect()

    app = FastAPI(
        title="PostgreSQL/MySQL Tools API",
        description="Connect to one PostgreSQL or MySQL database and run SQL, list tables and describe columns.",
        version=settings.server_version,
        lifespan=lifespan,
    )
    app.state.session = session
    app.state.tools = ToolService(session)

    @app.exception_handler(DatabaseToolError)
    async def tool_error_handler(request: Request, exc: DatabaseToolError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled exception: {exc}")
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_error",
                "message": "An unexpected error occurred",
                "details": str(exc) if settings.is_development() else None,
            },
        )

    app.include_router(health_router)
    app.include_router(tools_router)

    return app


def run() -> None:
    """Console entry point for the HTTP surface."""
    import uvicorn

    load_environment()
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_dir)
    uvicorn.run(create_app(), host=settings.http_host, port=settings.http_port)


if __name__ == "__main__":
    run()
