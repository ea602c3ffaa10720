"""
Health Check Routes - liveness and readiness endpoints.
"""
from fastapi import APIRouter, Request

from sqlmcp.core.config import get_settings
from sqlmcp.core.logging_config import get_logger
from sqlmcp.models.api import HealthResponse

logger = get_logger(__name__)

router = APIRouter(
    prefix="/health",
    tags=["Health"],
)


@router.get(
    "",
    response_model=HealthResponse,
    summary="Health check endpoint",
    description="Returns 200 OK while the process is serving requests.",
)
async def health_check() -> HealthResponse:
    logger.debug("Health check requested")
    return HealthResponse(status="healthy", version=get_settings().server_version)


@router.get(
    "/ready",
    response_model=HealthResponse,
    summary="Readiness check endpoint",
    description="""
    Reports whether the server can take tool calls, together with the
    current database session status. A Disconnected session is still
    ready: connect_database can be called at any time.
    """,
)
async def readiness_check(request: Request) -> HealthResponse:
    """Include the session status so operators can see what is connected."""
    logger.debug("Readiness check requested")
    session = request.app.state.session
    return HealthResponse(
        status="ready",
        version=get_settings().server_version,
        database=session.status(),
    )
