"""
Startup auto-connect.

If the environment alone describes a complete connection, open it before the
first tool call arrives. Nothing here raises: a missing or unreachable
database only means the server starts Disconnected.
"""
from typing import Mapping, Optional

from sqlmcp.core.exceptions import ConfigIncompleteError, DatabaseToolError
from sqlmcp.core.logging_config import get_logger
from sqlmcp.database.resolver import resolve_config
from sqlmcp.database.session import SessionManager

logger = get_logger(__name__)


async def auto_connect(
    session: SessionManager,
    environ: Optional[Mapping[str, str]] = None,
) -> bool:
    """
    Connect `session` using environment variables only.

    Args:
        session: Session to populate
        environ: Environment mapping. Defaults to the session's own.

    Returns:
        True if the session is now connected
    """
    environ = session.environ if environ is None else environ

    try:
        config = resolve_config(None, environ)
    except ConfigIncompleteError as exc:
        logger.info(f"Auto-connect skipped, environment incomplete (missing: {', '.join(exc.missing)})")
        return False
    except DatabaseToolError as exc:
        logger.warning(f"Auto-connect skipped: {exc.message}")
        return False

    try:
        await session.open(config)
    except DatabaseToolError as exc:
        logger.error(f"Failed to auto-connect from environment variables: {exc.message}")
        return False
    except Exception:
        logger.exception("Unexpected error during auto-connect")
        return False

    logger.info("Auto-connected to database using environment variables")
    return True
