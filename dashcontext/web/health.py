"""Health check endpoint logic."""

from __future__ import annotations

import structlog

from dashcontext import __version__
from dashcontext.config.settings import get_settings

logger = structlog.get_logger(__name__)


async def check_health() -> dict[str, object]:
    """Return service health; a failing directory database degrades, never errors."""
    settings = get_settings()
    result: dict[str, object] = {
        "status": "healthy",
        "version": __version__,
        "directory": "in_memory",
    }
    if not settings.use_database:
        return result

    result["directory"] = "connected"
    try:
        from sqlalchemy import text

        from dashcontext.storage.database import get_engine

        async with get_engine().connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as exc:
        logger.warning("health_check_db_failed", error=str(exc))
        result["directory"] = "unavailable"
        result["status"] = "degraded"

    return result
