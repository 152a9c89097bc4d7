"""System and transparency endpoints for the Reveal API."""

from __future__ import annotations

import logging
import time

from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from reveal.api.v1.dependencies import SessionDep
from reveal.core.settings import settings
from reveal.schemas.moderation import FlagReasonsResponse
from reveal.services.moderation import flag_reasons

logger = logging.getLogger(__name__)

router = APIRouter(tags=["system"])


@router.get("/health")
async def health_check(db: SessionDep) -> dict[str, object]:
    """Health check endpoint reporting database connectivity."""
    try:
        db.execute(text("SELECT 1"))
        db_status = "healthy"
    except SQLAlchemyError as e:
        logger.warning("Health check database probe failed: %s", e)
        db_status = f"unhealthy: {e}"

    return {
        "status": "healthy" if db_status == "healthy" else "unhealthy",
        "service": "reveal-api",
        "timestamp": int(time.time()),
        "components": {"database": db_status},
        "version": settings.app_version,
    }


@router.get("/flag-reasons", response_model=FlagReasonsResponse)
async def get_flag_reasons() -> FlagReasonsResponse:
    """Return the accepted flag reasons with labels."""
    return FlagReasonsResponse(reasons=flag_reasons())


@router.get("/system/config")
async def get_public_config() -> dict[str, object]:
    """Return a sanitized snapshot of public runtime configuration.

    Excludes the salt and connection strings.
    """
    return {
        "app": {
            "name": settings.app_name,
            "version": settings.app_version,
            "environment": settings.environment,
        },
        "throttles": {
            action: {"limit": limit, "window_seconds": window}
            for action, (limit, window) in settings.throttle_limits.items()
        },
        "moderation": {
            "flag_thresholds": settings.flag_thresholds,
        },
        "content": {
            "post_title_max_length": settings.post_title_max_length,
            "post_body_max_length": settings.post_body_max_length,
            "post_body_min_length": settings.post_body_min_length,
            "comment_body_max_length": settings.comment_body_max_length,
            "feed_default_limit": settings.feed_default_limit,
            "feed_max_limit": settings.feed_max_limit,
        },
    }
