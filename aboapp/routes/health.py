"""
AboApp Backend — Health Check Route
=====================================

What:  Health check endpoint for monitoring and container probes.
How:   Runs SELECT 1 against the database and reports whether the auth and
       email collaborators are configured. Collaborators are not called:
       a probe every few seconds must not send mail or hit rate limits.

Status levels:
    - healthy:   database reachable, collaborators configured
    - degraded:  database reachable, a collaborator credential is missing
    - unhealthy: database unreachable
"""

import logging
import time

from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from aboapp import __version__
from aboapp.config import settings
from aboapp.database import engine
from aboapp.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check() -> HealthResponse:
    db_status = "connected"
    overall = "healthy"

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    auth_ready = bool(settings.supabase_url and settings.supabase_anon_key)
    email_ready = bool(settings.resend_api_key)
    if overall == "healthy" and not (auth_ready and email_ready):
        overall = "degraded"

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        auth_provider="configured" if auth_ready else "missing",
        email_provider="configured" if email_ready else "missing",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
