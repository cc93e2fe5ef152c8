"""
AboApp Backend — Reminder Job Route
=====================================

What:  GET /api/reminder-run executes one reminder pass.
Who:   An external scheduler (cron) hits it once a day. Only GET is routed,
       so any other method gets FastAPI's 405 Method Not Allowed.

Failures reach the global handlers and come back as {error, message}.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from aboapp.database import get_db_session
from aboapp.schemas.common import ErrorResponse
from aboapp.schemas.reminder import ReminderRunResponse
from aboapp.services.reminder_service import reminder_service

router = APIRouter(prefix="/api", tags=["Reminders"])


@router.get(
    "/reminder-run",
    response_model=ReminderRunResponse,
    responses={500: {"description": "Reminder run failed", "model": ErrorResponse}},
    summary="Send renewal reminders for subscriptions due in N days",
)
async def run_reminders(db: AsyncSession = Depends(get_db_session)) -> ReminderRunResponse:
    return await reminder_service.run(db)
