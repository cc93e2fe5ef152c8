"""
AboApp Backend — Reminder Job Schemas
=======================================
"""

import uuid
from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field


class SendOutcome(BaseModel):
    """Result of one reminder email."""
    sub_id: uuid.UUID
    status: Optional[int] = Field(description="Email provider HTTP status, null if unreachable")
    error: Optional[str] = None


class ReminderRunResponse(BaseModel):
    """
    Body of a successful GET /api/reminder-run.

    count is the number of matched subscriptions; `sent` only holds the ones
    whose owner email could be resolved.
    """
    ok: bool = True
    target: date
    count: int
    sent: List[SendOutcome]
