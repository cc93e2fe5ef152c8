"""
AboApp Backend — Subscription Route Handlers
==============================================

What:  Listing, create, reactivate, delete, and the monthly cost overview.
How:   Thin handlers: resolve the user, delegate to SubscriptionService,
       return its result. All rules live in the service.
Who:   Called by the app's home and cost screens.

Every mutating endpoint answers with the complete, freshly re-read listing
(same shape as GET /api/subscriptions), so the client replaces its state
instead of patching it.
"""

import logging
from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from aboapp.database import get_db_session
from aboapp.routes.deps import get_current_user
from aboapp.schemas.auth import UserContext
from aboapp.schemas.common import ErrorResponse
from aboapp.schemas.subscription import (
    CostSummaryResponse,
    ReactivateRequest,
    SubscriptionCreate,
    SubscriptionListResponse,
)
from aboapp.services.subscription_service import subscription_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Subscriptions"])

_AUTH_ERRORS = {401: {"description": "Not signed in", "model": ErrorResponse}}


@router.get(
    "/subscriptions",
    response_model=SubscriptionListResponse,
    responses={**_AUTH_ERRORS, 500: {"description": "Store error", "model": ErrorResponse}},
    summary="List the user's subscriptions grouped by section",
)
async def list_subscriptions(
    user: UserContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> SubscriptionListResponse:
    return await subscription_service.list_subscriptions(db, user)


@router.post(
    "/subscriptions",
    response_model=SubscriptionListResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        **_AUTH_ERRORS,
        400: {"description": "Rejected input, nothing stored", "model": ErrorResponse},
        500: {"description": "Store error", "model": ErrorResponse},
    },
    summary="Create a subscription",
    description=(
        "Creates an active (is_active=true) or paused subscription. Active "
        "subscriptions need next_renewal_date. Returns the refreshed listing."
    ),
)
async def create_subscription(
    payload: SubscriptionCreate,
    user: UserContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> SubscriptionListResponse:
    return await subscription_service.create_subscription(db, user, payload)


@router.post(
    "/subscriptions/{subscription_id}/reactivate",
    response_model=SubscriptionListResponse,
    responses={
        **_AUTH_ERRORS,
        400: {"description": "Not paused, or no renewal date known", "model": ErrorResponse},
        404: {"description": "Subscription not found", "model": ErrorResponse},
    },
    summary="Reactivate a paused subscription",
    description=(
        "Uses the stored renewal date when there is one; otherwise "
        "next_renewal_date must be supplied in the body."
    ),
)
async def reactivate_subscription(
    subscription_id: UUID,
    payload: Optional[ReactivateRequest] = None,
    user: UserContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> SubscriptionListResponse:
    next_renewal_date = payload.next_renewal_date if payload else None
    return await subscription_service.reactivate_subscription(
        db, user, subscription_id, next_renewal_date
    )


@router.delete(
    "/subscriptions/{subscription_id}",
    response_model=SubscriptionListResponse,
    responses={
        **_AUTH_ERRORS,
        404: {"description": "Subscription not found", "model": ErrorResponse},
    },
    summary="Delete a subscription permanently",
)
async def delete_subscription(
    subscription_id: UUID,
    user: UserContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> SubscriptionListResponse:
    return await subscription_service.delete_subscription(db, user, subscription_id)


@router.get(
    "/costs",
    response_model=CostSummaryResponse,
    responses=_AUTH_ERRORS,
    summary="Monthly cost overview",
)
async def cost_summary(
    month: Optional[date] = Query(
        default=None,
        description="Any day of the month to show (YYYY-MM-DD); defaults to the current month",
    ),
    user: UserContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> CostSummaryResponse:
    return await subscription_service.cost_summary(db, user, month)
