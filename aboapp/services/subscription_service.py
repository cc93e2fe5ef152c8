"""
AboApp Backend — Subscription Service (Business Logic)
========================================================

What:  Create, list, reactivate, and delete the signed-in user's
       subscriptions, and build their cost overview.
How:   Every query is scoped to `user.user_id`. Validation happens before
       anything is written.
Who:   Called by the subscription routes.

Mutate, then resynchronize:
    Every mutating method flushes its write and then re-reads the user's
    complete listing in the same session, returning that instead of a
    patched copy. Clients replace their state with the response and never
    hold a view the store doesn't agree with.

Store failures are wrapped in StoreError carrying the store's message.
"""

import logging
from datetime import date
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from aboapp.config import settings
from aboapp.exceptions import NotFoundError, StoreError, ValidationError
from aboapp.models.subscription import (
    CYCLE_CUSTOM_DAYS,
    STATUS_ACTIVE,
    STATUS_CANCELED,
    STATUS_PAUSED,
    Subscription,
)
from aboapp.schemas.auth import UserContext
from aboapp.schemas.subscription import (
    CostSummaryResponse,
    SubscriptionCreate,
    SubscriptionListResponse,
    SubscriptionResponse,
)
from aboapp.services.costs import build_cost_summary, total_active_cents
from aboapp.services.dates import today_in_timezone
from aboapp.services.icons import GENERIC_ICON, icon_emoji, infer_icon_key
from aboapp.services.money import format_cents, parse_price_cents

logger = logging.getLogger(__name__)


def _store_error(action: str, error: SQLAlchemyError) -> StoreError:
    raw = str(getattr(error, "orig", None) or error)
    logger.error("Subscription store error while %s: %s", action, raw)
    return StoreError(message=raw, context={"action": action, "error_type": type(error).__name__})


def to_response(sub: Subscription) -> SubscriptionResponse:
    key = sub.icon_key or GENERIC_ICON
    return SubscriptionResponse(
        id=sub.id,
        name=sub.name,
        provider=sub.provider,
        icon_key=key,
        icon_emoji=icon_emoji(key),
        price_cents=sub.price_cents,
        price=format_cents(sub.price_cents),
        currency=sub.currency,
        cycle=sub.cycle,
        custom_days=sub.custom_days,
        start_date=sub.start_date,
        next_renewal_date=sub.next_renewal_date,
        status=sub.status,
        is_trial=sub.is_trial,
        notes=sub.notes,
        created_at=sub.created_at,
    )


def build_listing(subscriptions: List[Subscription]) -> SubscriptionListResponse:
    """Group an ordered listing by display section."""
    active = [s for s in subscriptions if s.status == STATUS_ACTIVE and not s.is_trial]
    trial = [s for s in subscriptions if s.status == STATUS_ACTIVE and s.is_trial]
    paused = [s for s in subscriptions if s.status == STATUS_PAUSED]
    canceled = [s for s in subscriptions if s.status == STATUS_CANCELED]
    total = total_active_cents(subscriptions)
    return SubscriptionListResponse(
        active=[to_response(s) for s in active],
        trial=[to_response(s) for s in trial],
        paused=[to_response(s) for s in paused],
        canceled=[to_response(s) for s in canceled],
        total_active_cents=total,
        total_active=format_cents(total),
    )


class SubscriptionService:
    """
    Stateless business logic for the subscription screens.

    Each method receives the request's session and the signed-in user;
    nothing is cached between calls.
    """

    async def load_subscriptions(self, db: AsyncSession, user: UserContext) -> List[Subscription]:
        """All of the user's subscriptions, soonest renewal first, undated last."""
        query = (
            select(Subscription)
            .where(Subscription.user_id == user.user_id)
            .order_by(
                Subscription.next_renewal_date.asc().nulls_last(),
                Subscription.created_at.asc(),
            )
        )
        try:
            result = await db.execute(query)
        except SQLAlchemyError as e:
            raise _store_error("listing subscriptions", e)
        return list(result.scalars().all())

    async def list_subscriptions(self, db: AsyncSession, user: UserContext) -> SubscriptionListResponse:
        return build_listing(await self.load_subscriptions(db, user))

    async def _get_owned(self, db: AsyncSession, user: UserContext, subscription_id: UUID) -> Subscription:
        query = select(Subscription).where(
            Subscription.id == subscription_id,
            Subscription.user_id == user.user_id,
        )
        try:
            result = await db.execute(query)
        except SQLAlchemyError as e:
            raise _store_error("loading subscription", e)
        sub = result.scalar_one_or_none()
        if sub is None:
            raise NotFoundError(resource="subscription", resource_id=str(subscription_id))
        return sub

    async def _flush(self, db: AsyncSession, action: str) -> None:
        try:
            await db.flush()
        except SQLAlchemyError as e:
            raise _store_error(action, e)

    async def create_subscription(
        self,
        db: AsyncSession,
        user: UserContext,
        payload: SubscriptionCreate,
    ) -> SubscriptionListResponse:
        """
        Validate and insert a new subscription, then return the fresh listing.

        Rules (checked before the insert):
            - is_active requires next_renewal_date
            - cycle 'custom_days' requires a positive custom_days; other
              cycles must not carry one
            - price must parse to a non-negative amount
        A paused subscription is stored without a renewal date.
        """
        status = STATUS_ACTIVE if payload.is_active else STATUS_PAUSED
        if status == STATUS_ACTIVE and payload.next_renewal_date is None:
            raise ValidationError(
                message="Active subscriptions need a next renewal date",
                field="next_renewal_date",
            )

        if payload.cycle == CYCLE_CUSTOM_DAYS:
            if payload.custom_days is None or payload.custom_days <= 0:
                raise ValidationError(
                    message="Custom billing cycles need a positive number of days",
                    field="custom_days",
                )
        elif payload.custom_days is not None:
            raise ValidationError(
                message="custom_days is only allowed with the custom_days cycle",
                field="custom_days",
            )

        price_cents = parse_price_cents(payload.price)

        sub = Subscription(
            user_id=user.user_id,
            name=payload.name,
            provider=payload.provider or None,
            icon_key=infer_icon_key(payload.provider),
            price_cents=price_cents,
            currency=payload.currency or settings.default_currency,
            cycle=payload.cycle,
            custom_days=payload.custom_days,
            start_date=payload.start_date,
            next_renewal_date=payload.next_renewal_date if status == STATUS_ACTIVE else None,
            status=status,
            is_trial=payload.is_trial,
            notes=payload.notes,
        )
        db.add(sub)
        await self._flush(db, "creating subscription")
        logger.info("Subscription %s created (status=%s, trial=%s)", sub.id, status, sub.is_trial)

        return await self.list_subscriptions(db, user)

    async def reactivate_subscription(
        self,
        db: AsyncSession,
        user: UserContext,
        subscription_id: UUID,
        next_renewal_date: Optional[date] = None,
    ) -> SubscriptionListResponse:
        """
        Move a paused subscription back to active.

        A stored renewal date is reused as-is; `next_renewal_date` is only
        consulted when none is stored. With neither, the request is rejected
        and nothing changes.
        """
        sub = await self._get_owned(db, user, subscription_id)
        if sub.status != STATUS_PAUSED:
            raise ValidationError(
                message=f"Only paused subscriptions can be reactivated (status is '{sub.status}')",
                field="status",
            )

        renewal = sub.next_renewal_date or next_renewal_date
        if renewal is None:
            raise ValidationError(
                message="Please provide the next renewal date to reactivate this subscription",
                field="next_renewal_date",
            )

        sub.status = STATUS_ACTIVE
        sub.next_renewal_date = renewal
        await self._flush(db, "reactivating subscription")
        logger.info("Subscription %s reactivated (next renewal %s)", sub.id, renewal)

        return await self.list_subscriptions(db, user)

    async def delete_subscription(
        self,
        db: AsyncSession,
        user: UserContext,
        subscription_id: UUID,
    ) -> SubscriptionListResponse:
        """Hard delete, whatever the status. Returns the fresh listing."""
        sub = await self._get_owned(db, user, subscription_id)
        await db.delete(sub)
        await self._flush(db, "deleting subscription")
        logger.info("Subscription %s deleted", subscription_id)

        return await self.list_subscriptions(db, user)

    async def cost_summary(
        self,
        db: AsyncSession,
        user: UserContext,
        month: Optional[date] = None,
        today: Optional[date] = None,
    ) -> CostSummaryResponse:
        """Cost overview for `month` (default: the current month)."""
        today = today or today_in_timezone(settings.app_timezone)
        subscriptions = await self.load_subscriptions(db, user)
        return build_cost_summary(subscriptions, month or today, today)


# ── Singleton Instance ────────────────────────────────────────────────────
subscription_service = SubscriptionService()
