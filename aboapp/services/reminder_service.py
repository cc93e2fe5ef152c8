"""
AboApp Backend — Renewal Reminder Job
=======================================

What:  Emails every owner whose active subscription renews in N days
       (default 3).
How:   One pass per invocation:
       1. target = today (in settings.app_timezone) + reminder_days_ahead
       2. load active subscriptions renewing exactly on target, all users
       3. resolve each distinct owner's email via the auth provider
       4. send one email per subscription whose owner has an address
Who:   Triggered by GET /api/reminder-run (an external scheduler calls it
       once a day).

Nothing records which reminders went out. Invoking the job twice on the
same day sends every reminder twice.
"""

import html
import logging
from datetime import date
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from aboapp.config import settings
from aboapp.exceptions import EmailDeliveryError, StoreError
from aboapp.models.subscription import STATUS_ACTIVE, Subscription
from aboapp.schemas.reminder import ReminderRunResponse, SendOutcome
from aboapp.services.auth_base import AuthProvider
from aboapp.services.dates import add_days, today_in_timezone
from aboapp.services.email_service import EmailProvider, email_service
from aboapp.services.money import format_cents
from aboapp.services.supabase_auth_service import auth_service

logger = logging.getLogger(__name__)


def build_reminder_email(sub: Subscription, days_ahead: int) -> Dict[str, str]:
    """Subject and HTML body for one reminder (German, like the app UI)."""
    name = html.escape(sub.name)
    renewal = sub.next_renewal_date.isoformat() if sub.next_renewal_date else ""
    amount = f"{format_cents(sub.price_cents)} {sub.currency}"
    return {
        "subject": f"Erinnerung: {sub.name} in {days_ahead} Tagen",
        "html": (
            "<p>Hallo,</p>"
            f"<p>dein Abo <b>{name}</b> verlängert sich am <b>{renewal}</b>.</p>"
            f"<p>Betrag: <b>{html.escape(amount)}</b></p>"
            "<p>— Deine AboApp</p>"
        ),
    }


class ReminderService:
    """
    Args:
        auth_provider: resolves user ids to email addresses
        email_provider: delivers the reminder
    """

    def __init__(self, auth_provider: AuthProvider, email_provider: EmailProvider):
        self.auth_provider = auth_provider
        self.email_provider = email_provider

    async def due_subscriptions(self, db: AsyncSession, target: date) -> List[Subscription]:
        query = (
            select(Subscription)
            .where(
                Subscription.status == STATUS_ACTIVE,
                Subscription.next_renewal_date == target,
            )
            .order_by(Subscription.id)
        )
        try:
            result = await db.execute(query)
        except SQLAlchemyError as e:
            raw = str(getattr(e, "orig", None) or e)
            logger.error("Reminder query failed: %s", raw)
            raise StoreError(message=raw, context={"action": "loading due subscriptions"})
        return list(result.scalars().all())

    async def resolve_emails(self, user_ids: List[UUID]) -> Dict[UUID, Optional[str]]:
        """One lookup per distinct user; unresolvable users map to None."""
        emails: Dict[UUID, Optional[str]] = {}
        for user_id in user_ids:
            if user_id not in emails:
                emails[user_id] = await self.auth_provider.get_user_email(user_id)
        return emails

    async def run(self, db: AsyncSession, today: Optional[date] = None) -> ReminderRunResponse:
        """
        Execute one reminder pass.

        Args:
            today: override for "today" (tests); defaults to the current
                   date in settings.app_timezone

        Returns:
            ReminderRunResponse; `count` includes subscriptions skipped for
            lack of an email, `sent` does not.

        Raises:
            StoreError: the due-subscription query failed
        """
        today = today or today_in_timezone(settings.app_timezone)
        days_ahead = settings.reminder_days_ahead
        target = add_days(today, days_ahead)

        subscriptions = await self.due_subscriptions(db, target)
        emails = await self.resolve_emails([sub.user_id for sub in subscriptions])

        outcomes: List[SendOutcome] = []
        for sub in subscriptions:
            recipient = emails.get(sub.user_id)
            if not recipient:
                logger.info("Skipping reminder for subscription %s: owner has no email", sub.id)
                continue

            message = build_reminder_email(sub, days_ahead)
            try:
                status = await self.email_provider.send(
                    settings.from_email,
                    recipient,
                    message["subject"],
                    message["html"],
                )
            except EmailDeliveryError as e:
                outcomes.append(SendOutcome(sub_id=sub.id, status=None, error=e.message))
                continue
            outcomes.append(SendOutcome(sub_id=sub.id, status=status))

        logger.info(
            "Reminder run for %s: %d due, %d attempted",
            target.isoformat(),
            len(subscriptions),
            len(outcomes),
        )
        return ReminderRunResponse(target=target, count=len(subscriptions), sent=outcomes)


# ── Singleton Instance ────────────────────────────────────────────────────
reminder_service = ReminderService(auth_provider=auth_service, email_provider=email_service)
