"""
AboApp Backend — Subscription SQLAlchemy Model
================================================

What:  ORM model representing the `subscriptions` table.
Who:   Used by SubscriptionService / ReminderService and by Alembic.

Table Design:
    - UUID primary key, generated in Python so SQLite test databases work
      without gen_random_uuid()
    - user_id: owner id issued by the auth provider; every user-facing query
      is scoped to it
    - price_cents: integer minor units, never negative
    - next_renewal_date: DATE (no time component); required while active
    - status / cycle: short enum-like strings guarded by CHECK constraints

Index on (status, next_renewal_date):
    Serves the reminder job's "active AND renewing on <date>" lookup.
"""

import uuid
from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    Index,
    Integer,
    String,
    Text,
    Uuid,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from aboapp.database import Base

STATUS_ACTIVE = "active"
STATUS_PAUSED = "paused"
STATUS_CANCELED = "canceled"
SUBSCRIPTION_STATUSES = (STATUS_ACTIVE, STATUS_PAUSED, STATUS_CANCELED)

CYCLE_MONTHLY = "monthly"
CYCLE_YEARLY = "yearly"
CYCLE_CUSTOM_DAYS = "custom_days"
BILLING_CYCLES = (CYCLE_MONTHLY, CYCLE_YEARLY, CYCLE_CUSTOM_DAYS)


class Subscription(Base):
    """
    A recurring subscription owned by one user.

    Lifecycle:
        1. Created active (renewal date required) or paused (no date kept)
        2. paused → active via reactivation, which needs a renewal date
        3. Hard-deleted on request
        'canceled' is stored and listed but never written by the service.
    """

    __tablename__ = "subscriptions"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        nullable=False,
        index=True,
        comment="Owning user id from the auth provider",
    )

    # ── Descriptive ───────────────────────────────────────────────────────
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    provider: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    icon_key: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
        comment="Icon identifier inferred from provider text",
    )

    # ── Monetary ──────────────────────────────────────────────────────────
    price_cents: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="EUR")

    # ── Billing ───────────────────────────────────────────────────────────
    cycle: Mapped[str] = mapped_column(String(20), nullable=False, default=CYCLE_MONTHLY)
    custom_days: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    # ── Schedule ──────────────────────────────────────────────────────────
    start_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    next_renewal_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    # ── Lifecycle ─────────────────────────────────────────────────────────
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=STATUS_ACTIVE)
    is_trial: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        CheckConstraint("price_cents >= 0", name="ck_subscriptions_price_non_negative"),
        CheckConstraint(
            "status IN ('active', 'paused', 'canceled')",
            name="ck_subscriptions_status",
        ),
        CheckConstraint(
            "cycle IN ('monthly', 'yearly', 'custom_days')",
            name="ck_subscriptions_cycle",
        ),
        CheckConstraint(
            "(cycle = 'custom_days' AND custom_days IS NOT NULL AND custom_days > 0) "
            "OR (cycle <> 'custom_days' AND custom_days IS NULL)",
            name="ck_subscriptions_custom_days",
        ),
        CheckConstraint(
            "status <> 'active' OR next_renewal_date IS NOT NULL",
            name="ck_subscriptions_active_has_renewal",
        ),
        Index("idx_subscriptions_status_renewal", "status", "next_renewal_date"),
    )

    def __repr__(self) -> str:
        return (
            f"<Subscription(id={self.id}, name='{self.name}', status='{self.status}', "
            f"next_renewal_date='{self.next_renewal_date}')>"
        )
