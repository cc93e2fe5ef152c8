"""Create subscriptions table

Revision ID: 001
Revises: None
Create Date: 2025-01-10 00:00:00.000000+00:00

What:  Creates the `subscriptions` table with its CHECK constraints and the
       (status, next_renewal_date) index used by the reminder job.

Rollback: downgrade() drops the table (all subscriptions lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "subscriptions",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
        ),
        sa.Column(
            "user_id",
            postgresql.UUID(as_uuid=True),
            nullable=False,
            comment="Owning user id from the auth provider",
        ),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("provider", sa.String(200), nullable=True),
        sa.Column(
            "icon_key",
            sa.String(50),
            nullable=True,
            comment="Icon identifier inferred from provider text",
        ),
        sa.Column("price_cents", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("currency", sa.String(3), nullable=False, server_default=sa.text("'EUR'")),
        sa.Column("cycle", sa.String(20), nullable=False, server_default=sa.text("'monthly'")),
        sa.Column("custom_days", sa.Integer(), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("next_renewal_date", sa.Date(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'active'")),
        sa.Column("is_trial", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id", name="pk_subscriptions"),
        sa.CheckConstraint("price_cents >= 0", name="ck_subscriptions_price_non_negative"),
        sa.CheckConstraint(
            "status IN ('active', 'paused', 'canceled')",
            name="ck_subscriptions_status",
        ),
        sa.CheckConstraint(
            "cycle IN ('monthly', 'yearly', 'custom_days')",
            name="ck_subscriptions_cycle",
        ),
        sa.CheckConstraint(
            "(cycle = 'custom_days' AND custom_days IS NOT NULL AND custom_days > 0) "
            "OR (cycle <> 'custom_days' AND custom_days IS NULL)",
            name="ck_subscriptions_custom_days",
        ),
        sa.CheckConstraint(
            "status <> 'active' OR next_renewal_date IS NOT NULL",
            name="ck_subscriptions_active_has_renewal",
        ),
    )

    op.create_index("ix_subscriptions_user_id", "subscriptions", ["user_id"])
    op.create_index(
        "idx_subscriptions_status_renewal",
        "subscriptions",
        ["status", "next_renewal_date"],
    )


def downgrade() -> None:
    op.drop_index("idx_subscriptions_status_renewal", table_name="subscriptions")
    op.drop_index("ix_subscriptions_user_id", table_name="subscriptions")
    op.drop_table("subscriptions")
