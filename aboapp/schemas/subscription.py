"""
AboApp Backend — Subscription Request/Response Schemas
========================================================

What:  Pydantic models defining the subscription API contract.
Why:   Input validation, serialization, and OpenAPI docs in one place.

Prices travel in two shapes:
    - Requests carry a decimal string in major units ("9.99"), the way a
      user types it; the service converts it to cents.
    - Responses carry `price_cents` plus a preformatted `price` string.
"""

import uuid
from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

Cycle = Literal["monthly", "yearly", "custom_days"]
Status = Literal["active", "paused", "canceled"]


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class SubscriptionCreate(BaseModel):
    """
    Body of POST /api/subscriptions.

    `is_active` decides the initial status (active or paused).

    Shape errors in a single field (blank name, bad currency code, unknown
    cycle, malformed dates) are rejected here and answer FastAPI's 422
    `{detail: [...]}` body. Rules that span fields (renewal date for
    active subscriptions, custom_days) and the price text are checked by
    SubscriptionService and answer 400 with an ErrorResponse.
    """
    name: str = Field(min_length=1, max_length=200, description="Display name, e.g. Netflix")
    provider: Optional[str] = Field(default=None, max_length=200, description="Provider text used for icon inference")
    price: str = Field(default="0.00", description="Price in major units, e.g. '9.99'")
    currency: Optional[str] = Field(default=None, description="ISO currency code (defaults to EUR)")
    cycle: Cycle = Field(default="monthly")
    custom_days: Optional[int] = Field(default=None, description="Billing period in days when cycle is custom_days")
    start_date: Optional[date] = None
    next_renewal_date: Optional[date] = Field(default=None, description="Required when is_active is true")
    is_active: bool = Field(default=True, description="true → active, false → paused")
    is_trial: bool = Field(default=False, description="Free trial; excluded from cost totals")
    notes: Optional[str] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("name must not be blank")
        return stripped

    @field_validator("currency")
    @classmethod
    def normalize_currency(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        code = v.strip().upper()
        if len(code) != 3 or not code.isalpha():
            raise ValueError(f"Invalid currency code '{v}'")
        return code


class ReactivateRequest(BaseModel):
    """
    Body of POST /api/subscriptions/{id}/reactivate.

    next_renewal_date is only needed when the paused subscription has no
    stored renewal date.
    """
    next_renewal_date: Optional[date] = None


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class SubscriptionResponse(BaseModel):
    id: uuid.UUID
    name: str
    provider: Optional[str] = None
    icon_key: str = Field(description="Icon identifier, 'generic' when unknown")
    icon_emoji: str = Field(description="Emoji fallback for the icon")
    price_cents: int
    price: str = Field(description="price_cents formatted in major units, e.g. '9.99'")
    currency: str
    cycle: Cycle
    custom_days: Optional[int] = None
    start_date: Optional[date] = None
    next_renewal_date: Optional[date] = None
    status: Status
    is_trial: bool
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


class SubscriptionListResponse(BaseModel):
    """
    Full listing of the current user's subscriptions, grouped for display.

    Every list keeps the store order (ascending next renewal date).
    Returned by the listing endpoint and by every mutating endpoint after
    the write, so the client always replaces its state with a fresh read.
    """
    active: List[SubscriptionResponse] = Field(description="Active, non-trial subscriptions")
    trial: List[SubscriptionResponse] = Field(description="Active free trials")
    paused: List[SubscriptionResponse]
    canceled: List[SubscriptionResponse]
    total_active_cents: int = Field(description="Sum over active non-trial subscriptions")
    total_active: str = Field(description="total_active_cents in major units")


class MonthCost(BaseModel):
    month: str = Field(description="Month key, YYYY-MM")
    month_start: date
    cost_cents: int
    cost: str
    height: float = Field(description="Bar height in px for the cost chart")


class CostSummaryResponse(BaseModel):
    """
    Cost overview for the selected month plus the trailing chart window.

    mixed_currency is true when the summed subscriptions use more than one
    currency. The sums are not converted in that case.
    """
    selected_month: date
    selected_cost_cents: int
    selected_cost: str
    month_options: List[date] = Field(description="Current month and the 11 before it, newest first")
    chart: List[MonthCost] = Field(description="Trailing six months, oldest first")
    total_active_cents: int
    currencies: List[str]
    mixed_currency: bool
