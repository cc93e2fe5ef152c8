"""
AboApp Backend — Monthly Cost Aggregation
===========================================

What:  Sums subscription prices per calendar month for the cost overview.
How:   One primitive, `compute_month_cost`, reused for the selected month,
       the 12-month selector, and the 6-month chart.

Counting rules:
    - only status 'active' and not a trial
    - only subscriptions with a renewal date inside [month start, next month start)
    - one renewal per subscription: the stored next_renewal_date, no
      projection of future cycles

Currencies are not converted. A EUR and a USD subscription in the same
month add up as if the units were equal; the summary reports
`mixed_currency` so a client can point that out.
"""

from datetime import date
from typing import Iterable, List, Sequence

from aboapp.models.subscription import STATUS_ACTIVE, Subscription
from aboapp.schemas.subscription import CostSummaryResponse, MonthCost
from aboapp.services.dates import add_months, month_key, month_start, trailing_month_starts
from aboapp.services.money import format_cents

CHART_MONTHS = 6
SELECTOR_MONTHS = 12
CHART_MAX_HEIGHT = 48
CHART_MIN_HEIGHT = 4
# the chart scale never drops below one major unit, so tiny totals don't fill the bar
CHART_SCALE_FLOOR_CENTS = 100


def is_billable(subscription: Subscription) -> bool:
    """Active and not a free trial."""
    return subscription.status == STATUS_ACTIVE and not subscription.is_trial


def compute_month_cost(subscriptions: Iterable[Subscription], month: date) -> int:
    """
    Cents due in the month that starts at `month`.

    `month` may be any day of the month; it is normalized to the first.
    """
    start = month_start(month)
    end = add_months(start, 1)
    total = 0
    for sub in subscriptions:
        if not is_billable(sub) or sub.next_renewal_date is None:
            continue
        if start <= sub.next_renewal_date < end:
            total += sub.price_cents
    return total


def total_active_cents(subscriptions: Iterable[Subscription]) -> int:
    """Sum over billable subscriptions, independent of renewal date."""
    return sum(sub.price_cents for sub in subscriptions if is_billable(sub))


def month_options(today: date, count: int = SELECTOR_MONTHS) -> List[date]:
    """Current month start and the `count - 1` before it, newest first."""
    current = month_start(today)
    return [add_months(current, -offset) for offset in range(count)]


def bar_height(value_cents: int, max_cents: int) -> float:
    return max(CHART_MIN_HEIGHT, value_cents / max_cents * CHART_MAX_HEIGHT)


def chart_window(
    subscriptions: Sequence[Subscription],
    today: date,
    months: int = CHART_MONTHS,
) -> List[MonthCost]:
    """
    Trailing `months` months ending with the current one, oldest first.

    Heights are scaled against the largest month in the window, so the
    tallest bar is always CHART_MAX_HEIGHT and empty months keep a visible
    CHART_MIN_HEIGHT stub.
    """
    starts = trailing_month_starts(today, months)
    values = [compute_month_cost(subscriptions, start) for start in starts]
    scale = max([CHART_SCALE_FLOOR_CENTS, *values])
    return [
        MonthCost(
            month=month_key(start),
            month_start=start,
            cost_cents=value,
            cost=format_cents(value),
            height=bar_height(value, scale),
        )
        for start, value in zip(starts, values)
    ]


def billable_currencies(subscriptions: Iterable[Subscription]) -> List[str]:
    return sorted({sub.currency for sub in subscriptions if is_billable(sub)})


def build_cost_summary(
    subscriptions: Sequence[Subscription],
    selected_month: date,
    today: date,
) -> CostSummaryResponse:
    """Everything the cost overview shows, computed from one listing."""
    selected = month_start(selected_month)
    selected_cost = compute_month_cost(subscriptions, selected)
    currencies = billable_currencies(subscriptions)
    return CostSummaryResponse(
        selected_month=selected,
        selected_cost_cents=selected_cost,
        selected_cost=format_cents(selected_cost),
        month_options=month_options(today),
        chart=chart_window(subscriptions, today),
        total_active_cents=total_active_cents(subscriptions),
        currencies=currencies,
        mixed_currency=len(currencies) > 1,
    )
