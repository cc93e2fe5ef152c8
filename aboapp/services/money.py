"""
AboApp Backend — Price Parsing and Formatting
===============================================

Prices are stored as integer cents. Users type them in major units.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from aboapp.exceptions import ValidationError

# price_cents is a 32-bit INTEGER column
MAX_PRICE_CENTS = 2_147_483_647


def parse_price_cents(raw: str) -> int:
    """
    Convert a user-typed price ("9.99", "9,99", "12") to integer cents.

    Blank input means 0. Amounts are rounded half-up to whole cents and
    must fit the price_cents column.

    Raises:
        ValidationError: input is not a number, is negative, or is too large
    """
    text = (raw or "").strip().replace(",", ".")
    if not text:
        return 0
    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise ValidationError(
            message=f"'{raw}' is not a valid price",
            field="price",
        )
    if not amount.is_finite():
        raise ValidationError(message=f"'{raw}' is not a valid price", field="price")
    if amount < 0:
        raise ValidationError(message="Price must not be negative", field="price")
    try:
        cents = (amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    except InvalidOperation:
        # more digits than the decimal context holds
        raise ValidationError(message="Price is too large", field="price")
    if cents > MAX_PRICE_CENTS:
        raise ValidationError(message="Price is too large", field="price")
    return int(cents)


def format_cents(cents: int) -> str:
    """999 → '9.99'. Exact for any integer amount."""
    sign = "-" if cents < 0 else ""
    cents = abs(cents)
    return f"{sign}{cents // 100}.{cents % 100:02d}"
