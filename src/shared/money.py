"""Money helpers.

Amounts are stored as floats rounded to two places. Anything that compares
or accumulates amounts goes through integer minor units (paise, cents) so
rounding noise never decides a refund or a total.
"""

from decimal import ROUND_HALF_UP, Decimal


def to_minor_units(amount) -> int:
    """Convert a major-unit amount (e.g. rupees) to integer minor units (paise)."""
    return int((Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_minor_units(units: int) -> float:
    return float(Decimal(units) / 100)


def money(amount) -> float:
    """Round ``amount`` half-up to two decimal places."""
    return from_minor_units(to_minor_units(amount))


def line_total(unit_price, quantity: int) -> float:
    return from_minor_units(to_minor_units(unit_price) * quantity)
