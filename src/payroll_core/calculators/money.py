"""Money helpers.

Amounts are kept at full Decimal precision through every calculation.
Rounding to cents happens only when a value is rendered for a person.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

ZERO = Decimal("0")
CENTS = Decimal("0.01")

MoneyLike = Decimal | int | float | str


def to_money(value: MoneyLike | None, default: Decimal = ZERO) -> Decimal:
    """Coerce a value into a Decimal.

    Floats go through str() so 0.1 becomes Decimal("0.1") rather than its
    binary expansion. None returns the default.
    """
    if value is None:
        return default
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise ValueError(f"Money amount must be finite: {value!r}")
        return value
    if isinstance(value, bool):
        raise TypeError("Booleans are not money amounts")
    try:
        result = Decimal(str(value).strip())
    except InvalidOperation as e:
        raise ValueError(f"Invalid money amount: {value!r}") from e
    if not result.is_finite():
        raise ValueError(f"Money amount must be finite: {value!r}")
    return result


def round_to_cents(amount: Decimal) -> Decimal:
    """Round amount to 2 decimal places (cents)."""
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def format_money(amount: Decimal, currency_symbol: str = "R") -> str:
    """Render an amount for display, e.g. ``R 12,345.60`` or ``-R 10.00``."""
    rounded = round_to_cents(amount)
    sign = "-" if rounded < 0 else ""
    body = f"{abs(rounded):,.2f}"
    if currency_symbol:
        return f"{sign}{currency_symbol} {body}"
    return f"{sign}{body}"
