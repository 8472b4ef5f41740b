from __future__ import annotations

from decimal import Decimal, InvalidOperation, localcontext
from typing import Union

from gymdesk.core.errors import InvalidAmount

CENT = Decimal("0.01")
HUNDRED = Decimal(100)

# Largest value the integer cents columns hold.
MAX_CENTS = 2_147_483_647
MAX_AMOUNT = Decimal("21474836.47")

AmountLike = Union[Decimal, int, str]


def _precision_for(value: Decimal) -> int:
    return max(len(value.as_tuple().digits) + abs(value.as_tuple().exponent) + 4, 28)


def cents_to_amount(cents: int) -> Decimal:
    """Turn integer cents into a two-decimal display amount (150 -> 1.50)."""
    if isinstance(cents, bool) or not isinstance(cents, int):
        raise InvalidAmount("Cents must be an integer")
    if cents < 0:
        raise InvalidAmount("Amount cannot be negative")
    value = Decimal(cents)
    with localcontext() as ctx:
        ctx.prec = _precision_for(value)
        return (value / HUNDRED).quantize(CENT)


def amount_to_cents(amount: AmountLike) -> int:
    """Turn a display amount into integer cents without going through float.

    Floats are rejected outright; callers pass Decimal, int or a numeric string.
    """
    if isinstance(amount, (bool, float)):
        raise InvalidAmount("Amount must be a decimal value")
    try:
        value = Decimal(str(amount)) if not isinstance(amount, Decimal) else amount
    except (InvalidOperation, ValueError):
        raise InvalidAmount(f"Invalid amount: {amount!r}") from None
    if not value.is_finite():
        raise InvalidAmount(f"Invalid amount: {amount!r}")
    if value < 0:
        raise InvalidAmount("Amount cannot be negative")
    with localcontext() as ctx:
        ctx.prec = _precision_for(value)
        scaled = value * HUNDRED
        if scaled != scaled.to_integral_value():
            raise InvalidAmount("Amount cannot have more than two decimal places")
    return int(scaled)


def amount_matches_cents(amount: Decimal, cents: int) -> bool:
    """True when a display amount and a cents value describe the same money."""
    with localcontext() as ctx:
        ctx.prec = _precision_for(amount)
        return amount * HUNDRED == cents
