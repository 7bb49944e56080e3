"""
Money arithmetic primitives.

All monetary values are Decimal. Every intermediate sum is rounded to
cents before it is combined further, so results never depend on binary
floating point representation.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Union

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

Number = Union[Decimal, int, float, str]


def to_decimal(value: Number) -> Decimal:
    """Convert to Decimal, going through str() for floats."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def round2(value: Number) -> Decimal:
    """
    Round to 2 decimal places, half away from zero.

    round2(1.005) == Decimal("1.01"), where float rounding would give 1.0.
    """
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def money_sum(values: Iterable[Number]) -> Decimal:
    """Sum values, rounding after each step."""
    total = ZERO
    for value in values:
        total = round2(total + to_decimal(value))
    return total


def to_cents(value: Number) -> int:
    """Integer minor units for a money value."""
    return int(round2(value) * 100)


def from_cents(cents: int) -> Decimal:
    return round2(Decimal(cents) / 100)
