"""
Display formatters (Brazilian real).

Display only: nothing in the engine depends on these.
"""

import datetime as dt
import re
from decimal import Decimal
from typing import Optional, Union

from household_ledger.config import get_settings
from household_ledger.money import Number, round2

NBSP = "\u00a0"


def _group_thousands(digits: str) -> str:
    groups = []
    while len(digits) > 3:
        groups.insert(0, digits[-3:])
        digits = digits[:-3]
    groups.insert(0, digits)
    return ".".join(groups)


def format_number(value: Number) -> str:
    """1234.5 -> "1.234,50" """
    amount = round2(value)
    sign = "-" if amount < 0 else ""
    integer, cents = f"{abs(amount):.2f}".split(".")
    return f"{sign}{_group_thousands(integer)},{cents}"


def format_currency(value: Number, symbol: Optional[str] = None) -> str:
    """
    1234.5 -> "R$ 1.234,50" (non-breaking space); negatives as "-R$ 10,00".

    The symbol defaults to the configured `LEDGER_CURRENCY_SYMBOL`.
    """
    if symbol is None:
        symbol = get_settings().ledger.currency_symbol
    text = format_number(value)
    if text.startswith("-"):
        return f"-{symbol}{NBSP}{text[1:]}"
    return f"{symbol}{NBSP}{text}"


def format_as_brl(typed: str) -> str:
    """
    Mask for a currency input box: digits typed so far are read as cents.

    "123456" -> "1.234,56"; input without digits -> "".
    """
    digits = re.sub(r"\D", "", typed or "")
    if not digits:
        return ""
    return format_number(Decimal(int(digits)) / 100)


def parse_brl(value: Union[str, int, float, Decimal, None]) -> Decimal:
    """
    Parse a masked BRL string back to a value.

    Every digit is significant and the last two are cents, so
    "R$ 1.234,56" -> Decimal("1234.56"). Numbers pass through as their
    absolute value.
    """
    if isinstance(value, (int, float, Decimal)):
        return abs(round2(value))
    if not value:
        return round2(0)
    digits = re.sub(r"\D", "", str(value))
    return round2(Decimal(int(digits or "0")) / 100)


def get_month_year_key(day: dt.date) -> str:
    return f"{day.year:04d}-{day.month:02d}"


def parse_safe_date(text: str) -> dt.date:
    """
    Parse "YYYY-MM-DD" (or "YYYY-MM") as a local calendar date.

    A missing day defaults to 1.
    """
    parts = [int(p) for p in text.strip().split("-")[:3]]
    year, month = parts[0], parts[1]
    day = parts[2] if len(parts) > 2 and parts[2] else 1
    return dt.date(year, month, day)
