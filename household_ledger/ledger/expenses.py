"""
Expense month scoping.

Decides whether an expense applies to a month and how much of it does.

Fixed expenses recur every month from their start date at their full
value (or a per-month override). Everything else is spread over
`installments` months; the last installment absorbs the rounding
remainder so the installments always add up to the total.
"""

import datetime as dt
import re
from decimal import Decimal
from typing import Iterable, Optional

from household_ledger.ledger.errors import InvalidMonthKeyError
from household_ledger.models.household import Expense
from household_ledger.models.summary import InstallmentInfo
from household_ledger.money import round2

_MONTH_KEY = re.compile(r"([0-9]{4})-([0-9]{2})")


def parse_month_key(month_key: str) -> tuple[int, int]:
    """
    Parse a "YYYY-MM" key into (year, month).

    Raises:
        InvalidMonthKeyError: If the key is not exactly YYYY-MM with a valid month
    """
    match = _MONTH_KEY.fullmatch(month_key or "")
    if not match:
        raise InvalidMonthKeyError(f"Invalid month key: {month_key!r}")
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise InvalidMonthKeyError(f"Invalid month in key: {month_key!r}")
    return year, month


def month_key_for(day: dt.date) -> str:
    return f"{day.year:04d}-{day.month:02d}"


def months_between(start: dt.date, month_key: str) -> int:
    """Calendar months from `start`'s month to the target month (can be negative)."""
    year, month = parse_month_key(month_key)
    return (year * 12 + month) - (start.year * 12 + start.month)


def is_expense_in_month(expense: Expense, month_key: str) -> bool:
    diff = months_between(expense.date, month_key)
    if expense.type.is_fixed:
        return diff >= 0
    return 0 <= diff < expense.installments


def get_monthly_expense_value(expense: Expense, month_key: str) -> Decimal:
    """
    Amount of `expense` that falls in `month_key`.

    Does not check that the expense applies to the month; call
    is_expense_in_month first.
    """
    if expense.type.is_fixed:
        override = expense.metadata.overrides.get(month_key)
        # A zero override means "no override"
        if override:
            return override
        return expense.total_value

    installments = expense.installments
    if installments <= 1:
        return expense.total_value

    diff = months_between(expense.date, month_key)
    standard = round2(expense.total_value / installments)

    if diff == installments - 1:
        return round2(expense.total_value - standard * (installments - 1))

    return standard


def get_installment_info(expense: Expense, month_key: str) -> Optional[InstallmentInfo]:
    if expense.type.is_fixed or expense.installments <= 1:
        return None
    diff = months_between(expense.date, month_key)
    return InstallmentInfo(current=diff + 1, total=expense.installments)


def expenses_for_month(
    expenses: Iterable[Expense],
    month_key: str,
) -> list[tuple[Expense, Decimal]]:
    """(expense, monthly value) for every expense that applies to the month."""
    return [
        (expense, get_monthly_expense_value(expense, month_key))
        for expense in expenses
        if is_expense_in_month(expense, month_key)
    ]
