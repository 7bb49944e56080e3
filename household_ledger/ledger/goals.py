"""
Savings goal ledger.

A goal's balance is folded from its transaction history: deposits add,
withdrawals subtract, with a cent rounding after each step.
"""

import datetime as dt
from decimal import Decimal
from typing import Iterable, Optional

import structlog

from household_ledger.models.goals import GoalStats, GoalTransaction, GoalTransactionType, SavingsGoal
from household_ledger.models.household import Person
from household_ledger.money import ZERO, Number, money_sum, round2, to_decimal

logger = structlog.get_logger(__name__)

HUNDRED = Decimal("100")


def calculate_goal_balance(transactions: Iterable[GoalTransaction]) -> Decimal:
    return money_sum(t.signed_value for t in transactions)


def calculate_individual_goal_balance(
    transactions: Iterable[GoalTransaction],
    person: Person,
) -> Decimal:
    return money_sum(t.signed_value for t in transactions if t.person is person)


def get_goal_progress(goal: SavingsGoal, balance: Number) -> Decimal:
    """
    Percentage of the target reached, in [0, 100].

    Returns 0 for a non-positive target instead of dividing by zero.
    """
    if goal.target_value <= 0:
        return ZERO
    progress = round2(to_decimal(balance) / goal.target_value * HUNDRED)
    return max(ZERO, min(progress, round2(HUNDRED)))


def _deposits_in_month(
    transactions: Iterable[GoalTransaction],
    person: Person,
    year: int,
    month: int,
) -> Decimal:
    return money_sum(
        t.value for t in transactions
        if t.person is person
        and t.type is GoalTransactionType.DEPOSIT
        and t.date.year == year
        and t.date.month == month
    )


def calculate_goal_stats(
    goal: SavingsGoal,
    transactions: Iterable[GoalTransaction],
    today: Optional[dt.date] = None,
) -> GoalStats:
    """
    Derived state of a goal.

    `today` selects the calendar month used for the "deposited this month"
    totals; defaults to the local date.
    """
    transactions = list(transactions)
    today = today or dt.date.today()

    total_balance = calculate_goal_balance(transactions)
    progress = get_goal_progress(goal, total_balance)

    stats = GoalStats(
        total_balance=total_balance,
        p1_balance=calculate_individual_goal_balance(transactions, Person.PERSON1),
        p2_balance=calculate_individual_goal_balance(transactions, Person.PERSON2),
        progress=progress,
        is_completed=progress >= HUNDRED,
        p1_month_deposits=_deposits_in_month(transactions, Person.PERSON1, today.year, today.month),
        p2_month_deposits=_deposits_in_month(transactions, Person.PERSON2, today.year, today.month),
    )
    logger.debug(
        "goal_stats_calculated",
        goal_id=goal.id,
        total_balance=str(stats.total_balance),
        progress=str(stats.progress),
    )
    return stats


def calculate_goals_overview(
    goals: Iterable[SavingsGoal],
    transactions: Iterable[GoalTransaction],
    today: Optional[dt.date] = None,
) -> dict[str, GoalStats]:
    """Stats for every goal, keyed by goal id."""
    by_goal: dict[str, list[GoalTransaction]] = {}
    for transaction in transactions:
        by_goal.setdefault(transaction.goal_id, []).append(transaction)

    return {
        goal.id: calculate_goal_stats(goal, by_goal.get(goal.id, []), today=today)
        for goal in goals
    }
