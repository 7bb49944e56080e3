"""
Investment positions derived from movement history.

- invested capital = buys - sells
- current balance  = sum of all movements (sells negative)
- result           = sum of yields
"""

from decimal import Decimal
from typing import Iterable

import structlog

from household_ledger.models.household import Person
from household_ledger.models.investments import (
    Investment,
    InvestmentMovement,
    InvestmentStats,
    MovementType,
    PortfolioSummary,
)
from household_ledger.money import ZERO, round2

logger = structlog.get_logger(__name__)

# Below this invested amount a profit percentage is meaningless
MIN_INVESTED_FOR_PERCENTAGE = Decimal("0.01")


def calculate_investment_stats(
    investment: Investment,
    movements: Iterable[InvestmentMovement],
) -> InvestmentStats:
    """Position of one investment; soft-deleted movements are ignored."""
    invested = ZERO
    total_yield = ZERO
    quantity = Decimal("0")
    balance = ZERO
    by_person = {Person.PERSON1: ZERO, Person.PERSON2: ZERO}

    for movement in movements:
        if movement.deleted_at is not None:
            continue

        value = movement.value
        if movement.type is MovementType.BUY:
            invested += value
            quantity += movement.quantity
            delta = value
        elif movement.type is MovementType.SELL:
            # Cost basis is reduced by the sale amount
            invested -= value
            quantity -= movement.quantity
            delta = -value
        elif movement.type is MovementType.YIELD:
            total_yield += value
            delta = value
        else:
            delta = value

        balance += delta
        by_person[movement.person] += delta

    profit = round2(balance - invested)
    if abs(invested) > MIN_INVESTED_FOR_PERCENTAGE:
        profit_percentage = round2(profit / invested * 100)
    else:
        profit_percentage = ZERO

    return InvestmentStats(
        invested_amount=round2(invested),
        total_balance=round2(balance),
        total_yield=round2(total_yield),
        profit=profit,
        profit_percentage=profit_percentage,
        quantity=quantity,
        person1_balance=round2(by_person[Person.PERSON1]),
        person2_balance=round2(by_person[Person.PERSON2]),
    )


def calculate_portfolio_summary(
    investments: Iterable[Investment],
    movements: Iterable[InvestmentMovement],
) -> PortfolioSummary:
    by_investment: dict[str, list[InvestmentMovement]] = {}
    for movement in movements:
        by_investment.setdefault(movement.investment_id, []).append(movement)

    stats_by_investment: dict[str, InvestmentStats] = {}
    total_equity = total_cost = total_profit = p1_equity = p2_equity = ZERO

    for investment in investments:
        stats = calculate_investment_stats(investment, by_investment.get(investment.id, []))
        stats_by_investment[investment.id] = stats

        total_equity = round2(total_equity + stats.total_balance)
        total_cost = round2(total_cost + stats.invested_amount)
        total_profit = round2(total_profit + stats.profit)
        p1_equity = round2(p1_equity + stats.person1_balance)
        p2_equity = round2(p2_equity + stats.person2_balance)

    if total_cost != 0:
        total_yield_percentage = round2(total_profit / total_cost * 100)
    else:
        total_yield_percentage = ZERO

    logger.debug(
        "portfolio_calculated",
        investment_count=len(stats_by_investment),
        total_equity=str(total_equity),
    )

    return PortfolioSummary(
        total_equity=total_equity,
        total_cost=total_cost,
        total_profit=total_profit,
        total_yield_percentage=total_yield_percentage,
        p1_equity=p1_equity,
        p2_equity=p2_equity,
        stats_by_investment=stats_by_investment,
    )
