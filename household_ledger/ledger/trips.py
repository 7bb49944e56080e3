"""
Trip settlement.

Same responsibility-versus-given model as the monthly summary, scoped
to one trip and without month scoping.

Deposits into the fund count as having paid your share in advance.
Money drawn from the fund is not re-attributed to depositors; the fund
balance is reported on its own.
"""

from decimal import Decimal
from typing import Optional

import structlog

from household_ledger.config import LedgerSettings
from household_ledger.ledger.settlement import settle_two_party
from household_ledger.models.household import Person
from household_ledger.models.trips import ProportionType, Trip, TripPayer, TripSettlement
from household_ledger.money import Number, money_sum, round2, to_decimal

logger = structlog.get_logger(__name__)


def trip_ratio(trip: Trip, p1_salary_ratio: Number) -> Decimal:
    """Person 1's share of the trip's costs."""
    if trip.proportion_type is ProportionType.CUSTOM and trip.custom_percentage1 is not None:
        return trip.custom_percentage1 / 100

    ratio = to_decimal(p1_salary_ratio)
    if not 0 <= ratio <= 1:
        logger.warning("salary_ratio_clamped", trip_id=trip.id, p1_salary_ratio=str(ratio))
        ratio = min(max(ratio, Decimal("0")), Decimal("1"))
    return ratio


def calculate_trip_settlement(
    trip: Trip,
    p1_salary_ratio: Number,
    settings: Optional[LedgerSettings] = None,
) -> TripSettlement:
    """
    Settle a trip.

    Args:
        trip: The trip with its expenses and fund deposits
        p1_salary_ratio: Person 1's share used unless the trip is custom;
            clamped to 0..1 with a warning
        settings: Engine policy; defaults to LedgerSettings()
    """
    settings = settings or LedgerSettings()

    total_expenses = money_sum(e.value for e in trip.expenses)
    paid = {
        payer: money_sum(e.value for e in trip.expenses if e.paid_by is payer)
        for payer in TripPayer
    }
    deposits = {
        person: money_sum(d.value for d in trip.deposits if d.person is person)
        for person in Person
    }
    fund_balance = round2(
        deposits[Person.PERSON1] + deposits[Person.PERSON2] - paid[TripPayer.FUND]
    )

    ratio1 = trip_ratio(trip, p1_salary_ratio)
    responsibility1 = round2(total_expenses * ratio1)
    # Complement, so the two responsibilities always add up to the total
    responsibility2 = round2(total_expenses - responsibility1)

    given1 = round2(paid[TripPayer.PERSON1] + deposits[Person.PERSON1])
    given2 = round2(paid[TripPayer.PERSON2] + deposits[Person.PERSON2])

    settlement = settle_two_party(
        responsibility1,
        responsibility2,
        given1,
        given2,
        tolerance=settings.trip_tolerance,
    )

    result = TripSettlement(
        total_expenses=total_expenses,
        total_paid_by_p1=paid[TripPayer.PERSON1],
        total_paid_by_p2=paid[TripPayer.PERSON2],
        total_paid_by_fund=paid[TripPayer.FUND],
        p1_deposits=deposits[Person.PERSON1],
        p2_deposits=deposits[Person.PERSON2],
        p1_responsibility=responsibility1,
        p2_responsibility=responsibility2,
        p1_balance=settlement.balance1,
        p2_balance=settlement.balance2,
        who_owes=settlement.who,
        amount_to_settle=settlement.amount,
        fund_balance=fund_balance,
    )

    logger.debug(
        "trip_settled",
        trip_id=trip.id,
        who_owes=result.who_owes.value,
        amount_to_settle=str(result.amount_to_settle),
        fund_balance=str(result.fund_balance),
    )
    return result
