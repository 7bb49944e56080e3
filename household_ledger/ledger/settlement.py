"""
Two-party settlement.

Shared by the monthly household summary and trip settlement so the
tie-break policy lives in exactly one place.
"""

from decimal import Decimal

from household_ledger.models.summary import SettlementParty, TwoPartySettlement
from household_ledger.money import ZERO, Number, round2, to_decimal


def settle_two_party(
    responsibility1: Number,
    responsibility2: Number,
    given1: Number,
    given2: Number,
    tolerance: Number = Decimal("0.009"),
) -> TwoPartySettlement:
    """
    Net transfer between two people.

    balanceN = responsibilityN - givenN; positive means person N owes.
    Person 1 is checked first. A balance at or under `tolerance` is
    considered settled.
    """
    balance1 = round2(to_decimal(responsibility1) - to_decimal(given1))
    balance2 = round2(to_decimal(responsibility2) - to_decimal(given2))
    tolerance = to_decimal(tolerance)

    if balance1 > tolerance:
        who, amount = SettlementParty.PERSON1, abs(balance1)
    elif balance2 > tolerance:
        who, amount = SettlementParty.PERSON2, abs(balance2)
    else:
        who, amount = SettlementParty.NONE, ZERO

    return TwoPartySettlement(
        balance1=balance1,
        balance2=balance2,
        who=who,
        amount=amount,
    )
