"""
Trip Fund Models

A trip owns its expenses and its fund deposits. Expenses are paid either
directly by one person or from the pooled fund.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from household_ledger.models.household import Person, new_id
from household_ledger.models.summary import SettlementParty


class TripPayer(str, Enum):
    PERSON1 = "person1"
    PERSON2 = "person2"
    FUND = "fund"


class ProportionType(str, Enum):
    """
    How trip costs are shared.

    EQUAL and PROPORTIONAL both use the ratio supplied by the caller.
    """
    EQUAL = "equal"
    PROPORTIONAL = "proportional"
    CUSTOM = "custom"


class TripExpense(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: str = Field(default_factory=new_id)
    description: str = Field(default="", max_length=200)
    value: Decimal = Field(..., ge=0)
    paid_by: TripPayer
    date: Optional[dt.date] = None
    category: str = ""


class TripDeposit(BaseModel):
    """A contribution into the trip's pooled fund."""
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: str = Field(default_factory=new_id)
    person: Person
    value: Decimal = Field(..., ge=0)
    date: Optional[dt.date] = None
    description: str = ""


class Trip(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: str = Field(default_factory=new_id)
    name: str = ""
    budget: Optional[Decimal] = Field(default=None, ge=0)
    proportion_type: ProportionType = ProportionType.PROPORTIONAL
    custom_percentage1: Optional[Decimal] = Field(default=None, ge=0, le=100)
    expenses: tuple[TripExpense, ...] = Field(default_factory=tuple)
    deposits: tuple[TripDeposit, ...] = Field(default_factory=tuple)


class TripSettlement(BaseModel):
    """
    Result of settling a trip.

    Balances are responsibility minus what each person gave:
    positive means owes, negative means receives.
    """
    model_config = ConfigDict(frozen=True)

    total_expenses: Decimal
    total_paid_by_p1: Decimal
    total_paid_by_p2: Decimal
    total_paid_by_fund: Decimal
    p1_deposits: Decimal
    p2_deposits: Decimal
    p1_responsibility: Decimal
    p2_responsibility: Decimal
    p1_balance: Decimal
    p2_balance: Decimal
    who_owes: SettlementParty
    amount_to_settle: Decimal
    # Money still sitting in the pool
    fund_balance: Decimal
