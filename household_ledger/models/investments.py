"""
Investment Models

Like goals, an investment's position is derived from its movement
history rather than stored.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from household_ledger.models.household import Person, new_id


class InvestmentType(str, Enum):
    FIXED_INCOME = "fixed_income"
    VARIABLE_INCOME = "variable_income"
    CRYPTO = "crypto"
    FUNDS = "funds"
    REAL_ESTATE = "real_estate"
    CUSTOM = "custom"


class InvestmentOwner(str, Enum):
    PERSON1 = "person1"
    PERSON2 = "person2"
    COUPLE = "couple"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class MovementType(str, Enum):
    """
    BUY / SELL move capital in and out.
    YIELD is income on the position.
    ADJUSTMENT marks the position to market (signed).
    """
    BUY = "buy"
    SELL = "sell"
    YIELD = "yield"
    ADJUSTMENT = "adjustment"


class Investment(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: str = Field(default_factory=new_id)
    name: str = Field(..., min_length=1, max_length=200)
    type: InvestmentType = InvestmentType.CUSTOM
    institution: Optional[str] = None
    risk: Optional[RiskLevel] = None
    owner: InvestmentOwner = InvestmentOwner.COUPLE


class InvestmentMovement(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: str = Field(default_factory=new_id)
    investment_id: str
    type: MovementType
    # Signed for adjustments
    value: Decimal
    quantity: Decimal = Decimal("0")
    price_per_unit: Optional[Decimal] = Field(default=None, ge=0)
    date: dt.date
    person: Person
    description: str = ""
    deleted_at: Optional[dt.datetime] = None


class InvestmentStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    invested_amount: Decimal
    total_balance: Decimal
    total_yield: Decimal
    profit: Decimal
    profit_percentage: Decimal
    quantity: Decimal
    person1_balance: Decimal
    person2_balance: Decimal


class PortfolioSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_equity: Decimal
    total_cost: Decimal
    total_profit: Decimal
    total_yield_percentage: Decimal
    p1_equity: Decimal
    p2_equity: Decimal
    stats_by_investment: dict[str, InvestmentStats] = Field(default_factory=dict)
