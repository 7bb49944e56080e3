"""
Settlement Output Models

Pure value objects returned by the engine. They are never persisted by
the engine itself.
"""

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SettlementParty(str, Enum):
    """Who has to transfer money to settle up."""
    PERSON1 = "person1"
    PERSON2 = "person2"
    NONE = "none"


class InstallmentInfo(BaseModel):
    """Installment position for display (1-indexed)."""
    model_config = ConfigDict(frozen=True)

    current: int
    total: int


class TwoPartySettlement(BaseModel):
    """The single net transfer that reconciles two balances."""
    model_config = ConfigDict(frozen=True)

    balance1: Decimal
    balance2: Decimal
    who: SettlementParty
    amount: Decimal = Field(..., ge=0)


class EffectiveIncome(BaseModel):
    """
    One income entry after reconciling recurring and real salaries.

    is_virtual is True for entries synthesized from configuration.
    """
    model_config = ConfigDict(frozen=True)

    description: str
    value: Decimal
    category: str
    is_virtual: bool
    source_id: str


class IncomeBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    salary_real: Decimal
    salary_recurring: Decimal
    other: Decimal


class IncomeResolution(BaseModel):
    """Effective income of one person for one month."""
    model_config = ConfigDict(frozen=True)

    entries: tuple[EffectiveIncome, ...]
    # Recurring entries overridden by a real salary this month
    suppressed: tuple[str, ...] = ()
    breakdown: IncomeBreakdown
    salary_total: Decimal
    total_income: Decimal


class MonthlySummary(BaseModel):
    """
    The household settlement for one month.

    Responsibility is what each person should bear under the active split
    policy; paid is what they actually paid. The difference drives the
    transfer.
    """
    model_config = ConfigDict(frozen=True)

    month_key: str

    # Totals by expense type
    total_fixed: Decimal
    total_common: Decimal
    total_equal: Decimal
    total_reimbursement: Decimal
    category_totals: dict[str, Decimal] = Field(default_factory=dict)

    # Who paid / who is responsible
    person1_paid: Decimal
    person2_paid: Decimal
    person1_responsibility: Decimal
    person2_responsibility: Decimal
    person1_personal_total: Decimal
    person2_personal_total: Decimal

    # Income
    person1_total_income: Decimal
    person2_total_income: Decimal
    p1_income_breakdown: IncomeBreakdown
    p2_income_breakdown: IncomeBreakdown
    salary_ratio1: Decimal

    # Settlement
    transfer_amount: Decimal
    who_transfers: SettlementParty

    # Goals
    total_goal_savings: Decimal
    person1_goal_contribution: Decimal
    person2_goal_contribution: Decimal
    person1_goals_realized: Decimal
    person2_goals_realized: Decimal

    # Data quality signal, not an error
    unspecified_paid_by_count: int = 0

    # Free cash after responsibilities, personal spending and planned goals
    person1_remaining: Decimal
    person2_remaining: Decimal
