"""
Savings Goal Models

DESIGN DECISION: A goal does not store its balance. The balance is the
signed sum of its append-only GoalTransaction history, so the number the
household sees can never drift from the audit trail.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from household_ledger.models.household import Person, new_id


class GoalType(str, Enum):
    """Who owns a goal."""
    INDIVIDUAL_P1 = "individual_p1"
    INDIVIDUAL_P2 = "individual_p2"
    COUPLE = "couple"


class GoalTransactionType(str, Enum):
    DEPOSIT = "deposit"
    WITHDRAW = "withdraw"


class SavingsGoal(BaseModel):
    """
    A savings goal.

    monthly_contribution_p1/p2 are PLANNED contributions. What was actually
    saved lives in the transactions.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: str = Field(default_factory=new_id)
    title: str = Field(default="", max_length=200)
    target_value: Decimal = Field(
        default=Decimal("0"),
        description="Amount to reach; progress is 0 when not positive"
    )
    goal_type: GoalType = GoalType.COUPLE
    monthly_contribution_p1: Decimal = Field(default=Decimal("0"), ge=0)
    monthly_contribution_p2: Decimal = Field(default=Decimal("0"), ge=0)
    is_completed: bool = False
    is_emergency: bool = False
    deadline: Optional[dt.date] = None

    def planned_contribution(self, person: Person) -> Decimal:
        if person is Person.PERSON1:
            return self.monthly_contribution_p1
        return self.monthly_contribution_p2


class GoalTransaction(BaseModel):
    """Append-only ledger entry for a goal."""
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: str = Field(default_factory=new_id)
    goal_id: str
    type: GoalTransactionType
    value: Decimal = Field(..., ge=0)
    person: Person
    date: dt.date
    description: str = Field(default="", max_length=200)

    @property
    def signed_value(self) -> Decimal:
        if self.type is GoalTransactionType.DEPOSIT:
            return self.value
        return -self.value


class GoalStats(BaseModel):
    """Derived state of a goal."""
    model_config = ConfigDict(frozen=True)

    total_balance: Decimal
    p1_balance: Decimal
    p2_balance: Decimal
    progress: Decimal = Field(
        ...,
        ge=0,
        le=100,
        description="Percentage of target reached, clamped to 100"
    )
    is_completed: bool
    # Deposits in the current calendar month ("contributed so far")
    p1_month_deposits: Decimal
    p2_month_deposits: Decimal
