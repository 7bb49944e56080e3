"""
Household Data Models

These models define the records the settlement engine consumes:
the couple configuration, incomes and expenses.

DESIGN DECISION: Records are frozen. The engine reads them, it never
edits them, and a frozen model makes that a guarantee rather than a
convention. Edits happen upstream by building a new record
(model_copy(update=...)).

Money is Decimal. Pydantic coerces int/float/str input, so callers can
pass plain numbers.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


def new_id() -> str:
    return str(uuid4())


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class Person(str, Enum):
    """One of the two members of the household."""
    PERSON1 = "person1"
    PERSON2 = "person2"

    @property
    def other(self) -> "Person":
        return Person.PERSON2 if self is Person.PERSON1 else Person.PERSON1


class ExpenseType(str, Enum):
    """
    How an expense behaves in the monthly settlement.

    FIXED / REIMBURSEMENT_FIXED recur every month from their start date.
    Every other type is spread over `installments` months.
    """
    FIXED = "FIXED"
    COMMON = "COMMON"
    EQUAL = "EQUAL"
    REIMBURSEMENT = "REIMBURSEMENT"
    REIMBURSEMENT_FIXED = "REIMBURSEMENT_FIXED"
    PERSONAL_P1 = "PERSONAL_P1"
    PERSONAL_P2 = "PERSONAL_P2"

    @property
    def is_fixed(self) -> bool:
        """Recurs forever instead of being split into installments."""
        return self in (ExpenseType.FIXED, ExpenseType.REIMBURSEMENT_FIXED)

    @property
    def is_shared(self) -> bool:
        """Split between both people."""
        return self in (ExpenseType.FIXED, ExpenseType.COMMON, ExpenseType.EQUAL)

    @property
    def is_reimbursement(self) -> bool:
        """Charged in full to the payer's counterpart."""
        return self in (ExpenseType.REIMBURSEMENT, ExpenseType.REIMBURSEMENT_FIXED)

    @property
    def is_personal(self) -> bool:
        """Outside the settlement entirely."""
        return self in (ExpenseType.PERSONAL_P1, ExpenseType.PERSONAL_P2)

    @property
    def owner(self) -> Optional[Person]:
        """Owner of a personal expense."""
        if self is ExpenseType.PERSONAL_P1:
            return Person.PERSON1
        if self is ExpenseType.PERSONAL_P2:
            return Person.PERSON2
        return None


class SplitMethod(str, Enum):
    """How a shared expense is divided."""
    PROPORTIONAL = "proportional"  # Weighted by salary ratio
    CUSTOM = "custom"              # Explicit percentage and/or carve-outs


class ReimbursementStatus(str, Enum):
    OPEN = "open"
    SETTLED = "settled"


# =============================================================================
# CONFIGURATION
# =============================================================================

class RecurringIncome(BaseModel):
    """
    A virtual income injected into every month.

    It is suppressed for a month when a real salary income with the same
    description (case/whitespace-insensitive) exists for that person.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: str = Field(default_factory=new_id)
    description: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Matched against real salary incomes"
    )
    value: Decimal = Field(
        ...,
        ge=0,
        description="Monthly amount"
    )


class CoupleInfo(BaseModel):
    """
    Household configuration.

    salary1/salary2 are the legacy scalar salaries. They are only used
    when the matching recurring income list is empty.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    person1_name: str = Field(default="Pessoa 1", min_length=1)
    person2_name: str = Field(default="Pessoa 2", min_length=1)

    salary1: Decimal = Field(default=Decimal("0"), ge=0)
    salary2: Decimal = Field(default=Decimal("0"), ge=0)
    salary1_description: Optional[str] = None
    salary2_description: Optional[str] = None

    person1_recurring_incomes: tuple[RecurringIncome, ...] = Field(default_factory=tuple)
    person2_recurring_incomes: tuple[RecurringIncome, ...] = Field(default_factory=tuple)

    def name_of(self, person: Person) -> str:
        return self.person1_name if person is Person.PERSON1 else self.person2_name

    def legacy_salary(self, person: Person) -> tuple[Decimal, Optional[str]]:
        if person is Person.PERSON1:
            return self.salary1, self.salary1_description
        return self.salary2, self.salary2_description

    def recurring_incomes(self, person: Person) -> tuple[RecurringIncome, ...]:
        if person is Person.PERSON1:
            return self.person1_recurring_incomes
        return self.person2_recurring_incomes


# =============================================================================
# LEDGER RECORDS
# =============================================================================

class Income(BaseModel):
    """A dated income entry received by one person."""
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: str = Field(default_factory=new_id)
    description: str = Field(default="", max_length=200)
    value: Decimal = Field(..., ge=0)
    date: dt.date
    category: str = Field(
        ...,
        min_length=1,
        description="e.g. 'Salário', 'Investimento', 'Bônus'"
    )
    paid_by: Person = Field(
        ...,
        description="Who received the income"
    )


class ExpenseMetadata(BaseModel):
    """Free-form expense metadata."""
    model_config = ConfigDict(frozen=True)

    # month key (YYYY-MM) -> amount for that month only
    overrides: dict[str, Decimal] = Field(default_factory=dict)


class Expense(BaseModel):
    """
    The central ledger record.

    An expense is either fixed (recurs monthly, optionally overridden per
    month) or spread over `installments` months. `installments` is ignored
    for fixed types.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: str = Field(default_factory=new_id)
    description: str = Field(default="", max_length=200)
    type: ExpenseType
    total_value: Decimal = Field(
        ...,
        ge=0,
        description="Full value; for installment types, the sum of all installments"
    )
    date: dt.date
    installments: int = Field(default=1, ge=1)
    paid_by: Optional[Person] = Field(
        default=None,
        description="Who actually paid; None is tallied as unspecified"
    )
    category: str = Field(default="")

    # Splitting
    split_method: SplitMethod = SplitMethod.PROPORTIONAL
    split_percentage1: Optional[Decimal] = Field(
        default=None,
        ge=0,
        le=100,
        description="Person 1 share of the remainder (custom split only)"
    )
    specific_value_p1: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Part that is 100% person 1's (custom split only)"
    )
    specific_value_p2: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Part that is 100% person 2's (custom split only)"
    )

    # Reimbursement specific
    reimbursement_status: ReimbursementStatus = ReimbursementStatus.OPEN
    settled_at: Optional[dt.date] = None

    metadata: ExpenseMetadata = Field(default_factory=ExpenseMetadata)
    reminder_day: Optional[int] = Field(default=None, ge=1, le=31)

    @property
    def is_custom_split(self) -> bool:
        return self.split_method is SplitMethod.CUSTOM

    @property
    def is_settled(self) -> bool:
        return self.reimbursement_status is ReimbursementStatus.SETTLED
