"""
Loan Models

Money one person lent to someone outside the household.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from household_ledger.models.household import Person, new_id


class LoanStatus(str, Enum):
    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"


class Loan(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: str = Field(default_factory=new_id)
    borrower_name: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    total_value: Decimal = Field(..., ge=0)
    remaining_value: Decimal = Field(..., ge=0)
    installments: int = Field(default=1, ge=1)
    paid_installments: int = Field(default=0, ge=0)
    due_date: Optional[dt.date] = None
    lender: Person
    status: LoanStatus = LoanStatus.PENDING

    @model_validator(mode='after')
    def validate_progress(self) -> 'Loan':
        """Remaining value cannot exceed what was lent."""
        if self.remaining_value > self.total_value:
            raise ValueError("Remaining value cannot exceed total value")
        return self
