"""
Loan bookkeeping.

Loans are frozen records; every operation returns an updated copy.
"""

from decimal import Decimal
from typing import Iterable

from household_ledger.models.loans import Loan, LoanStatus
from household_ledger.money import ZERO, Number, money_sum, round2, to_decimal


def register_loan_payment(loan: Loan, amount: Number) -> Loan:
    """
    Record a free-form payment from the borrower.

    Non-positive amounts leave the loan untouched. Overpayment clamps the
    remaining value at zero.
    """
    amount = to_decimal(amount)
    if amount <= 0:
        return loan

    remaining = max(ZERO, round2(loan.remaining_value - amount))
    status = LoanStatus.PAID if remaining == 0 else LoanStatus.PARTIAL
    return loan.model_copy(update={"remaining_value": remaining, "status": status})


def installment_value(loan: Loan) -> Decimal:
    return round2(loan.total_value / loan.installments)


def pay_loan_installment(loan: Loan) -> Loan:
    """
    Record the next installment as received.

    Single-installment loans are paid with register_loan_payment instead.
    """
    if loan.installments <= 1:
        return loan

    paid_count = loan.paid_installments + 1
    remaining = max(ZERO, round2(loan.remaining_value - installment_value(loan)))
    # Last installment clears any rounding leftover
    if paid_count >= loan.installments:
        remaining = ZERO

    status = LoanStatus.PAID if remaining <= 0 else LoanStatus.PARTIAL
    return loan.model_copy(update={
        "remaining_value": remaining,
        "paid_installments": paid_count,
        "status": status,
    })


def total_pending(loans: Iterable[Loan]) -> Decimal:
    """Remaining value across loans that are not paid off."""
    return money_sum(loan.remaining_value for loan in loans if loan.status is not LoanStatus.PAID)
