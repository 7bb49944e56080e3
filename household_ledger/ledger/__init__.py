"""
Calculation engine package.

Pure, synchronous functions: records in, value objects out.
"""

from household_ledger.ledger.errors import (
    InvalidMonthKeyError,
    LedgerError,
    OrphanGoalTransactionError,
)
from household_ledger.ledger.expenses import (
    expenses_for_month,
    get_installment_info,
    get_monthly_expense_value,
    is_expense_in_month,
    month_key_for,
    months_between,
    parse_month_key,
)
from household_ledger.ledger.goals import (
    calculate_goal_balance,
    calculate_goal_stats,
    calculate_goals_overview,
    calculate_individual_goal_balance,
    get_goal_progress,
)
from household_ledger.ledger.income import resolve_effective_incomes, salary_ratio
from household_ledger.ledger.investments import (
    calculate_investment_stats,
    calculate_portfolio_summary,
)
from household_ledger.ledger.loans import (
    pay_loan_installment,
    register_loan_payment,
    total_pending,
)
from household_ledger.ledger.settlement import settle_two_party
from household_ledger.ledger.summary import calculate_summary, split_shared_expense
from household_ledger.ledger.trips import calculate_trip_settlement

__all__ = [
    # Errors
    "InvalidMonthKeyError",
    "LedgerError",
    "OrphanGoalTransactionError",
    # Expenses
    "expenses_for_month",
    "get_installment_info",
    "get_monthly_expense_value",
    "is_expense_in_month",
    "month_key_for",
    "months_between",
    "parse_month_key",
    # Goals
    "calculate_goal_balance",
    "calculate_goal_stats",
    "calculate_goals_overview",
    "calculate_individual_goal_balance",
    "get_goal_progress",
    # Income and settlement
    "resolve_effective_incomes",
    "salary_ratio",
    "settle_two_party",
    "calculate_summary",
    "split_shared_expense",
    "calculate_trip_settlement",
    # Investments and loans
    "calculate_investment_stats",
    "calculate_portfolio_summary",
    "pay_loan_installment",
    "register_loan_payment",
    "total_pending",
]
