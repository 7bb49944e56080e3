"""
Data Models Package

This package contains all Pydantic models used in the Household Ledger.
All data flowing through the engine must conform to these schemas.
"""

from household_ledger.models.household import (
    CoupleInfo,
    Expense,
    ExpenseMetadata,
    ExpenseType,
    Income,
    Person,
    RecurringIncome,
    ReimbursementStatus,
    SplitMethod,
)
from household_ledger.models.summary import (
    EffectiveIncome,
    IncomeBreakdown,
    IncomeResolution,
    InstallmentInfo,
    MonthlySummary,
    SettlementParty,
    TwoPartySettlement,
)
from household_ledger.models.goals import (
    GoalStats,
    GoalTransaction,
    GoalTransactionType,
    GoalType,
    SavingsGoal,
)
from household_ledger.models.trips import (
    ProportionType,
    Trip,
    TripDeposit,
    TripExpense,
    TripPayer,
    TripSettlement,
)
from household_ledger.models.investments import (
    Investment,
    InvestmentMovement,
    InvestmentOwner,
    InvestmentStats,
    InvestmentType,
    MovementType,
    PortfolioSummary,
    RiskLevel,
)
from household_ledger.models.loans import Loan, LoanStatus
from household_ledger.models.validation import ValidationIssue, ValidationResult
from household_ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Household models
    "CoupleInfo",
    "Expense",
    "ExpenseMetadata",
    "ExpenseType",
    "Income",
    "Person",
    "RecurringIncome",
    "ReimbursementStatus",
    "SplitMethod",
    # Summary models
    "EffectiveIncome",
    "IncomeBreakdown",
    "IncomeResolution",
    "InstallmentInfo",
    "MonthlySummary",
    "SettlementParty",
    "TwoPartySettlement",
    # Goal models
    "GoalStats",
    "GoalTransaction",
    "GoalTransactionType",
    "GoalType",
    "SavingsGoal",
    # Trip models
    "ProportionType",
    "Trip",
    "TripDeposit",
    "TripExpense",
    "TripPayer",
    "TripSettlement",
    # Investment models
    "Investment",
    "InvestmentMovement",
    "InvestmentOwner",
    "InvestmentStats",
    "InvestmentType",
    "MovementType",
    "PortfolioSummary",
    "RiskLevel",
    # Loan models
    "Loan",
    "LoanStatus",
    # Validation models
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
