"""
Household Ledger Service

This module ties the storage, validation, engine and audit layers
together for the household's everyday flows:
1. Record entry (raw dict → validate → save → audit)
2. Month close (snapshot → calculate_summary → audit)
3. Trip settlement, goal overview, portfolio, loan payments

DESIGN DECISION: The service enforces the boundaries:
- No record reaches storage without passing validation
- The engine only ever sees a snapshot, never live storage
- Every step is audited

The engine functions stay usable on their own; the service adds
persistence and the audit trail around them.
"""

from decimal import Decimal
from typing import Any, Optional
from uuid import UUID

import structlog

from household_ledger.audit import AuditLogger, create_correlation_id
from household_ledger.config import LedgerSettings, get_settings
from household_ledger.ledger import (
    OrphanGoalTransactionError,
    calculate_goals_overview,
    calculate_portfolio_summary,
    calculate_summary,
    calculate_trip_settlement,
    pay_loan_installment,
    register_loan_payment,
    resolve_effective_incomes,
    salary_ratio,
)
from household_ledger.models import (
    GoalStats,
    Loan,
    MonthlySummary,
    Person,
    PortfolioSummary,
    TripSettlement,
    ValidationResult,
)
from household_ledger.money import Number, to_decimal
from household_ledger.storage import LedgerStorageInterface
from household_ledger.validation import RecordValidator

logger = structlog.get_logger(__name__)


class HouseholdLedgerService:
    """
    Facade over one household's records.

    Flow for record entry:
    1. Validate → two-stage validation of the raw record
    2. Save → persist only if validation found no errors
    3. Audit → record the failure or the save

    Computations read a snapshot from storage, run the engine and
    audit the outcome.
    """

    def __init__(
        self,
        storage: LedgerStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[LedgerSettings] = None,
        validator: Optional[RecordValidator] = None,
    ):
        self._storage = storage
        self._audit_logger = audit_logger
        self._settings = settings or get_settings().ledger
        self._validator = validator or RecordValidator(self._settings)

    # -------------------------------------------------------------------------
    # Record entry
    # -------------------------------------------------------------------------

    def _accept(
        self,
        result: ValidationResult,
        correlation_id: Optional[UUID],
    ) -> ValidationResult:
        if not result.is_valid:
            if self._audit_logger:
                issues = [
                    {"field": i.field, "type": i.issue_type, "message": i.message}
                    for i in result.issues
                ]
                self._audit_logger.log_validation_failed(
                    record_type=result.record_type,
                    issues=issues,
                    correlation_id=correlation_id,
                )
            return result

        record = result.record
        save = {
            "expense": self._storage.save_expense,
            "income": self._storage.save_income,
            "goal": self._storage.save_goal,
            "goal_transaction": self._storage.append_goal_transaction,
            "trip": self._storage.save_trip,
            "investment": self._storage.save_investment,
            "investment_movement": self._storage.append_investment_movement,
            "loan": self._storage.save_loan,
        }[result.record_type]
        save(record)

        if self._audit_logger:
            self._audit_logger.log_record_saved(
                record_type=result.record_type,
                record_id=record.id,
                correlation_id=correlation_id,
            )
        return result

    def add_expense(self, data: Any, correlation_id: Optional[UUID] = None) -> ValidationResult:
        return self._accept(self._validator.validate_expense(data), correlation_id)

    def add_income(self, data: Any, correlation_id: Optional[UUID] = None) -> ValidationResult:
        return self._accept(self._validator.validate_income(data), correlation_id)

    def add_goal(self, data: Any, correlation_id: Optional[UUID] = None) -> ValidationResult:
        return self._accept(self._validator.validate_goal(data), correlation_id)

    def add_goal_transaction(
        self,
        data: Any,
        correlation_id: Optional[UUID] = None,
    ) -> ValidationResult:
        return self._accept(self._validator.validate_goal_transaction(data), correlation_id)

    def add_trip(self, data: Any, correlation_id: Optional[UUID] = None) -> ValidationResult:
        return self._accept(self._validator.validate_trip(data), correlation_id)

    def add_investment(self, data: Any, correlation_id: Optional[UUID] = None) -> ValidationResult:
        return self._accept(self._validator.validate_investment(data), correlation_id)

    def add_investment_movement(
        self,
        data: Any,
        correlation_id: Optional[UUID] = None,
    ) -> ValidationResult:
        return self._accept(self._validator.validate_investment_movement(data), correlation_id)

    def add_loan(self, data: Any, correlation_id: Optional[UUID] = None) -> ValidationResult:
        return self._accept(self._validator.validate_loan(data), correlation_id)

    def update_couple_info(
        self,
        data: Any,
        correlation_id: Optional[UUID] = None,
    ) -> ValidationResult:
        """Validate and replace the household configuration."""
        result = self._validator.validate_couple_info(data)
        if not result.is_valid:
            if self._audit_logger:
                self._audit_logger.log_validation_failed(
                    record_type=result.record_type,
                    issues=[
                        {"field": i.field, "type": i.issue_type, "message": i.message}
                        for i in result.issues
                    ],
                    correlation_id=correlation_id,
                )
            return result

        self._storage.save_couple_info(result.record)
        if self._audit_logger:
            self._audit_logger.log_record_saved(
                record_type="couple_info",
                record_id="household",
                correlation_id=correlation_id,
            )
        return result

    # -------------------------------------------------------------------------
    # Computations
    # -------------------------------------------------------------------------

    def monthly_summary(
        self,
        month_key: str,
        correlation_id: Optional[UUID] = None,
    ) -> MonthlySummary:
        """
        Close a month from the current records.

        Raises:
            InvalidMonthKeyError: If month_key is malformed
            OrphanGoalTransactionError: In strict mode, after auditing it
        """
        correlation_id = correlation_id or create_correlation_id()
        snapshot = self._storage.snapshot()

        if self._audit_logger:
            known = {goal.id for goal in snapshot.goals}
            for transaction in snapshot.goal_transactions:
                if transaction.goal_id not in known:
                    self._audit_logger.log_orphan_goal_transaction(
                        transaction_id=transaction.id,
                        goal_id=transaction.goal_id,
                        correlation_id=correlation_id,
                    )

        try:
            summary = calculate_summary(
                snapshot.expenses,
                snapshot.incomes,
                snapshot.couple_info,
                month_key,
                snapshot.goals,
                snapshot.goal_transactions,
                settings=self._settings,
            )
        except OrphanGoalTransactionError as e:
            if self._audit_logger:
                self._audit_logger.log_error(
                    error_type="orphan_goal_transaction",
                    error_message=str(e),
                    details={"month_key": month_key},
                    correlation_id=correlation_id,
                )
            raise

        if self._audit_logger:
            self._audit_logger.log_summary_calculated(
                month_key=month_key,
                who_transfers=summary.who_transfers.value,
                transfer_amount=str(summary.transfer_amount),
                correlation_id=correlation_id,
            )
            if summary.unspecified_paid_by_count:
                self._audit_logger.log_unspecified_payer(
                    month_key=month_key,
                    count=summary.unspecified_paid_by_count,
                    correlation_id=correlation_id,
                )
        return summary

    def salary_ratio_for(self, month_key: str) -> Decimal:
        """Person 1's share of the month's reconciled salaries."""
        snapshot = self._storage.snapshot()
        resolved = [
            resolve_effective_incomes(
                snapshot.couple_info, snapshot.incomes, person, month_key, self._settings
            )
            for person in (Person.PERSON1, Person.PERSON2)
        ]
        return salary_ratio(resolved[0].salary_total, resolved[1].salary_total)

    def settle_trip(
        self,
        trip_id: str,
        month_key: Optional[str] = None,
        p1_salary_ratio: Optional[Number] = None,
        correlation_id: Optional[UUID] = None,
    ) -> TripSettlement:
        """
        Settle a stored trip.

        The ratio is either given directly or derived from the salaries
        of `month_key`; with neither, costs are shared equally.

        Raises:
            NotFoundError: If the trip doesn't exist
        """
        correlation_id = correlation_id or create_correlation_id()
        trip = self._storage.get_trip(trip_id)

        if p1_salary_ratio is not None:
            ratio = to_decimal(p1_salary_ratio)
        elif month_key is not None:
            ratio = self.salary_ratio_for(month_key)
        else:
            ratio = Decimal("0.5")

        settlement = calculate_trip_settlement(trip, ratio, self._settings)

        if self._audit_logger:
            self._audit_logger.log_trip_settled(
                trip_id=trip.id,
                who_owes=settlement.who_owes.value,
                amount=str(settlement.amount_to_settle),
                fund_balance=str(settlement.fund_balance),
                correlation_id=correlation_id,
            )
        return settlement

    def goals_overview(self, correlation_id: Optional[UUID] = None) -> dict[str, GoalStats]:
        correlation_id = correlation_id or create_correlation_id()
        snapshot = self._storage.snapshot()
        overview = calculate_goals_overview(snapshot.goals, snapshot.goal_transactions)

        if self._audit_logger:
            for goal_id, stats in overview.items():
                self._audit_logger.log_goal_stats(
                    goal_id=goal_id,
                    total_balance=str(stats.total_balance),
                    progress=str(stats.progress),
                    correlation_id=correlation_id,
                )
        return overview

    def portfolio(self, correlation_id: Optional[UUID] = None) -> PortfolioSummary:
        correlation_id = correlation_id or create_correlation_id()
        snapshot = self._storage.snapshot()
        summary = calculate_portfolio_summary(snapshot.investments, snapshot.investment_movements)

        if self._audit_logger:
            self._audit_logger.log_portfolio_calculated(
                investment_count=len(summary.stats_by_investment),
                total_equity=str(summary.total_equity),
                correlation_id=correlation_id,
            )
        return summary

    # -------------------------------------------------------------------------
    # Loans
    # -------------------------------------------------------------------------

    def _store_loan_payment(
        self,
        before: Loan,
        after: Loan,
        correlation_id: Optional[UUID],
    ) -> Loan:
        if after is before:
            logger.info("loan_payment_ignored", loan_id=before.id)
            return before

        self._storage.save_loan(after)
        if self._audit_logger:
            self._audit_logger.log_loan_payment(
                loan_id=after.id,
                amount=str(before.remaining_value - after.remaining_value),
                remaining=str(after.remaining_value),
                status=after.status.value,
                correlation_id=correlation_id,
            )
        return after

    def register_loan_payment(
        self,
        loan_id: str,
        amount: Number,
        correlation_id: Optional[UUID] = None,
    ) -> Loan:
        """
        Record a payment received for a loan.

        Raises:
            NotFoundError: If the loan doesn't exist
        """
        loan = self._storage.get_loan(loan_id)
        return self._store_loan_payment(loan, register_loan_payment(loan, amount), correlation_id)

    def pay_loan_installment(
        self,
        loan_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> Loan:
        loan = self._storage.get_loan(loan_id)
        return self._store_loan_payment(loan, pay_loan_installment(loan), correlation_id)
