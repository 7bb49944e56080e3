"""
In-Memory Storage

Dict-backed implementation of the storage interfaces. Used by tests and
by callers that load records from elsewhere and only need the engine.
"""

import threading
from typing import Optional
from uuid import UUID

import structlog

from household_ledger.models.audit import AuditEvent
from household_ledger.models.goals import GoalTransaction, SavingsGoal
from household_ledger.models.household import CoupleInfo, Expense, Income
from household_ledger.models.investments import Investment, InvestmentMovement
from household_ledger.models.loans import Loan
from household_ledger.models.trips import Trip
from household_ledger.storage.interface import (
    AuditStorageInterface,
    DuplicateError,
    LedgerSnapshot,
    LedgerStorageInterface,
    NotFoundError,
)

logger = structlog.get_logger(__name__)


class InMemoryLedgerStorage(LedgerStorageInterface):
    """
    Household records kept in dicts keyed by id.

    Insertion order is preserved, so snapshots list records in the order
    they were first saved.
    """

    def __init__(self, couple_info: Optional[CoupleInfo] = None):
        self._lock = threading.RLock()
        self._couple_info = couple_info or CoupleInfo()
        self._expenses: dict[str, Expense] = {}
        self._incomes: dict[str, Income] = {}
        self._goals: dict[str, SavingsGoal] = {}
        self._goal_transactions: dict[str, GoalTransaction] = {}
        self._trips: dict[str, Trip] = {}
        self._investments: dict[str, Investment] = {}
        self._movements: dict[str, InvestmentMovement] = {}
        self._loans: dict[str, Loan] = {}

    def get_couple_info(self) -> CoupleInfo:
        with self._lock:
            return self._couple_info

    def save_couple_info(self, couple_info: CoupleInfo) -> None:
        with self._lock:
            self._couple_info = couple_info

    def save_expense(self, expense: Expense) -> None:
        with self._lock:
            self._expenses[expense.id] = expense

    def delete_expense(self, expense_id: str) -> None:
        with self._lock:
            if expense_id not in self._expenses:
                raise NotFoundError(f"Expense {expense_id} not found")
            del self._expenses[expense_id]

    def save_income(self, income: Income) -> None:
        with self._lock:
            self._incomes[income.id] = income

    def save_goal(self, goal: SavingsGoal) -> None:
        with self._lock:
            self._goals[goal.id] = goal

    def append_goal_transaction(self, transaction: GoalTransaction) -> None:
        with self._lock:
            if transaction.id in self._goal_transactions:
                raise DuplicateError(f"Goal transaction {transaction.id} already exists")
            self._goal_transactions[transaction.id] = transaction

    def save_trip(self, trip: Trip) -> None:
        with self._lock:
            self._trips[trip.id] = trip

    def get_trip(self, trip_id: str) -> Trip:
        with self._lock:
            try:
                return self._trips[trip_id]
            except KeyError:
                raise NotFoundError(f"Trip {trip_id} not found") from None

    def save_investment(self, investment: Investment) -> None:
        with self._lock:
            self._investments[investment.id] = investment

    def append_investment_movement(self, movement: InvestmentMovement) -> None:
        with self._lock:
            if movement.id in self._movements:
                raise DuplicateError(f"Investment movement {movement.id} already exists")
            self._movements[movement.id] = movement

    def save_loan(self, loan: Loan) -> None:
        with self._lock:
            self._loans[loan.id] = loan

    def get_loan(self, loan_id: str) -> Loan:
        with self._lock:
            try:
                return self._loans[loan_id]
            except KeyError:
                raise NotFoundError(f"Loan {loan_id} not found") from None

    def snapshot(self) -> LedgerSnapshot:
        with self._lock:
            return LedgerSnapshot(
                couple_info=self._couple_info,
                expenses=tuple(self._expenses.values()),
                incomes=tuple(self._incomes.values()),
                goals=tuple(self._goals.values()),
                goal_transactions=tuple(self._goal_transactions.values()),
                trips=tuple(self._trips.values()),
                investments=tuple(self._investments.values()),
                investment_movements=tuple(self._movements.values()),
                loans=tuple(self._loans.values()),
            )


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only list of audit events."""

    def __init__(self):
        self._lock = threading.Lock()
        self._events: list[AuditEvent] = []

    def append_event(self, event: AuditEvent) -> bool:
        with self._lock:
            self._events.append(event)
        logger.debug("audit_event_stored", event_id=str(event.event_id))
        return True

    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        with self._lock:
            return [e for e in self._events if e.correlation_id == correlation_id]

    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: Optional[str],
    ) -> list[AuditEvent]:
        with self._lock:
            return [
                e for e in self._events
                if e.entity_type == entity_type and e.entity_id == entity_id
            ]

    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        if limit <= 0:
            return []
        with self._lock:
            return list(reversed(self._events[-limit:]))
