"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Plug in the real backend without touching the engine
2. Use in-memory storage for testing
3. Hand the engine a consistent snapshot instead of live collections

The interface is intentionally simple - we're not building a full ORM.
Soft deletion and sync with the backend are the backend's concern.
"""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from household_ledger.models.audit import AuditEvent
from household_ledger.models.goals import GoalTransaction, SavingsGoal
from household_ledger.models.household import CoupleInfo, Expense, Income
from household_ledger.models.investments import Investment, InvestmentMovement
from household_ledger.models.loans import Loan
from household_ledger.models.trips import Trip


class LedgerSnapshot(BaseModel):
    """
    Immutable copy of everything the engine needs.

    Taken under the storage lock so that a summary is never computed
    from a half-applied edit.
    """
    model_config = ConfigDict(frozen=True)

    couple_info: CoupleInfo
    expenses: tuple[Expense, ...] = Field(default_factory=tuple)
    incomes: tuple[Income, ...] = Field(default_factory=tuple)
    goals: tuple[SavingsGoal, ...] = Field(default_factory=tuple)
    goal_transactions: tuple[GoalTransaction, ...] = Field(default_factory=tuple)
    trips: tuple[Trip, ...] = Field(default_factory=tuple)
    investments: tuple[Investment, ...] = Field(default_factory=tuple)
    investment_movements: tuple[InvestmentMovement, ...] = Field(default_factory=tuple)
    loans: tuple[Loan, ...] = Field(default_factory=tuple)


class LedgerStorageInterface(ABC):
    """
    Abstract interface for household record storage.

    Any storage implementation must implement these methods.
    save_* methods insert or replace by id.
    """

    @abstractmethod
    def get_couple_info(self) -> CoupleInfo:
        pass

    @abstractmethod
    def save_couple_info(self, couple_info: CoupleInfo) -> None:
        pass

    @abstractmethod
    def save_expense(self, expense: Expense) -> None:
        pass

    @abstractmethod
    def delete_expense(self, expense_id: str) -> None:
        """
        Remove an expense.

        Raises:
            NotFoundError: If the expense doesn't exist
        """
        pass

    @abstractmethod
    def save_income(self, income: Income) -> None:
        pass

    @abstractmethod
    def save_goal(self, goal: SavingsGoal) -> None:
        pass

    @abstractmethod
    def append_goal_transaction(self, transaction: GoalTransaction) -> None:
        """
        Append a goal transaction.

        Goal history is append-only.

        Raises:
            DuplicateError: If a transaction with the same id exists
        """
        pass

    @abstractmethod
    def save_trip(self, trip: Trip) -> None:
        pass

    @abstractmethod
    def get_trip(self, trip_id: str) -> Trip:
        """
        Raises:
            NotFoundError: If the trip doesn't exist
        """
        pass

    @abstractmethod
    def save_investment(self, investment: Investment) -> None:
        pass

    @abstractmethod
    def append_investment_movement(self, movement: InvestmentMovement) -> None:
        pass

    @abstractmethod
    def save_loan(self, loan: Loan) -> None:
        pass

    @abstractmethod
    def get_loan(self, loan_id: str) -> Loan:
        """
        Raises:
            NotFoundError: If the loan doesn't exist
        """
        pass

    @abstractmethod
    def snapshot(self) -> LedgerSnapshot:
        """Consistent copy of all records."""
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """Related events in chronological order."""
        pass

    @abstractmethod
    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: Optional[str],
    ) -> list[AuditEvent]:
        pass

    @abstractmethod
    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """Most recent events, newest first."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass
