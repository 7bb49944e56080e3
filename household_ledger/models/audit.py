"""
Audit Models for Household Ledger

Every settlement the household acts on is logged for audit purposes.
This provides:
1. Traceability of which inputs produced which transfer
2. Debugging information when a number looks wrong
3. Ability to reconstruct history

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

import json
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Calculations
    SUMMARY_CALCULATED = "summary_calculated"
    TRIP_SETTLED = "trip_settled"
    GOAL_STATS_CALCULATED = "goal_stats_calculated"
    PORTFOLIO_CALCULATED = "portfolio_calculated"

    # Data quality
    UNSPECIFIED_PAYER = "unspecified_payer"
    ORPHAN_GOAL_TRANSACTION = "orphan_goal_transaction"

    # Validation
    VALIDATION_FAILED = "validation_failed"

    # Persistence
    RECORD_SAVED = "record_saved"
    LOAN_PAYMENT_REGISTERED = "loan_payment_registered"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=utc_now,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'month', 'trip', 'goal')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., one dashboard refresh)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )

    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }

    def to_row(self) -> list:
        """
        Flat row for tabular storage.

        Columns: [event_id, timestamp, event_type, severity, entity_type,
        entity_id, correlation_id, description, details_json, error_message]
        """
        return [
            str(self.event_id),
            self.timestamp.isoformat(),
            self.event_type.value,
            self.severity.value,
            self.entity_type or "",
            self.entity_id or "",
            str(self.correlation_id) if self.correlation_id else "",
            self.description,
            json.dumps(self.details, default=str) if self.details else "",
            self.error_message or "",
        ]


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.summary_calculated("2024-01", "person2", "500.00", cid)
    """

    @staticmethod
    def summary_calculated(
        month_key: str,
        who_transfers: str,
        transfer_amount: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SUMMARY_CALCULATED,
            entity_type="month",
            entity_id=month_key,
            correlation_id=correlation_id,
            description=f"Summary for {month_key}: {who_transfers} transfers {transfer_amount}",
            details={
                "who_transfers": who_transfers,
                "transfer_amount": transfer_amount,
            },
        )

    @staticmethod
    def trip_settled(
        trip_id: str,
        who_owes: str,
        amount: str,
        fund_balance: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRIP_SETTLED,
            entity_type="trip",
            entity_id=trip_id,
            correlation_id=correlation_id,
            description=f"Trip settled: {who_owes} owes {amount}",
            details={
                "who_owes": who_owes,
                "amount_to_settle": amount,
                "fund_balance": fund_balance,
            },
        )

    @staticmethod
    def goal_stats_calculated(
        goal_id: str,
        total_balance: str,
        progress: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.GOAL_STATS_CALCULATED,
            severity=AuditSeverity.DEBUG,
            entity_type="goal",
            entity_id=goal_id,
            correlation_id=correlation_id,
            description=f"Goal at {progress}% ({total_balance})",
            details={
                "total_balance": total_balance,
                "progress": progress,
            },
        )

    @staticmethod
    def portfolio_calculated(
        investment_count: int,
        total_equity: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PORTFOLIO_CALCULATED,
            entity_type="portfolio",
            correlation_id=correlation_id,
            description=f"Portfolio of {investment_count} investments: {total_equity}",
            details={
                "investment_count": investment_count,
                "total_equity": total_equity,
            },
        )

    @staticmethod
    def unspecified_payer(
        month_key: str,
        count: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.UNSPECIFIED_PAYER,
            severity=AuditSeverity.WARNING,
            entity_type="month",
            entity_id=month_key,
            correlation_id=correlation_id,
            description=f"{count} expenses in {month_key} have no payer",
            details={"count": count},
        )

    @staticmethod
    def orphan_goal_transaction(
        transaction_id: str,
        goal_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ORPHAN_GOAL_TRANSACTION,
            severity=AuditSeverity.WARNING,
            entity_type="goal_transaction",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description=f"Transaction references unknown goal {goal_id}",
            details={"goal_id": goal_id},
        )

    @staticmethod
    def validation_failed(
        record_type: str,
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type=record_type,
            correlation_id=correlation_id,
            description=f"{record_type.capitalize()} validation failed with {len(issues)} issues",
            details={"issues": issues},
        )

    @staticmethod
    def record_saved(
        record_type: str,
        record_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_SAVED,
            entity_type=record_type,
            entity_id=record_id,
            correlation_id=correlation_id,
            description=f"{record_type.capitalize()} saved",
        )

    @staticmethod
    def loan_payment_registered(
        loan_id: str,
        amount: str,
        remaining: str,
        status: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOAN_PAYMENT_REGISTERED,
            entity_type="loan",
            entity_id=loan_id,
            correlation_id=correlation_id,
            description=f"Loan payment of {amount}, {remaining} remaining",
            details={
                "amount": amount,
                "remaining_value": remaining,
                "status": status,
            },
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
