"""
Audit Logger

DESIGN DECISION: Every settlement the household acts on is logged.
This provides:
1. Traceability from inputs to the transfer shown on screen
2. Debugging capability
3. History the household can review

The audit logger:
- Gracefully handles storage failures (doesn't crash the app if logging fails)
- Supports correlation IDs to trace related events
"""

import logging
import sys
from typing import Optional
from uuid import UUID, uuid4

import structlog

from household_ledger.config import AppSettings
from household_ledger.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from household_ledger.storage.interface import AuditStorageInterface


def _configure_structlog(log_json: bool = True) -> None:
    renderer = (
        structlog.processors.JSONRenderer()
        if log_json
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging(settings: Optional[AppSettings] = None) -> None:
    """
    Configure stdlib logging and structlog for an application.

    Importing this module only configures structlog; handlers and the
    root level are left to the caller until this is called.
    Safe to call more than once; the last call wins.
    """
    settings = settings or AppSettings()
    level = getattr(logging, settings.log_level)

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    logging.getLogger().setLevel(level)

    _configure_structlog(settings.log_json)


_configure_structlog()


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage (for persistence and household visibility)
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("household_ledger.audit")

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity is AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity is AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def log_summary_calculated(
        self,
        month_key: str,
        who_transfers: str,
        transfer_amount: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a monthly settlement."""
        self.log(AuditEventBuilder.summary_calculated(
            month_key=month_key,
            who_transfers=who_transfers,
            transfer_amount=transfer_amount,
            correlation_id=correlation_id,
        ))

    def log_unspecified_payer(
        self,
        month_key: str,
        count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log expenses that were tallied without a payer."""
        self.log(AuditEventBuilder.unspecified_payer(
            month_key=month_key,
            count=count,
            correlation_id=correlation_id,
        ))

    def log_orphan_goal_transaction(
        self,
        transaction_id: str,
        goal_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.orphan_goal_transaction(
            transaction_id=transaction_id,
            goal_id=goal_id,
            correlation_id=correlation_id,
        ))

    def log_trip_settled(
        self,
        trip_id: str,
        who_owes: str,
        amount: str,
        fund_balance: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a trip settlement."""
        self.log(AuditEventBuilder.trip_settled(
            trip_id=trip_id,
            who_owes=who_owes,
            amount=amount,
            fund_balance=fund_balance,
            correlation_id=correlation_id,
        ))

    def log_goal_stats(
        self,
        goal_id: str,
        total_balance: str,
        progress: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.goal_stats_calculated(
            goal_id=goal_id,
            total_balance=total_balance,
            progress=progress,
            correlation_id=correlation_id,
        ))

    def log_portfolio_calculated(
        self,
        investment_count: int,
        total_equity: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.portfolio_calculated(
            investment_count=investment_count,
            total_equity=total_equity,
            correlation_id=correlation_id,
        ))

    def log_validation_failed(
        self,
        record_type: str,
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log validation failure."""
        self.log(AuditEventBuilder.validation_failed(
            record_type=record_type,
            issues=issues,
            correlation_id=correlation_id,
        ))

    def log_record_saved(
        self,
        record_type: str,
        record_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.record_saved(
            record_type=record_type,
            record_id=record_id,
            correlation_id=correlation_id,
        ))

    def log_loan_payment(
        self,
        loan_id: str,
        amount: str,
        remaining: str,
        status: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.loan_payment_registered(
            loan_id=loan_id,
            amount=amount,
            remaining=remaining,
            status=status,
            correlation_id=correlation_id,
        ))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a household action (e.g., opening a month).
    Pass it through all subsequent operations.
    """
    return uuid4()
