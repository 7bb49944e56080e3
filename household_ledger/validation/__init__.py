"""Validation package."""

from household_ledger.validation.validator import RecordValidator, issues_from_validation_error

__all__ = ["RecordValidator", "issues_from_validation_error"]
