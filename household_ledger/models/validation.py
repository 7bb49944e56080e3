"""
Validation Result Models

The validation gate never raises for bad data. It reports issues so the
caller can show them next to the offending field.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

from household_ledger.models.audit import utc_now


class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value', 'suspicious_value')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """
    Result of the two-stage validation.

    Stage 1: Schema validation (types, required fields, ranges)
    Stage 2: Semantic validation (cross-field logic checks)

    `record` holds the parsed model when schema validation passed.
    """

    record_type: str
    validated_at: datetime = Field(
        default_factory=utc_now
    )

    schema_valid: bool
    semantic_valid: bool
    is_valid: bool

    issues: list[ValidationIssue] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    record: Optional[Any] = Field(default=None, exclude=True)

    @property
    def success(self) -> bool:
        return self.is_valid

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    def field_errors(self) -> dict[str, list[str]]:
        """Error messages grouped by field."""
        errors: dict[str, list[str]] = {}
        for issue in self.issues:
            if issue.severity == "error":
                errors.setdefault(issue.field, []).append(issue.message)
        return errors
