"""
Two-Stage Record Validation

DESIGN DECISION: Records are validated before they reach the engine.
The engine assumes well-formed input and never raises on bad values,
so this gate is where bad data gets reported.

STAGE 1 - SCHEMA VALIDATION:
- Type checking
- Required field presence
- Ranges (percentages 0-100, non-negative money)
- Runs the Pydantic model and translates its errors

STAGE 2 - SEMANTIC VALIDATION:
- Cross-field checks (carve-outs larger than the expense, overrides
  keyed by bad month keys, paid installments beyond the total)
- Suspicious values (absurd amounts, missing payer)

IMPORTANT: Validation NEVER silently fixes issues.
It reports them for human review.
"""

from decimal import Decimal
from typing import Any, Callable, Optional, Type

from pydantic import BaseModel, ValidationError

from household_ledger.config import LedgerSettings
from household_ledger.ledger.errors import InvalidMonthKeyError
from household_ledger.ledger.expenses import parse_month_key
from household_ledger.models.goals import GoalTransaction, SavingsGoal
from household_ledger.models.household import CoupleInfo, Expense, Income
from household_ledger.models.investments import Investment, InvestmentMovement
from household_ledger.models.loans import Loan
from household_ledger.models.trips import ProportionType, Trip, TripDeposit, TripExpense
from household_ledger.models.validation import ValidationIssue, ValidationResult

SemanticCheck = Callable[[Any], list[ValidationIssue]]


def _error(field: str, issue_type: str, message: str, fix: Optional[str] = None) -> ValidationIssue:
    return ValidationIssue(
        field=field,
        issue_type=issue_type,
        message=message,
        severity="error",
        suggested_fix=fix,
    )


def _warning(field: str, issue_type: str, message: str, fix: Optional[str] = None) -> ValidationIssue:
    return ValidationIssue(
        field=field,
        issue_type=issue_type,
        message=message,
        severity="warning",
        suggested_fix=fix,
    )


def issues_from_validation_error(exc: ValidationError) -> list[ValidationIssue]:
    """Translate Pydantic errors into field issues."""
    issues = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err["loc"]) or "record"
        issue_type = "missing" if err["type"] == "missing" else "invalid_value"
        issues.append(_error(field, issue_type, err["msg"]))
    return issues


class RecordValidator:
    """
    Validates raw household records through a two-stage pipeline.

    Every validate_* method takes a dict (or model) and returns a
    ValidationResult; `result.record` holds the parsed model when the
    schema stage passed.
    """

    def __init__(self, settings: Optional[LedgerSettings] = None):
        self._settings = settings or LedgerSettings()

    def _run(
        self,
        record_type: str,
        model: Type[BaseModel],
        data: Any,
        semantic: Optional[SemanticCheck] = None,
    ) -> ValidationResult:
        issues: list[ValidationIssue] = []

        # Stage 1: Schema validation
        record = None
        try:
            if isinstance(data, model):
                record = data
            else:
                record = model.model_validate(data)
        except ValidationError as exc:
            issues.extend(issues_from_validation_error(exc))
        schema_valid = record is not None

        # Only run stage 2 if stage 1 passes
        semantic_valid = False
        if schema_valid:
            semantic_issues = semantic(record) if semantic else []
            issues.extend(semantic_issues)
            semantic_valid = not any(i.severity == "error" for i in semantic_issues)

        return ValidationResult(
            record_type=record_type,
            schema_valid=schema_valid,
            semantic_valid=semantic_valid,
            is_valid=schema_valid and semantic_valid,
            issues=issues,
            warnings=[i.message for i in issues if i.severity == "warning"],
            record=record if schema_valid else None,
        )

    # -------------------------------------------------------------------------
    # Semantic checks
    # -------------------------------------------------------------------------

    def _check_amount(self, field: str, value: Decimal) -> list[ValidationIssue]:
        issues = []
        if value <= 0:
            issues.append(_error(field, "invalid_value", "Value must be positive"))
        elif value > self._settings.max_expense_value:
            issues.append(_warning(
                field,
                "suspicious_value",
                f"Value ({value:,.2f}) seems unusually high",
                "Please verify this amount is correct",
            ))
        return issues

    def _check_expense(self, expense: Expense) -> list[ValidationIssue]:
        issues = self._check_amount("total_value", expense.total_value)

        if expense.installments > self._settings.max_installments:
            issues.append(_error(
                "installments",
                "invalid_value",
                f"At most {self._settings.max_installments} installments are supported",
            ))
        elif expense.type.is_fixed and expense.installments > 1:
            issues.append(ValidationIssue(
                field="installments",
                issue_type="ignored",
                message="Installments are ignored for fixed expenses",
                severity="info",
            ))

        if expense.paid_by is None and not expense.type.is_personal:
            issues.append(_warning(
                "paid_by",
                "missing",
                "Nobody is set as the payer; the expense won't count as paid",
                "Choose who paid this expense",
            ))

        carve_outs = expense.specific_value_p1 + expense.specific_value_p2
        if expense.is_custom_split:
            if carve_outs > expense.total_value:
                issues.append(_error(
                    "specific_value_p1",
                    "inconsistent",
                    "Specific values add up to more than the expense",
                    "Reduce the specific values",
                ))
        elif carve_outs > 0 or expense.split_percentage1 is not None:
            issues.append(_warning(
                "split_method",
                "ignored",
                "Custom split values are ignored for a proportional split",
                "Switch the split method to custom",
            ))

        for month_key in expense.metadata.overrides:
            try:
                parse_month_key(month_key)
            except InvalidMonthKeyError:
                issues.append(_error(
                    "metadata.overrides",
                    "invalid_format",
                    f"Override key {month_key!r} is not a YYYY-MM month",
                ))
        if expense.metadata.overrides and not expense.type.is_fixed:
            issues.append(_warning(
                "metadata.overrides",
                "ignored",
                "Monthly overrides only apply to fixed expenses",
            ))

        if expense.settled_at and not expense.is_settled:
            issues.append(_warning(
                "settled_at",
                "inconsistent",
                "Settlement date set on an open reimbursement",
            ))

        return issues

    def _check_couple_info(self, info: CoupleInfo) -> list[ValidationIssue]:
        issues = []
        for field in ("person1_recurring_incomes", "person2_recurring_incomes"):
            seen = set()
            for entry in getattr(info, field):
                key = entry.description.strip().lower()
                if key in seen:
                    issues.append(_warning(
                        field,
                        "duplicate",
                        f"Recurring income {entry.description!r} is listed twice",
                        "A single real salary entry will suppress both",
                    ))
                seen.add(key)
        return issues

    def _check_trip(self, trip: Trip) -> list[ValidationIssue]:
        if trip.proportion_type is ProportionType.CUSTOM and trip.custom_percentage1 is None:
            return [_warning(
                "custom_percentage1",
                "missing",
                "Custom trip without a percentage falls back to the salary ratio",
                "Set person 1's percentage",
            )]
        return []

    def _check_loan(self, loan: Loan) -> list[ValidationIssue]:
        issues = self._check_amount("total_value", loan.total_value)
        if loan.paid_installments > loan.installments:
            issues.append(_error(
                "paid_installments",
                "inconsistent",
                "More installments paid than the loan has",
            ))
        return issues

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def validate_expense(self, data: Any) -> ValidationResult:
        return self._run("expense", Expense, data, self._check_expense)

    def validate_income(self, data: Any) -> ValidationResult:
        return self._run("income", Income, data, lambda i: self._check_amount("value", i.value))

    def validate_couple_info(self, data: Any) -> ValidationResult:
        return self._run("couple_info", CoupleInfo, data, self._check_couple_info)

    def validate_goal(self, data: Any) -> ValidationResult:
        return self._run(
            "goal", SavingsGoal, data, lambda g: self._check_amount("target_value", g.target_value)
        )

    def validate_goal_transaction(self, data: Any) -> ValidationResult:
        return self._run(
            "goal_transaction", GoalTransaction, data, lambda t: self._check_amount("value", t.value)
        )

    def validate_trip(self, data: Any) -> ValidationResult:
        return self._run("trip", Trip, data, self._check_trip)

    def validate_trip_expense(self, data: Any) -> ValidationResult:
        return self._run(
            "trip_expense", TripExpense, data, lambda e: self._check_amount("value", e.value)
        )

    def validate_trip_deposit(self, data: Any) -> ValidationResult:
        return self._run(
            "trip_deposit", TripDeposit, data, lambda d: self._check_amount("value", d.value)
        )

    def validate_loan(self, data: Any) -> ValidationResult:
        return self._run("loan", Loan, data, self._check_loan)

    def validate_investment(self, data: Any) -> ValidationResult:
        return self._run("investment", Investment, data)

    def validate_investment_movement(self, data: Any) -> ValidationResult:
        return self._run("investment_movement", InvestmentMovement, data)

    def get_user_friendly_summary(
        self,
        result: ValidationResult,
    ) -> str:
        """
        Generate a user-friendly summary of validation results.
        """
        if result.is_valid and not result.warnings:
            return "✅ All checks passed!"

        lines = []

        if result.has_errors:
            lines.append("❌ Please fix the following:")
            for issue in result.issues:
                if issue.severity == "error":
                    lines.append(f"   • {issue.field}: {issue.message}")
                    if issue.suggested_fix:
                        lines.append(f"     💡 {issue.suggested_fix}")

        if result.warnings:
            if lines:
                lines.append("")
            lines.append("⚠️ Please verify the following:")
            for warning in result.warnings:
                lines.append(f"   • {warning}")

        return "\n".join(lines)
