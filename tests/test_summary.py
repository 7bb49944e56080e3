"""
Tests for the monthly household settlement.

All scenarios run against January 2024 unless stated otherwise.
"""

import datetime as dt
from decimal import Decimal

import pytest

from household_ledger.config import LedgerSettings
from household_ledger.ledger import (
    InvalidMonthKeyError,
    OrphanGoalTransactionError,
    calculate_summary,
    split_shared_expense,
)
from household_ledger.models import (
    CoupleInfo,
    Expense,
    ExpenseType,
    GoalTransaction,
    GoalTransactionType,
    Income,
    Person,
    RecurringIncome,
    ReimbursementStatus,
    SavingsGoal,
    SettlementParty,
    SplitMethod,
)

MONTH = "2024-01"
DAY = dt.date(2024, 1, 10)


def make_expense(**overrides) -> Expense:
    data = {
        "description": "Mercado",
        "type": ExpenseType.COMMON,
        "total_value": Decimal("1000"),
        "date": DAY,
        "paid_by": Person.PERSON1,
        "category": "Alimentação",
    }
    data.update(overrides)
    return Expense(**data)


def couple(salary1="5000", salary2="5000") -> CoupleInfo:
    return CoupleInfo(salary1=Decimal(salary1), salary2=Decimal(salary2))


def deposit(goal_id: str, value: str, person: Person, day: dt.date = DAY) -> GoalTransaction:
    return GoalTransaction(
        goal_id=goal_id,
        type=GoalTransactionType.DEPOSIT,
        value=Decimal(value),
        person=person,
        date=day,
    )


class TestSplitScenarios:
    """Reference settlements for a single shared expense."""

    def test_custom_fifty_fifty(self):
        """Custom 50% split paid by person 1: person 2 sends back half."""
        expense = make_expense(split_method=SplitMethod.CUSTOM, split_percentage1=Decimal("50"))

        summary = calculate_summary([expense], [], couple(), MONTH)

        assert summary.person1_responsibility == Decimal("500")
        assert summary.person2_responsibility == Decimal("500")
        assert summary.transfer_amount == Decimal("500")
        assert summary.who_transfers is SettlementParty.PERSON2

    def test_proportional_uses_salary_ratio(self):
        summary = calculate_summary([make_expense()], [], couple("7000", "3000"), MONTH)

        assert summary.salary_ratio1 == Decimal("0.7")
        assert summary.person1_responsibility == Decimal("700")
        assert summary.person2_responsibility == Decimal("300")
        assert summary.transfer_amount == Decimal("300")
        assert summary.who_transfers is SettlementParty.PERSON2

    def test_specific_value_carved_out_before_split(self):
        expense = make_expense(
            split_method=SplitMethod.CUSTOM,
            split_percentage1=Decimal("50"),
            specific_value_p1=Decimal("200"),
        )

        summary = calculate_summary([expense], [], couple(), MONTH)

        assert summary.person1_responsibility == Decimal("600")
        assert summary.person2_responsibility == Decimal("400")
        assert summary.transfer_amount == Decimal("400")

    def test_equal_type_forces_half_split(self):
        expense = make_expense(type=ExpenseType.EQUAL)

        summary = calculate_summary([expense], [], couple("7000", "3000"), MONTH)

        assert summary.person1_responsibility == Decimal("500")
        assert summary.person2_responsibility == Decimal("500")
        assert summary.total_equal == Decimal("1000")

    def test_equal_type_respects_custom_percentage(self):
        expense = make_expense(
            type=ExpenseType.EQUAL,
            split_method=SplitMethod.CUSTOM,
            split_percentage1=Decimal("80"),
        )

        summary = calculate_summary([expense], [], couple(), MONTH)

        assert summary.person1_responsibility == Decimal("800")

    def test_no_salaries_splits_evenly(self):
        summary = calculate_summary([make_expense()], [], CoupleInfo(), MONTH)

        assert summary.salary_ratio1 == Decimal("0.5")
        assert summary.person2_responsibility == Decimal("500")

    def test_balanced_month_needs_no_transfer(self):
        expenses = [
            make_expense(paid_by=Person.PERSON1),
            make_expense(paid_by=Person.PERSON2),
        ]

        summary = calculate_summary(expenses, [], couple(), MONTH)

        assert summary.who_transfers is SettlementParty.NONE
        assert summary.transfer_amount == 0


class TestSplitInvariant:
    """Responsibility parts always add up to the month's value."""

    @pytest.mark.parametrize("expense_type", [ExpenseType.FIXED, ExpenseType.COMMON, ExpenseType.EQUAL])
    @pytest.mark.parametrize("ratio", ["0.5", "0.3333", "0.7142857", "1", "0"])
    @pytest.mark.parametrize("monthly", ["0.01", "33.33", "1000", "99999.99"])
    def test_proportional_parts_sum(self, expense_type, ratio, monthly):
        expense = make_expense(type=expense_type, total_value=Decimal(monthly))

        part1, part2 = split_shared_expense(expense, Decimal(monthly), Decimal(ratio))

        assert part1 + part2 == Decimal(monthly)

    @pytest.mark.parametrize("percentage", [None, "0", "33.3", "50", "66.67", "100"])
    def test_custom_parts_sum_with_carve_outs(self, percentage):
        expense = make_expense(
            total_value=Decimal("1000"),
            installments=3,
            split_method=SplitMethod.CUSTOM,
            split_percentage1=Decimal(percentage) if percentage else None,
            specific_value_p1=Decimal("123.45"),
            specific_value_p2=Decimal("77.77"),
        )

        for monthly in (Decimal("333.33"), Decimal("333.34")):
            part1, part2 = split_shared_expense(expense, monthly, Decimal("0.6"))
            assert part1 + part2 == monthly

    def test_custom_without_percentage_defaults_to_half(self):
        expense = make_expense(split_method=SplitMethod.CUSTOM)

        assert split_shared_expense(expense, Decimal("1000"), Decimal("0.9")) == (
            Decimal("500"),
            Decimal("500"),
        )


class TestReimbursements:
    """Tests for one-sided reimbursement expenses."""

    def test_open_reimbursement_charges_counterpart(self):
        expense = make_expense(type=ExpenseType.REIMBURSEMENT, total_value=Decimal("200"))

        summary = calculate_summary([expense], [], couple(), MONTH)

        assert summary.person1_responsibility == 0
        assert summary.person2_responsibility == Decimal("200")
        assert summary.total_reimbursement == Decimal("200")
        assert summary.who_transfers is SettlementParty.PERSON2
        assert summary.transfer_amount == Decimal("200")

    def test_reimbursement_excluded_from_categories(self):
        expense = make_expense(type=ExpenseType.REIMBURSEMENT, total_value=Decimal("200"))

        summary = calculate_summary([expense], [], couple(), MONTH)

        assert summary.category_totals == {}

    def test_settled_reimbursement_is_skipped(self):
        expense = make_expense(
            type=ExpenseType.REIMBURSEMENT_FIXED,
            total_value=Decimal("200"),
            reimbursement_status=ReimbursementStatus.SETTLED,
        )

        summary = calculate_summary([expense], [], couple(), MONTH)

        assert summary.total_reimbursement == 0
        assert summary.person1_paid == 0
        assert summary.person2_responsibility == 0
        assert summary.who_transfers is SettlementParty.NONE


class TestPersonalExpenses:
    def test_personal_stays_out_of_settlement(self):
        expense = make_expense(type=ExpenseType.PERSONAL_P1, total_value=Decimal("300"))

        summary = calculate_summary([expense], [], couple(), MONTH)

        assert summary.person1_personal_total == Decimal("300")
        assert summary.person1_paid == 0
        assert summary.person1_responsibility == 0
        assert summary.who_transfers is SettlementParty.NONE
        assert summary.person1_remaining == Decimal("4700")

    def test_personal_without_payer_is_not_flagged(self):
        expense = make_expense(type=ExpenseType.PERSONAL_P2, paid_by=None)

        summary = calculate_summary([expense], [], couple(), MONTH)

        assert summary.unspecified_paid_by_count == 0
        assert summary.person2_personal_total == Decimal("1000")


class TestTotals:
    """Tests for type and category totals."""

    def test_type_buckets(self):
        expenses = [
            make_expense(type=ExpenseType.FIXED, total_value=Decimal("2000"), date=dt.date(2023, 6, 1)),
            make_expense(type=ExpenseType.COMMON, total_value=Decimal("600"), installments=3),
            make_expense(type=ExpenseType.EQUAL, total_value=Decimal("80")),
        ]

        summary = calculate_summary(expenses, [], couple(), MONTH)

        assert summary.total_fixed == Decimal("2000")
        assert summary.total_common == Decimal("200")
        assert summary.total_equal == Decimal("80")

    def test_missing_category_uses_default(self):
        summary = calculate_summary([make_expense(category="")], [], couple(), MONTH)

        assert summary.category_totals == {"Outros": Decimal("1000")}

    def test_expenses_outside_month_ignored(self):
        expense = make_expense(date=dt.date(2023, 12, 31))

        summary = calculate_summary([expense], [], couple(), MONTH)

        assert summary.total_common == 0
        assert summary.person1_paid == 0

    def test_unspecified_payer_is_counted(self):
        expense = make_expense(paid_by=None)

        summary = calculate_summary([expense], [], couple(), MONTH)

        assert summary.unspecified_paid_by_count == 1
        assert summary.person1_paid == 0
        assert summary.person2_paid == 0

    def test_invalid_month_key_raises(self):
        with pytest.raises(InvalidMonthKeyError):
            calculate_summary([], [], couple(), "2024-1x")

    @pytest.mark.parametrize("key", ["2024-1", " 2024-01 "])
    def test_unpadded_month_key_raises(self, key):
        """A loose key must not silently drop the month's incomes and deposits."""
        goal = SavingsGoal(title="Reserva", target_value=Decimal("1000"))
        incomes = [Income(value=Decimal("800"), date=DAY, category="Bônus", paid_by=Person.PERSON1)]
        transactions = [deposit(goal.id, "100", Person.PERSON1)]

        with pytest.raises(InvalidMonthKeyError):
            calculate_summary([make_expense()], incomes, couple(), key, [goal], transactions)


class TestIncome:
    """Tests for income reconciliation inside the summary."""

    def test_real_salary_replaces_recurring_entry(self):
        info = CoupleInfo(
            person1_recurring_incomes=(RecurringIncome(description="Salário Base", value=Decimal("5000")),),
            person2_recurring_incomes=(RecurringIncome(description="Salário", value=Decimal("5000")),),
        )
        incomes = [
            Income(
                description="  salário base ",
                value=Decimal("5200"),
                date=DAY,
                category="Salário",
                paid_by=Person.PERSON1,
            ),
            Income(
                description="Bônus",
                value=Decimal("300"),
                date=DAY,
                category="Bônus",
                paid_by=Person.PERSON1,
            ),
        ]

        summary = calculate_summary([], incomes, info, MONTH)

        assert summary.person1_total_income == Decimal("5500")
        assert summary.p1_income_breakdown.salary_real == Decimal("5200")
        assert summary.p1_income_breakdown.salary_recurring == 0
        assert summary.p1_income_breakdown.other == Decimal("300")
        # Bonus is not part of the split ratio
        assert summary.salary_ratio1 == Decimal("5200") / Decimal("10200")

    def test_income_from_other_months_ignored(self):
        incomes = [Income(value=Decimal("999"), date=dt.date(2024, 2, 1), category="Bônus", paid_by=Person.PERSON2)]

        summary = calculate_summary([], incomes, couple(), MONTH)

        assert summary.person2_total_income == Decimal("5000")


class TestGoals:
    """Tests for the goal side of the summary."""

    def test_planned_contributions_reduce_remaining(self):
        goal = SavingsGoal(
            id="trip",
            target_value=Decimal("10000"),
            monthly_contribution_p1=Decimal("500"),
            monthly_contribution_p2=Decimal("300"),
        )
        transactions = [
            deposit("trip", "1000", Person.PERSON1),
            deposit("trip", "100", Person.PERSON1),
            deposit("trip", "200", Person.PERSON2),
        ]

        summary = calculate_summary([], [], couple(), MONTH, [goal], transactions)

        assert summary.total_goal_savings == Decimal("1300")
        assert summary.person1_goal_contribution == Decimal("500")
        assert summary.person2_goal_contribution == Decimal("300")
        assert summary.person1_remaining == Decimal("4500")
        assert summary.person2_remaining == Decimal("4700")
        assert summary.person1_goals_realized == Decimal("1100")
        assert summary.person2_goals_realized == Decimal("200")

    def test_completed_goals_stop_accruing(self):
        flagged = SavingsGoal(id="a", target_value=Decimal("100"), monthly_contribution_p1=Decimal("50"), is_completed=True)
        reached = SavingsGoal(id="b", target_value=Decimal("100"), monthly_contribution_p1=Decimal("70"))
        open_goal = SavingsGoal(id="c", target_value=Decimal("100"), monthly_contribution_p1=Decimal("10"))
        transactions = [deposit("b", "100", Person.PERSON1, dt.date(2023, 5, 1))]

        summary = calculate_summary([], [], couple(), MONTH, [flagged, reached, open_goal], transactions)

        assert summary.person1_goal_contribution == Decimal("10")
        assert summary.person1_goals_realized == 0

    def test_withdrawals_reduce_savings(self):
        goal = SavingsGoal(id="g", target_value=Decimal("1000"))
        transactions = [
            deposit("g", "400", Person.PERSON1),
            GoalTransaction(goal_id="g", type=GoalTransactionType.WITHDRAW, value=Decimal("150"), person=Person.PERSON2, date=DAY),
        ]

        summary = calculate_summary([], [], couple(), MONTH, [goal], transactions)

        assert summary.total_goal_savings == Decimal("250")

    def test_orphan_transaction_ignored_by_default(self):
        transactions = [deposit("missing", "100", Person.PERSON1)]

        summary = calculate_summary([], [], couple(), MONTH, [], transactions)

        assert summary.total_goal_savings == 0

    def test_orphan_transaction_raises_in_strict_mode(self):
        transactions = [deposit("missing", "100", Person.PERSON1)]

        with pytest.raises(OrphanGoalTransactionError) as exc_info:
            calculate_summary([], [], couple(), MONTH, [], transactions, strict=True)

        assert exc_info.value.goal_id == "missing"

    def test_strict_mode_from_settings(self):
        transactions = [deposit("missing", "100", Person.PERSON1)]
        settings = LedgerSettings(strict_goal_references=True)

        with pytest.raises(OrphanGoalTransactionError):
            calculate_summary([], [], couple(), MONTH, None, transactions, settings=settings)
