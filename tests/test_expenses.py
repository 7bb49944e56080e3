"""Tests for expense month scoping."""

import datetime as dt
from decimal import Decimal

import pytest

from household_ledger.ledger import (
    InvalidMonthKeyError,
    expenses_for_month,
    get_installment_info,
    get_monthly_expense_value,
    is_expense_in_month,
    month_key_for,
    months_between,
    parse_month_key,
)
from household_ledger.models import Expense, ExpenseMetadata, ExpenseType, Person


def make_expense(**overrides) -> Expense:
    data = {
        "description": "Mercado",
        "type": ExpenseType.COMMON,
        "total_value": Decimal("100"),
        "date": dt.date(2024, 1, 15),
        "paid_by": Person.PERSON1,
    }
    data.update(overrides)
    return Expense(**data)


class TestMonthKeys:
    """Tests for month key parsing."""

    def test_parse_valid_key(self):
        assert parse_month_key("2024-03") == (2024, 3)

    @pytest.mark.parametrize(
        "key",
        ["", "2024", "2024-13", "2024-00", "march", "2024/03", "2024-1", " 2024-01 ", "24-01", "2024-01\n"],
    )
    def test_parse_invalid_key_raises(self, key):
        with pytest.raises(InvalidMonthKeyError):
            parse_month_key(key)

    def test_invalid_key_is_a_value_error(self):
        with pytest.raises(ValueError):
            parse_month_key("not-a-month")

    def test_month_key_for_pads(self):
        assert month_key_for(dt.date(2024, 2, 29)) == "2024-02"

    def test_months_between_crosses_years(self):
        assert months_between(dt.date(2023, 11, 30), "2024-02") == 3
        assert months_between(dt.date(2024, 2, 1), "2023-12") == -2


class TestIsExpenseInMonth:
    """Tests for month membership."""

    def test_fixed_applies_from_start_month_onwards(self):
        expense = make_expense(type=ExpenseType.FIXED, installments=3)
        assert not is_expense_in_month(expense, "2023-12")
        assert is_expense_in_month(expense, "2024-01")
        assert is_expense_in_month(expense, "2030-06")

    def test_reimbursement_fixed_is_fixed(self):
        expense = make_expense(type=ExpenseType.REIMBURSEMENT_FIXED)
        assert is_expense_in_month(expense, "2025-01")

    def test_installments_cover_n_months(self):
        expense = make_expense(installments=3)
        assert not is_expense_in_month(expense, "2023-12")
        assert is_expense_in_month(expense, "2024-01")
        assert is_expense_in_month(expense, "2024-03")
        assert not is_expense_in_month(expense, "2024-04")

    def test_single_payment_only_in_its_month(self):
        expense = make_expense()
        assert is_expense_in_month(expense, "2024-01")
        assert not is_expense_in_month(expense, "2024-02")


class TestMonthlyValue:
    """Tests for the amount of an expense that falls in a month."""

    def test_last_installment_absorbs_remainder(self):
        expense = make_expense(total_value=Decimal("100"), installments=3)
        values = [get_monthly_expense_value(expense, m) for m in ("2024-01", "2024-02", "2024-03")]
        assert values == [Decimal("33.33"), Decimal("33.33"), Decimal("33.34")]

    @pytest.mark.parametrize(
        "total, installments",
        [("100", 3), ("0.05", 7), ("1999.99", 12), ("10", 6), ("123456.78", 48)],
    )
    def test_installments_sum_to_total(self, total, installments):
        """The installments of one expense always add up to its total."""
        expense = make_expense(total_value=Decimal(total), installments=installments)
        start = expense.date
        months = []
        for offset in range(installments):
            index = start.year * 12 + start.month - 1 + offset
            months.append(f"{index // 12:04d}-{index % 12 + 1:02d}")

        assert sum(get_monthly_expense_value(expense, m) for m in months) == Decimal(total)

    def test_single_installment_is_total(self):
        assert get_monthly_expense_value(make_expense(total_value=Decimal("42.10")), "2024-01") == Decimal("42.10")

    def test_fixed_ignores_installments(self):
        expense = make_expense(type=ExpenseType.FIXED, total_value=Decimal("1200"), installments=12)
        assert get_monthly_expense_value(expense, "2024-05") == Decimal("1200")

    def test_fixed_override_for_one_month(self):
        expense = make_expense(
            type=ExpenseType.FIXED,
            total_value=Decimal("150"),
            metadata=ExpenseMetadata(overrides={"2024-02": Decimal("180.50")}),
        )
        assert get_monthly_expense_value(expense, "2024-02") == Decimal("180.50")
        assert get_monthly_expense_value(expense, "2024-03") == Decimal("150")

    def test_zero_override_falls_back_to_total(self):
        expense = make_expense(
            type=ExpenseType.FIXED,
            total_value=Decimal("150"),
            metadata={"overrides": {"2024-02": 0}},
        )
        assert get_monthly_expense_value(expense, "2024-02") == Decimal("150")


class TestInstallmentInfo:
    """Tests for installment display info."""

    def test_none_for_fixed(self):
        assert get_installment_info(make_expense(type=ExpenseType.FIXED), "2024-01") is None

    def test_none_for_single_payment(self):
        assert get_installment_info(make_expense(), "2024-01") is None

    def test_one_indexed_position(self):
        info = get_installment_info(make_expense(installments=10), "2024-04")
        assert info.current == 4
        assert info.total == 10


class TestExpensesForMonth:
    def test_pairs_applicable_expenses_with_values(self):
        rent = make_expense(type=ExpenseType.FIXED, total_value=Decimal("2000"))
        tv = make_expense(total_value=Decimal("300"), installments=3)
        old = make_expense(date=dt.date(2023, 1, 1))

        result = expenses_for_month([rent, tv, old], "2024-02")

        assert result == [(rent, Decimal("2000")), (tv, Decimal("100.00"))]
