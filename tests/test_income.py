"""Tests for income reconciliation."""

import datetime as dt
from decimal import Decimal

from household_ledger.config import LedgerSettings
from household_ledger.ledger import resolve_effective_incomes, salary_ratio
from household_ledger.models import CoupleInfo, Income, Person, RecurringIncome

MONTH = "2024-03"


def salary(description: str, value: str, person: Person = Person.PERSON1, category: str = "Salário") -> Income:
    return Income(
        description=description,
        value=Decimal(value),
        date=dt.date(2024, 3, 5),
        category=category,
        paid_by=person,
    )


class TestLegacySalary:
    """Couples configured with scalar salaries only."""

    def test_legacy_salary_becomes_virtual_entry(self):
        info = CoupleInfo(salary1=Decimal("4000"))

        resolution = resolve_effective_incomes(info, [], Person.PERSON1, MONTH)

        assert resolution.salary_total == Decimal("4000")
        assert len(resolution.entries) == 1
        entry = resolution.entries[0]
        assert entry.is_virtual
        assert entry.description == "Salário Base"
        assert entry.source_id == "legacy-p1"

    def test_legacy_description_is_used(self):
        info = CoupleInfo(salary2=Decimal("3000"), salary2_description="Pró-labore")

        resolution = resolve_effective_incomes(info, [], Person.PERSON2, MONTH)

        assert resolution.entries[0].description == "Pró-labore"

    def test_zero_legacy_salary_adds_nothing(self):
        resolution = resolve_effective_incomes(CoupleInfo(), [], Person.PERSON1, MONTH)

        assert resolution.entries == ()
        assert resolution.total_income == 0

    def test_recurring_list_takes_precedence(self):
        info = CoupleInfo(
            salary1=Decimal("9999"),
            person1_recurring_incomes=(RecurringIncome(description="CLT", value=Decimal("3000")),),
        )

        resolution = resolve_effective_incomes(info, [], Person.PERSON1, MONTH)

        assert resolution.salary_total == Decimal("3000")


class TestSuppression:
    """Real salaries replace matching recurring entries."""

    def test_matching_description_is_suppressed(self):
        recurring = RecurringIncome(id="r1", description="CLT", value=Decimal("3000"))
        info = CoupleInfo(person1_recurring_incomes=(recurring,))

        resolution = resolve_effective_incomes(info, [salary(" clt ", "3100")], Person.PERSON1, MONTH)

        assert resolution.suppressed == ("r1",)
        assert resolution.salary_total == Decimal("3100")
        assert resolution.breakdown.salary_recurring == 0

    def test_non_matching_salary_adds_up(self):
        info = CoupleInfo(person1_recurring_incomes=(RecurringIncome(description="CLT", value=Decimal("3000")),))

        resolution = resolve_effective_incomes(info, [salary("Freela", "500")], Person.PERSON1, MONTH)

        assert resolution.salary_total == Decimal("3500")
        assert resolution.suppressed == ()

    def test_non_salary_category_never_suppresses(self):
        info = CoupleInfo(person1_recurring_incomes=(RecurringIncome(description="CLT", value=Decimal("3000")),))
        bonus = salary("CLT", "800", category="Bônus")

        resolution = resolve_effective_incomes(info, [bonus], Person.PERSON1, MONTH)

        assert resolution.salary_total == Decimal("3000")
        assert resolution.breakdown.other == Decimal("800")
        assert resolution.total_income == Decimal("3800")

    def test_other_persons_salary_does_not_suppress(self):
        info = CoupleInfo(person1_recurring_incomes=(RecurringIncome(description="CLT", value=Decimal("3000")),))

        resolution = resolve_effective_incomes(
            info, [salary("CLT", "3100", person=Person.PERSON2)], Person.PERSON1, MONTH
        )

        assert resolution.salary_total == Decimal("3000")

    def test_entry_order(self):
        """Real salaries, then recurring entries, then other incomes."""
        info = CoupleInfo(person1_recurring_incomes=(RecurringIncome(description="Aluguel", value=Decimal("900")),))
        incomes = [salary("Bônus", "100", category="Bônus"), salary("CLT", "3000")]

        resolution = resolve_effective_incomes(info, incomes, Person.PERSON1, MONTH)

        assert [e.description for e in resolution.entries] == ["CLT", "Aluguel", "Bônus"]

    def test_salary_category_from_settings(self):
        settings = LedgerSettings(salary_category="Salary")
        info = CoupleInfo(person1_recurring_incomes=(RecurringIncome(description="Job", value=Decimal("2000")),))

        resolution = resolve_effective_incomes(
            info, [salary("Job", "2100", category="Salary")], Person.PERSON1, MONTH, settings
        )

        assert resolution.salary_total == Decimal("2100")


class TestSalaryRatio:
    def test_ratio_of_combined_salary(self):
        assert salary_ratio(Decimal("7000"), Decimal("3000")) == Decimal("0.7")

    def test_no_salary_defaults_to_half(self):
        assert salary_ratio(Decimal("0"), Decimal("0")) == Decimal("0.5")

    def test_single_earner(self):
        assert salary_ratio(Decimal("0"), Decimal("2500")) == 0
