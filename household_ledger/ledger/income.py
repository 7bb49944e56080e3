"""
Income reconciliation.

Recurring incomes configured on the couple are "virtual": they count in
every month unless a real salary income with the same description exists
for that person in that month. The real entry replaces the virtual one,
it does not add to it.
"""

from decimal import Decimal
from typing import Iterable, Optional

from household_ledger.config import LedgerSettings
from household_ledger.ledger.expenses import month_key_for, parse_month_key
from household_ledger.models.household import CoupleInfo, Income, Person, RecurringIncome
from household_ledger.models.summary import EffectiveIncome, IncomeBreakdown, IncomeResolution
from household_ledger.money import money_sum, round2


def normalize_description(text: str) -> str:
    return (text or "").strip().lower()


def incomes_in_month(incomes: Iterable[Income], month_key: str) -> list[Income]:
    parse_month_key(month_key)
    return [income for income in incomes if month_key_for(income.date) == month_key]


def recurring_entries(
    couple_info: CoupleInfo,
    person: Person,
    settings: LedgerSettings,
) -> list[RecurringIncome]:
    """
    Configured recurring incomes for a person.

    Falls back to a single entry built from the legacy scalar salary when
    no recurring list is configured.
    """
    configured = list(couple_info.recurring_incomes(person))
    if configured:
        return configured

    salary, description = couple_info.legacy_salary(person)
    if salary > 0:
        return [RecurringIncome(
            id=f"legacy-{'p1' if person is Person.PERSON1 else 'p2'}",
            description=description or settings.legacy_salary_description,
            value=salary,
        )]
    return []


def resolve_effective_incomes(
    couple_info: CoupleInfo,
    incomes: Iterable[Income],
    person: Person,
    month_key: str,
    settings: Optional[LedgerSettings] = None,
) -> IncomeResolution:
    """
    Effective income list of one person for one month.

    Real salaries come first, then surviving recurring entries, then
    other incomes, each group in input order.
    """
    settings = settings or LedgerSettings()
    own = [i for i in incomes_in_month(incomes, month_key) if i.paid_by is person]

    real_salaries = [i for i in own if i.category == settings.salary_category]
    others = [i for i in own if i.category != settings.salary_category]

    real_descriptions = {normalize_description(i.description) for i in real_salaries}
    active: list[RecurringIncome] = []
    suppressed: list[str] = []
    for entry in recurring_entries(couple_info, person, settings):
        if normalize_description(entry.description) in real_descriptions:
            suppressed.append(entry.id)
        else:
            active.append(entry)

    real_total = money_sum(i.value for i in real_salaries)
    virtual_total = money_sum(r.value for r in active)
    other_total = money_sum(i.value for i in others)
    salary_total = round2(real_total + virtual_total)

    entries = (
        [
            EffectiveIncome(
                description=i.description,
                value=i.value,
                category=i.category,
                is_virtual=False,
                source_id=i.id,
            )
            for i in real_salaries
        ]
        + [
            EffectiveIncome(
                description=r.description,
                value=r.value,
                category=settings.salary_category,
                is_virtual=True,
                source_id=r.id,
            )
            for r in active
        ]
        + [
            EffectiveIncome(
                description=i.description,
                value=i.value,
                category=i.category,
                is_virtual=False,
                source_id=i.id,
            )
            for i in others
        ]
    )

    return IncomeResolution(
        entries=tuple(entries),
        suppressed=tuple(suppressed),
        breakdown=IncomeBreakdown(
            salary_real=real_total,
            salary_recurring=virtual_total,
            other=other_total,
        ),
        salary_total=salary_total,
        total_income=round2(salary_total + other_total),
    )


def salary_ratio(salary1: Decimal, salary2: Decimal) -> Decimal:
    """Person 1's share of the combined salary; 0.5 when there is none."""
    combined = round2(salary1 + salary2)
    if combined <= 0:
        return Decimal("0.5")
    return salary1 / combined
