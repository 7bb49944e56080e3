"""
Monthly household settlement.

calculate_summary aggregates one month of incomes, expenses and goal
contributions into a MonthlySummary: who paid what, who is responsible
for what, and the single transfer that settles the month.

Split policy for shared expenses (FIXED, COMMON, EQUAL):
1. Custom splits first carve out the fixed per-person amounts
   (specific_value_p1/p2), scaled to this month's slice of the expense.
2. The remainder is split by split_percentage1 (custom), 50/50 (EQUAL),
   or the salary ratio (everything else).
3. Person 2 always gets remainder - share1, so the parts add up to the
   monthly value exactly.

Reimbursements charge the payer's counterpart in full until settled.
Personal expenses never enter the settlement.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Optional

import structlog

from household_ledger.config import LedgerSettings
from household_ledger.ledger.errors import OrphanGoalTransactionError
from household_ledger.ledger.expenses import expenses_for_month, month_key_for, parse_month_key
from household_ledger.ledger.goals import calculate_goal_stats
from household_ledger.ledger.income import resolve_effective_incomes, salary_ratio
from household_ledger.ledger.settlement import settle_two_party
from household_ledger.models.goals import GoalTransaction, GoalTransactionType, SavingsGoal
from household_ledger.models.household import CoupleInfo, Expense, ExpenseType, Income, Person
from household_ledger.models.summary import MonthlySummary
from household_ledger.money import ZERO, money_sum, round2

logger = structlog.get_logger(__name__)

HALF = Decimal("0.5")


def _per_person() -> dict[Person, Decimal]:
    return {Person.PERSON1: ZERO, Person.PERSON2: ZERO}


@dataclass
class _Accumulator:
    """Running totals while walking the month's expenses."""
    total_fixed: Decimal = ZERO
    total_common: Decimal = ZERO
    total_equal: Decimal = ZERO
    total_reimbursement: Decimal = ZERO
    responsibility: dict[Person, Decimal] = field(default_factory=_per_person)
    paid: dict[Person, Decimal] = field(default_factory=_per_person)
    personal: dict[Person, Decimal] = field(default_factory=_per_person)
    category_totals: dict[str, Decimal] = field(default_factory=dict)
    unspecified_paid_by_count: int = 0

    def charge(self, person: Person, amount: Decimal) -> None:
        self.responsibility[person] = round2(self.responsibility[person] + amount)


def split_shared_expense(
    expense: Expense,
    monthly_value: Decimal,
    salary_ratio1: Decimal,
) -> tuple[Decimal, Decimal]:
    """
    Person 1 and person 2 responsibility for one month of a shared expense.

    The two parts always sum to monthly_value.
    """
    if expense.is_custom_split and expense.total_value > 0:
        spec1 = round2(monthly_value * (expense.specific_value_p1 / expense.total_value))
        spec2 = round2(monthly_value * (expense.specific_value_p2 / expense.total_value))
    else:
        spec1 = spec2 = ZERO

    shared = round2(monthly_value - spec1 - spec2)

    if expense.is_custom_split:
        percentage = expense.split_percentage1
        ratio1 = (percentage if percentage is not None else Decimal("50")) / 100
    elif expense.type is ExpenseType.EQUAL:
        ratio1 = HALF
    else:
        ratio1 = salary_ratio1

    share1 = round2(shared * ratio1)
    share2 = round2(shared - share1)

    return round2(spec1 + share1), round2(spec2 + share2)


def _accumulate(
    acc: _Accumulator,
    expense: Expense,
    monthly_value: Decimal,
    salary_ratio1: Decimal,
    settings: LedgerSettings,
) -> None:
    kind = expense.type

    # Settled reimbursements are out of the month entirely, payment included
    if kind.is_reimbursement and expense.is_settled:
        return

    if not kind.is_reimbursement:
        category = expense.category or settings.default_category
        acc.category_totals[category] = round2(acc.category_totals.get(category, ZERO) + monthly_value)

    if kind is ExpenseType.FIXED:
        acc.total_fixed = round2(acc.total_fixed + monthly_value)
    elif kind is ExpenseType.COMMON:
        acc.total_common = round2(acc.total_common + monthly_value)
    elif kind is ExpenseType.EQUAL:
        acc.total_equal = round2(acc.total_equal + monthly_value)

    if kind.is_shared:
        part1, part2 = split_shared_expense(expense, monthly_value, salary_ratio1)
        acc.charge(Person.PERSON1, part1)
        acc.charge(Person.PERSON2, part2)
    elif kind.is_reimbursement:
        acc.total_reimbursement = round2(acc.total_reimbursement + monthly_value)
        if expense.paid_by is not None:
            acc.charge(expense.paid_by.other, monthly_value)
    elif kind.is_personal:
        owner = kind.owner
        acc.personal[owner] = round2(acc.personal[owner] + monthly_value)
        return

    if expense.paid_by is None:
        acc.unspecified_paid_by_count += 1
    else:
        acc.paid[expense.paid_by] = round2(acc.paid[expense.paid_by] + monthly_value)


def _check_goal_references(
    goals: list[SavingsGoal],
    goal_transactions: list[GoalTransaction],
    strict: bool,
) -> None:
    known = {goal.id for goal in goals}
    for transaction in goal_transactions:
        if transaction.goal_id in known:
            continue
        if strict:
            raise OrphanGoalTransactionError(transaction.id, transaction.goal_id)
        logger.warning(
            "orphan_goal_transaction",
            transaction_id=transaction.id,
            goal_id=transaction.goal_id,
        )


def calculate_summary(
    expenses: Iterable[Expense],
    incomes: Iterable[Income],
    couple_info: CoupleInfo,
    month_key: str,
    goals: Optional[Iterable[SavingsGoal]] = None,
    goal_transactions: Optional[Iterable[GoalTransaction]] = None,
    *,
    strict: Optional[bool] = None,
    settings: Optional[LedgerSettings] = None,
) -> MonthlySummary:
    """
    Settle one month for the household.

    Args:
        expenses: All expenses; the ones that don't apply to the month are skipped
        incomes: All incomes; only the month's are used
        couple_info: Household configuration (salaries, recurring incomes)
        month_key: "YYYY-MM"
        goals: Savings goals (None is treated as empty)
        goal_transactions: Goal history (None is treated as empty)
        strict: Fail on transactions for unknown goals (defaults to settings)
        settings: Engine policy; defaults to LedgerSettings()

    Raises:
        InvalidMonthKeyError: If month_key is malformed
        OrphanGoalTransactionError: In strict mode only
    """
    settings = settings or LedgerSettings()
    strict = settings.strict_goal_references if strict is None else strict
    parse_month_key(month_key)

    expenses = list(expenses)
    incomes = list(incomes)
    goals = list(goals or [])
    goal_transactions = list(goal_transactions or [])

    # Income
    income1 = resolve_effective_incomes(couple_info, incomes, Person.PERSON1, month_key, settings)
    income2 = resolve_effective_incomes(couple_info, incomes, Person.PERSON2, month_key, settings)
    ratio1 = salary_ratio(income1.salary_total, income2.salary_total)

    # Expenses
    acc = _Accumulator()
    for expense, monthly_value in expenses_for_month(expenses, month_key):
        _accumulate(acc, expense, monthly_value, ratio1, settings)

    if acc.unspecified_paid_by_count:
        logger.warning(
            "unspecified_paid_by",
            month_key=month_key,
            count=acc.unspecified_paid_by_count,
        )

    settlement = settle_two_party(
        acc.responsibility[Person.PERSON1],
        acc.responsibility[Person.PERSON2],
        acc.paid[Person.PERSON1],
        acc.paid[Person.PERSON2],
        tolerance=settings.household_tolerance,
    )

    # Goals
    _check_goal_references(goals, goal_transactions, strict)
    by_goal: dict[str, list[GoalTransaction]] = {}
    for transaction in goal_transactions:
        by_goal.setdefault(transaction.goal_id, []).append(transaction)

    goal_stats = [(goal, calculate_goal_stats(goal, by_goal.get(goal.id, []))) for goal in goals]
    total_goal_savings = money_sum(stats.total_balance for _, stats in goal_stats)

    # Completed goals stop accruing planned contributions
    active_goals = [goal for goal, stats in goal_stats if not (goal.is_completed or stats.is_completed)]
    planned = {
        person: money_sum(goal.planned_contribution(person) for goal in active_goals)
        for person in Person
    }
    realized = {
        person: money_sum(
            t.value for t in goal_transactions
            if t.person is person
            and t.type is GoalTransactionType.DEPOSIT
            and month_key_for(t.date) == month_key
        )
        for person in Person
    }

    remaining = {
        person: round2(
            resolution.total_income
            - acc.responsibility[person]
            - acc.personal[person]
            - planned[person]
        )
        for person, resolution in ((Person.PERSON1, income1), (Person.PERSON2, income2))
    }

    summary = MonthlySummary(
        month_key=month_key,
        total_fixed=acc.total_fixed,
        total_common=acc.total_common,
        total_equal=acc.total_equal,
        total_reimbursement=acc.total_reimbursement,
        category_totals=acc.category_totals,
        person1_paid=acc.paid[Person.PERSON1],
        person2_paid=acc.paid[Person.PERSON2],
        person1_responsibility=acc.responsibility[Person.PERSON1],
        person2_responsibility=acc.responsibility[Person.PERSON2],
        person1_personal_total=acc.personal[Person.PERSON1],
        person2_personal_total=acc.personal[Person.PERSON2],
        person1_total_income=income1.total_income,
        person2_total_income=income2.total_income,
        p1_income_breakdown=income1.breakdown,
        p2_income_breakdown=income2.breakdown,
        salary_ratio1=ratio1,
        transfer_amount=settlement.amount,
        who_transfers=settlement.who,
        total_goal_savings=total_goal_savings,
        person1_goal_contribution=planned[Person.PERSON1],
        person2_goal_contribution=planned[Person.PERSON2],
        person1_goals_realized=realized[Person.PERSON1],
        person2_goals_realized=realized[Person.PERSON2],
        unspecified_paid_by_count=acc.unspecified_paid_by_count,
        person1_remaining=remaining[Person.PERSON1],
        person2_remaining=remaining[Person.PERSON2],
    )

    logger.debug(
        "summary_calculated",
        month_key=month_key,
        who_transfers=summary.who_transfers.value,
        transfer_amount=str(summary.transfer_amount),
    )
    return summary
