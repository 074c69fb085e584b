from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from rentcore.domain.errors import InvalidInputError, require_year
from rentcore.domain.property import OneOffExpense, Periodicity, RecurringExpense

PERIODS_PER_YEAR: dict[str, int] = {
    "monthly": 12,
    "quarterly": 4,
    "biannual": 2,
    "yearly": 1,
}


def annualize(amount: float, periodicity: Periodicity) -> float:
    try:
        return amount * PERIODS_PER_YEAR[periodicity]
    except KeyError:
        raise InvalidInputError(f"unknown periodicity: {periodicity!r}") from None


@dataclass
class CategoryTotals:
    deductible: float = 0.0
    non_deductible: float = 0.0

    @property
    def total(self) -> float:
        return self.deductible + self.non_deductible


@dataclass
class ExpenseSummary:
    """Deductible/non-deductible split for one property or the aggregate."""

    one_off_deductible: float = 0.0
    one_off_non_deductible: float = 0.0
    recurring_deductible_annual: float = 0.0
    recurring_non_deductible_annual: float = 0.0
    by_category: dict[str, CategoryTotals] = field(default_factory=dict)

    @property
    def deductible_total(self) -> float:
        return self.one_off_deductible + self.recurring_deductible_annual

    @property
    def non_deductible_total(self) -> float:
        return self.one_off_non_deductible + self.recurring_non_deductible_annual

    @property
    def total(self) -> float:
        return self.deductible_total + self.non_deductible_total

    def add_one_off(self, expense: OneOffExpense) -> None:
        bucket = self.by_category.setdefault(expense.category, CategoryTotals())
        if expense.is_deductible:
            self.one_off_deductible += expense.amount
            bucket.deductible += expense.amount
        else:
            self.one_off_non_deductible += expense.amount
            bucket.non_deductible += expense.amount

    def add_recurring(self, expense: RecurringExpense) -> None:
        annual = annualize(expense.amount, expense.periodicity)
        if expense.is_deductible:
            self.recurring_deductible_annual += annual
        else:
            self.recurring_non_deductible_annual += annual


@dataclass
class ExpenseBreakdown:
    year: int
    by_property: dict[str, ExpenseSummary] = field(default_factory=dict)
    aggregate: ExpenseSummary = field(default_factory=ExpenseSummary)

    def for_property(self, property_id: str) -> ExpenseSummary:
        return self.by_property.get(property_id, ExpenseSummary())


def normalize_expenses(
    recurring: Iterable[RecurringExpense],
    one_offs: Iterable[OneOffExpense],
    year: int,
    property_ids: Iterable[str] | None = None,
) -> ExpenseBreakdown:
    """
    Year view of a property's costs.

    One-off expenses count only when dated in ``year``. Recurring expenses
    are treated as applying uniformly every year, so they are annualized
    whatever year is asked for.
    """
    require_year(year)
    selected = set(property_ids) if property_ids is not None else None
    result = ExpenseBreakdown(year=year)
    if selected is not None:
        for pid in selected:
            result.by_property[pid] = ExpenseSummary()

    def _keep(pid: str) -> bool:
        return selected is None or pid in selected

    for expense in one_offs:
        if expense.date.year != year or not _keep(expense.property_id):
            continue
        result.by_property.setdefault(expense.property_id, ExpenseSummary()).add_one_off(expense)
        result.aggregate.add_one_off(expense)

    for expense in recurring:
        if not _keep(expense.property_id):
            continue
        result.by_property.setdefault(expense.property_id, ExpenseSummary()).add_recurring(expense)
        result.aggregate.add_recurring(expense)

    return result
