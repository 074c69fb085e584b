# tests/test_expenses.py
from datetime import date

import pytest
from hypothesis import given, strategies as st

from rentcore.analysis.expenses import annualize, normalize_expenses
from rentcore.domain.errors import InvalidInputError
from rentcore.domain.property import OneOffExpense, RecurringExpense


def _recurring(amount, periodicity, pid="p1", deductible=True, type="other"):
    return RecurringExpense(
        property_id=pid,
        type=type,
        amount=amount,
        periodicity=periodicity,
        is_deductible=deductible,
    )


def _one_off(day, amount, pid="p1", deductible=True, category="repair"):
    return OneOffExpense(
        property_id=pid,
        date=day,
        amount=amount,
        category=category,
        is_deductible=deductible,
    )


@given(year=st.integers(min_value=1900, max_value=2100))
def test_monthly_80_annualizes_to_960_in_any_year(year):
    result = normalize_expenses([_recurring(80.0, "monthly", type="community")], [], year)

    assert result.aggregate.recurring_deductible_annual == 960.0
    assert result.for_property("p1").recurring_deductible_annual == 960.0


@pytest.mark.parametrize(
    "periodicity, expected",
    [("monthly", 1200.0), ("quarterly", 400.0), ("biannual", 200.0), ("yearly", 100.0)],
)
def test_annualize(periodicity, expected):
    assert annualize(100.0, periodicity) == expected


def test_annualize_rejects_unknown_periodicity():
    with pytest.raises(InvalidInputError):
        annualize(100.0, "weekly")


def test_recurring_model_rejects_unknown_periodicity():
    with pytest.raises(ValueError):
        _recurring(100.0, "weekly")


def test_split_by_deductibility():
    recurring = [
        _recurring(50.0, "monthly"),
        _recurring(300.0, "biannual", deductible=False),
    ]
    one_offs = [
        _one_off(date(2024, 2, 10), 1_000.0),
        _one_off(date(2024, 8, 1), 400.0, deductible=False, category="furniture"),
        _one_off(date(2023, 12, 31), 9_999.0),
    ]
    summary = normalize_expenses(recurring, one_offs, 2024).for_property("p1")

    assert summary.one_off_deductible == 1_000.0
    assert summary.one_off_non_deductible == 400.0
    assert summary.recurring_deductible_annual == 600.0
    assert summary.recurring_non_deductible_annual == 600.0
    assert summary.deductible_total == 1_600.0
    assert summary.non_deductible_total == 1_000.0
    assert summary.total == 2_600.0


def test_one_offs_only_count_in_their_year():
    one_offs = [_one_off(date(2023, 6, 1), 500.0), _one_off(date(2024, 1, 1), 200.0)]

    assert normalize_expenses([], one_offs, 2023).aggregate.one_off_deductible == 500.0
    assert normalize_expenses([], one_offs, 2024).aggregate.one_off_deductible == 200.0
    assert normalize_expenses([], one_offs, 2025).aggregate.total == 0.0


def test_by_category_totals():
    one_offs = [
        _one_off(date(2024, 1, 5), 100.0, category="repair"),
        _one_off(date(2024, 3, 5), 50.0, category="repair", deductible=False),
        _one_off(date(2024, 4, 5), 700.0, category="legal"),
    ]
    cats = normalize_expenses([], one_offs, 2024).aggregate.by_category

    assert cats["repair"].deductible == 100.0
    assert cats["repair"].non_deductible == 50.0
    assert cats["repair"].total == 150.0
    assert cats["legal"].total == 700.0


def test_property_filter_and_aggregate():
    recurring = [_recurring(10.0, "monthly", pid="a"), _recurring(20.0, "monthly", pid="b")]
    one_offs = [_one_off(date(2024, 5, 5), 100.0, pid="b")]

    everything = normalize_expenses(recurring, one_offs, 2024)
    assert everything.aggregate.total == pytest.approx(120.0 + 240.0 + 100.0)
    assert set(everything.by_property) == {"a", "b"}

    only_a = normalize_expenses(recurring, one_offs, 2024, property_ids=["a", "z"])
    assert set(only_a.by_property) == {"a", "z"}
    assert only_a.aggregate.total == pytest.approx(120.0)
    assert only_a.for_property("z").total == 0.0


def test_negative_amount_is_rejected():
    with pytest.raises(ValueError):
        _one_off(date(2024, 1, 1), -5.0)
