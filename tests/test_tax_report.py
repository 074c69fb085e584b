# tests/test_tax_report.py
from datetime import date

import pytest

from rentcore.analysis.tax_report import build_tax_report
from rentcore.domain.errors import MissingReferenceError, raise_for_warnings
from rentcore.domain.property import Lease, OneOffExpense, Property, RecurringExpense


def test_cash_flat_2024(cash_flat):
    prop, leases, recurring, one_offs = cash_flat

    report = build_tax_report(2024, [prop], leases, recurring, one_offs)

    assert report.year == 2024
    assert report.total_rental_income == pytest.approx(10_800.0)
    assert report.total_deductions == pytest.approx(250.0)
    assert report.net_taxable_income == pytest.approx(10_550.0)
    assert report.warnings == []

    (line,) = report.property_reports
    assert line.property_id == "p1"
    assert line.property == "Calle Mayor 1"
    assert line.rental_income == pytest.approx(10_800.0)
    assert line.deductions == pytest.approx(250.0)
    assert line.net_income == pytest.approx(10_550.0)


def test_cash_flat_first_partial_year(cash_flat):
    prop, leases, recurring, one_offs = cash_flat

    report = build_tax_report(2022, [prop], leases, recurring, one_offs)

    # October to December; recurring expenses apply to every year
    assert report.total_rental_income == pytest.approx(2_700.0)
    assert report.net_taxable_income == pytest.approx(2_450.0)


def _two_flats():
    props = [
        Property(id="a", purchase_price=100_000.0, address="A street"),
        Property(id="b", purchase_price=150_000.0),
    ]
    leases = [
        Lease(property_id="a", start_date=date(2024, 1, 1), monthly_rent=700.0),
        Lease(property_id="b", start_date=date(2024, 7, 1), monthly_rent=1_000.0),
    ]
    recurring = [
        RecurringExpense(property_id="a", type="community", amount=60.0, periodicity="monthly"),
        RecurringExpense(property_id="b", type="insurance", amount=300.0, periodicity="yearly"),
        RecurringExpense(
            property_id="b", type="garbage", amount=50.0, periodicity="quarterly", is_deductible=False
        ),
    ]
    one_offs = [
        OneOffExpense(property_id="b", date=date(2024, 9, 3), amount=1_200.0, category="repair"),
        OneOffExpense(
            property_id="b", date=date(2024, 9, 4), amount=800.0, category="furniture", is_deductible=False
        ),
        OneOffExpense(property_id="a", date=date(2023, 2, 1), amount=5_000.0, category="renovation"),
    ]
    return props, leases, recurring, one_offs


def test_per_property_lines_and_plain_sum_totals():
    report = build_tax_report(2024, *_two_flats())

    lines = {line.property_id: line for line in report.property_reports}
    assert lines["a"].rental_income == pytest.approx(8_400.0)
    assert lines["a"].deductions == pytest.approx(720.0)
    assert lines["b"].rental_income == pytest.approx(6_000.0)
    # non-deductible garbage fee and furniture stay out
    assert lines["b"].deductions == pytest.approx(1_500.0)
    assert lines["b"].property == "b"

    assert report.total_rental_income == pytest.approx(14_400.0)
    assert report.total_deductions == pytest.approx(2_220.0)
    assert report.net_taxable_income == pytest.approx(sum(l.net_income for l in lines.values()))


def test_property_filter():
    props, leases, recurring, one_offs = _two_flats()

    report = build_tax_report(2024, props, leases, recurring, one_offs, property_ids=["b"])

    assert [line.property_id for line in report.property_reports] == ["b"]
    assert report.total_rental_income == pytest.approx(6_000.0)
    assert report.warnings == []


def test_unknown_filter_id_is_reported():
    props, leases, recurring, one_offs = _two_flats()

    report = build_tax_report(2024, props, leases, recurring, one_offs, property_ids=["a", "zzz"])

    assert [line.property_id for line in report.property_reports] == ["a"]
    assert [w.code for w in report.warnings] == ["UNKNOWN_PROPERTY_FILTER"]


def test_orphan_records_are_skipped_with_warnings():
    props, leases, recurring, one_offs = _two_flats()
    leases.append(Lease(property_id="ghost", start_date=date(2020, 1, 1), monthly_rent=5_000.0))
    one_offs.append(OneOffExpense(property_id="ghost", date=date(2024, 3, 3), amount=10.0))

    report = build_tax_report(2024, props, leases, recurring, one_offs)

    assert report.total_rental_income == pytest.approx(14_400.0)
    assert len(report.warnings) == 2
    assert {w.context["kind"] for w in report.warnings} == {"lease", "one_off_expense"}
    assert all(w.code == "MISSING_PROPERTY" for w in report.warnings)

    with pytest.raises(MissingReferenceError):
        raise_for_warnings(report.warnings)


def test_empty_report():
    report = build_tax_report(2024, [])

    assert report.property_reports == []
    assert report.net_taxable_income == 0.0
    assert report.to_frame().empty


def test_to_frame(cash_flat):
    prop, leases, recurring, one_offs = cash_flat
    df = build_tax_report(2024, [prop], leases, recurring, one_offs).to_frame()

    assert list(df.columns) == ["property_id", "property", "rental_income", "deductions", "net_income"]
    assert df.loc[0, "net_income"] == pytest.approx(10_550.0)


def test_repeated_property_is_counted_once(cash_flat):
    prop, leases, recurring, one_offs = cash_flat

    report = build_tax_report(2024, [prop, prop.model_copy()], leases, recurring, one_offs)

    assert len(report.property_reports) == 1
    assert report.total_rental_income == pytest.approx(10_800.0)
    assert report.net_taxable_income == pytest.approx(10_550.0)
    assert [w.code for w in report.warnings] == ["DUPLICATE_PROPERTY"]
    assert report.warnings[0].context == {"property_id": "p1"}


def test_tax_income_ignores_vacancy(cash_flat):
    prop, _, recurring, one_offs = cash_flat
    leases = [
        Lease(property_id="p1", start_date=date(2022, 10, 1), monthly_rent=900.0, vacancy_pct=0.25),
    ]

    report = build_tax_report(2024, [prop], leases, recurring, one_offs)

    assert report.total_rental_income == pytest.approx(10_800.0)
