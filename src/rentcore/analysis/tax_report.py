from __future__ import annotations

from typing import Iterable, Sequence

from rentcore.adapters.logging_utils import get_logger, log_context
from rentcore.analysis.expenses import normalize_expenses
from rentcore.analysis.income import reconstruct_income
from rentcore.analysis.references import known_records, select_properties
from rentcore.domain.errors import ReportWarning, require_year
from rentcore.domain.property import Lease, OneOffExpense, Property, RecurringExpense
from rentcore.domain.reports import PropertyTaxLine, TaxReport

logger = get_logger(__name__)


def build_tax_report(
    year: int,
    properties: Sequence[Property],
    leases: Iterable[Lease] = (),
    recurring: Iterable[RecurringExpense] = (),
    one_offs: Iterable[OneOffExpense] = (),
    property_ids: Iterable[str] | None = None,
) -> TaxReport:
    """
    Taxable rental income for fiscal ``year``.

    Per property: contracted rent for the year, minus deductible one-off
    expenses dated in the year and deductible recurring expenses
    annualized. Totals are plain sums of the per-property lines.
    """
    require_year(year)
    warnings: list[ReportWarning] = []

    all_ids = {p.id for p in properties}
    leases = known_records(leases, all_ids, "lease", warnings)
    recurring = known_records(recurring, all_ids, "recurring_expense", warnings)
    one_offs = known_records(one_offs, all_ids, "one_off_expense", warnings)

    selected = select_properties(properties, property_ids, warnings)
    selected_ids = [p.id for p in selected]

    income = reconstruct_income(leases, year, property_ids=selected_ids)
    expenses = normalize_expenses(recurring, one_offs, year, property_ids=selected_ids)

    lines: list[PropertyTaxLine] = []
    for prop in selected:
        rental_income = income.for_property(prop.id)
        deductions = expenses.for_property(prop.id).deductible_total
        lines.append(
            PropertyTaxLine(
                property_id=prop.id,
                property=prop.label,
                rental_income=rental_income,
                deductions=deductions,
                net_income=rental_income - deductions,
            )
        )

    total_income = sum((line.rental_income for line in lines), 0.0)
    total_deductions = sum((line.deductions for line in lines), 0.0)

    report = TaxReport(
        year=year,
        total_rental_income=total_income,
        total_deductions=total_deductions,
        net_taxable_income=total_income - total_deductions,
        property_reports=lines,
        warnings=warnings,
    )
    logger.info(
        "tax_report_built",
        extra=log_context(
            year=year,
            properties=len(lines),
            net_taxable_income=report.net_taxable_income,
            warnings=len(warnings),
        ),
    )
    return report
