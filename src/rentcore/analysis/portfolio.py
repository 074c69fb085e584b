from __future__ import annotations

from collections import defaultdict
from typing import Iterable, Sequence

import numpy as np

from rentcore.adapters.config import config
from rentcore.adapters.logging_utils import get_logger, log_context
from rentcore.analysis.amortization import debt_service_for_year
from rentcore.analysis.deal import safe_pct, safe_ratio
from rentcore.analysis.expenses import normalize_expenses
from rentcore.analysis.income import reconstruct_income
from rentcore.analysis.references import known_records, select_properties
from rentcore.domain.errors import InvalidInputError, ReportWarning, require_year
from rentcore.domain.metrics import PortfolioMetrics, PropertyMetrics
from rentcore.domain.property import Lease, Loan, OneOffExpense, Property, RecurringExpense

logger = get_logger(__name__)

# Money columns summed across the portfolio before any ratio is taken.
_SUMMED = (
    "purchase_price",
    "total_investment",
    "current_value",
    "loan_amount",
    "equity",
    "cash_invested",
    "annual_rental_income",
    "annual_expenses",
    "noi",
    "annual_debt_service",
    "annual_cash_flow",
)


def property_metrics(
    prop: Property,
    loans: Sequence[Loan],
    annual_rental_income: float,
    annual_expenses: float,
    year: int,
) -> PropertyMetrics:
    """
    Levered annual metrics for one property.

    The loan balance is taken as fully outstanding: amortization-to-date is
    not tracked, so equity is conservative for older loans. Debt service
    only counts the loan months that fall in ``year``.
    """
    total_investment = prop.purchase_price + prop.closing_costs.total
    current_value = prop.effective_value

    loan_amount = sum((loan.principal for loan in loans), 0.0)
    fees = sum((loan.up_front_fees for loan in loans), 0.0)
    ads = sum((debt_service_for_year(loan, year) for loan in loans), 0.0)

    equity = current_value - loan_amount
    cash_invested = total_investment - loan_amount + fees

    noi = annual_rental_income - annual_expenses
    cash_flow = noi - ads

    return PropertyMetrics(
        property_id=prop.id,
        label=prop.label,
        purchase_price=prop.purchase_price,
        total_investment=total_investment,
        current_value=current_value,
        loan_amount=loan_amount,
        equity=equity,
        cash_invested=cash_invested,
        annual_rental_income=annual_rental_income,
        annual_expenses=annual_expenses,
        noi=noi,
        annual_debt_service=ads,
        annual_cash_flow=cash_flow,
        cap_rate=safe_pct(noi, prop.purchase_price),
        cash_on_cash=safe_pct(cash_flow, cash_invested),
        dscr=safe_ratio(noi, ads),
        gross_yield=safe_pct(annual_rental_income, current_value),
        net_yield=safe_pct(noi, current_value),
        ltv=safe_pct(loan_amount, current_value),
    )


def aggregate_portfolio(
    properties: Sequence[Property],
    year: int,
    loans: Iterable[Loan] = (),
    leases: Iterable[Lease] = (),
    recurring: Iterable[RecurringExpense] = (),
    one_offs: Iterable[OneOffExpense] = (),
    vacancy_rate: float | None = None,
) -> PortfolioMetrics:
    """
    Roll per-property metrics up to the portfolio.

    Rental income is the contracted income of ``year`` reduced by each
    lease's ``vacancy_pct``; leases without one use ``vacancy_rate`` (a
    fraction; defaults to ``config.VACANCY_RATE``).
    Expenses are every recurring expense annualized plus the one-offs
    dated in ``year``, deductible or not.

    Portfolio ratios are computed from the summed totals, never averaged
    from the per-property ratios.
    """
    require_year(year)
    vacancy = config.VACANCY_RATE if vacancy_rate is None else vacancy_rate
    if not 0.0 <= vacancy <= 1.0:
        raise InvalidInputError(f"vacancy_rate must be a fraction in [0, 1] (got {vacancy!r})")

    warnings: list[ReportWarning] = []
    properties = select_properties(properties, None, warnings)
    ids = {p.id for p in properties}
    loans = known_records(loans, ids, "loan", warnings)
    leases = known_records(leases, ids, "lease", warnings)
    recurring = known_records(recurring, ids, "recurring_expense", warnings)
    one_offs = known_records(one_offs, ids, "one_off_expense", warnings)

    income = reconstruct_income(leases, year, default_vacancy=vacancy)
    expenses = normalize_expenses(recurring, one_offs, year)

    loans_by_property: dict[str, list[Loan]] = defaultdict(list)
    for loan in loans:
        loans_by_property[loan.property_id].append(loan)

    per_property = [
        property_metrics(
            prop,
            loans_by_property.get(prop.id, []),
            annual_rental_income=income.for_property(prop.id),
            annual_expenses=expenses.for_property(prop.id).total,
            year=year,
        )
        for prop in properties
    ]

    totals = {
        name: float(np.sum([getattr(m, name) for m in per_property], dtype=float))
        for name in _SUMMED
    }

    result = PortfolioMetrics(
        year=year,
        properties=per_property,
        total_purchase_price=totals["purchase_price"],
        total_investment=totals["total_investment"],
        total_current_value=totals["current_value"],
        total_loan_amount=totals["loan_amount"],
        total_equity=totals["equity"],
        total_cash_invested=totals["cash_invested"],
        total_annual_income=totals["annual_rental_income"],
        total_annual_expenses=totals["annual_expenses"],
        noi=totals["noi"],
        total_debt_service=totals["annual_debt_service"],
        annual_cash_flow=totals["annual_cash_flow"],
        cap_rate=safe_pct(totals["noi"], totals["purchase_price"]),
        cash_on_cash=safe_pct(totals["annual_cash_flow"], totals["cash_invested"]),
        dscr=safe_ratio(totals["noi"], totals["annual_debt_service"]),
        gross_yield=safe_pct(totals["annual_rental_income"], totals["current_value"]),
        net_yield=safe_pct(totals["noi"], totals["current_value"]),
        ltv=safe_pct(totals["loan_amount"], totals["current_value"]),
        warnings=warnings,
    )
    logger.info(
        "portfolio_aggregated",
        extra=log_context(
            year=year,
            properties=len(per_property),
            noi=result.noi,
            cap_rate=result.cap_rate,
            warnings=len(warnings),
        ),
    )
    return result
