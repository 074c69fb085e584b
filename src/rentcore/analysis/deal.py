from __future__ import annotations

from rentcore.analysis.amortization import monthly_payment
from rentcore.domain.deal import DealInputs, DealResults

# Product policy: a deal is only "profitable" above this cash-on-cash return.
PROFITABLE_COC_THRESHOLD_PCT = 6.0


def safe_ratio(numerator: float, denominator: float) -> float:
    """numerator / denominator, or 0.0 when the denominator is not positive."""
    if denominator <= 0:
        return 0.0
    return numerator / denominator


def safe_pct(numerator: float, denominator: float) -> float:
    return safe_ratio(numerator, denominator) * 100.0


def evaluate_deal(inputs: DealInputs) -> DealResults:
    """
    Profitability of a single hypothetical deal.

    Never raises for degenerate inputs: zero rent, zero price or zero
    investment normalize the affected ratios to 0 instead of NaN/inf.
    """

    # --- financing basics ---
    purchase_price = inputs.purchase_price
    down_payment = purchase_price * inputs.down_payment_pct / 100.0
    loan_amount = max(0.0, purchase_price - down_payment)
    total_investment = down_payment + inputs.closing_costs + inputs.renovation_costs

    monthly_mortgage = monthly_payment(
        loan_amount,
        inputs.interest_rate_pct,
        inputs.loan_term_years * 12,
    )

    # --- income side ---
    rent = inputs.monthly_rent

    # --- expenses (mortgage included; NOI backs it out below) ---
    monthly_property_tax = inputs.annual_property_tax / 12.0
    management_fee = rent * inputs.management_pct / 100.0
    total_monthly_expenses = (
        monthly_mortgage
        + monthly_property_tax
        + inputs.insurance
        + inputs.hoa
        + inputs.maintenance
        + management_fee
        + inputs.utilities
    )

    # --- cash flow ---
    monthly_cash_flow = rent - total_monthly_expenses
    annual_cash_flow = monthly_cash_flow * 12.0

    # --- NOI ---
    # Operating expenses exclude debt service: mortgage is financing.
    annual_debt_service = monthly_mortgage * 12.0
    annual_operating = total_monthly_expenses * 12.0 - annual_debt_service
    noi = rent * 12.0 - annual_operating

    cap_rate = safe_pct(noi, purchase_price)
    cash_on_cash = safe_pct(annual_cash_flow, total_investment)
    dscr = safe_ratio(noi, annual_debt_service)

    # share of scheduled rent needed to cover every monthly outflow
    break_even = safe_pct(total_monthly_expenses, rent)

    return DealResults(
        total_investment=total_investment,
        down_payment=down_payment,
        loan_amount=loan_amount,
        monthly_mortgage=monthly_mortgage,
        gross_monthly_income=rent,
        monthly_property_tax=monthly_property_tax,
        management_fee=management_fee,
        total_monthly_expenses=total_monthly_expenses,
        monthly_cash_flow=monthly_cash_flow,
        annual_cash_flow=annual_cash_flow,
        annual_debt_service=annual_debt_service,
        noi=noi,
        cap_rate=cap_rate,
        cash_on_cash=cash_on_cash,
        dscr=dscr,
        break_even_occupancy_pct=break_even,
        is_profitable=monthly_cash_flow > 0 and cash_on_cash > PROFITABLE_COC_THRESHOLD_PCT,
    )
