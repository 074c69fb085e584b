from __future__ import annotations

from dataclasses import asdict, dataclass, field

import pandas as pd

from rentcore.domain.errors import ReportWarning


@dataclass(frozen=True)
class PropertyMetrics:
    """
    Annual profitability of one held property for a given year.

    Money fields are annual currency amounts; ratios are percentages.
    """
    property_id: str
    label: str
    purchase_price: float
    total_investment: float     # purchase price + closing costs
    current_value: float
    loan_amount: float          # assumed fully outstanding
    equity: float
    cash_invested: float
    annual_rental_income: float
    annual_expenses: float      # operating only, no debt service
    noi: float
    annual_debt_service: float
    annual_cash_flow: float
    cap_rate: float
    cash_on_cash: float
    dscr: float
    gross_yield: float
    net_yield: float
    ltv: float


@dataclass(frozen=True)
class PortfolioMetrics:
    """
    Portfolio totals plus ratios recomputed from those totals.

    The ratios are ratio-of-sums: a small property with an extreme yield
    must not move the portfolio figure more than its size warrants.
    """
    year: int
    properties: list[PropertyMetrics]
    total_purchase_price: float
    total_investment: float
    total_current_value: float
    total_loan_amount: float
    total_equity: float
    total_cash_invested: float
    total_annual_income: float
    total_annual_expenses: float
    noi: float
    total_debt_service: float
    annual_cash_flow: float
    cap_rate: float
    cash_on_cash: float
    dscr: float
    gross_yield: float
    net_yield: float
    ltv: float
    warnings: list[ReportWarning] = field(default_factory=list)

    def to_frame(self) -> pd.DataFrame:
        """One row per property, indexed by property id."""
        columns = list(PropertyMetrics.__dataclass_fields__)
        rows = [asdict(m) for m in self.properties]
        return pd.DataFrame(rows, columns=columns).set_index("property_id")
