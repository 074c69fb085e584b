from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field


class DealInputs(BaseModel):
    """Parameters of a hypothetical acquisition. Monthly unless stated."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    purchase_price: float = Field(..., ge=0)
    down_payment_pct: float = Field(..., ge=0, le=100, description="20 means 20% down")
    interest_rate_pct: float = Field(..., ge=0, description="3.5 means 3.5% APR")
    loan_term_years: int = Field(..., gt=0)
    closing_costs: float = Field(default=0.0, ge=0)
    renovation_costs: float = Field(default=0.0, ge=0)

    monthly_rent: float = Field(..., ge=0)
    annual_property_tax: float = Field(default=0.0, ge=0)
    insurance: float = Field(default=0.0, ge=0)
    hoa: float = Field(default=0.0, ge=0)
    maintenance: float = Field(default=0.0, ge=0)
    management_pct: float = Field(default=0.0, ge=0, le=100, description="% of rent")
    utilities: float = Field(default=0.0, ge=0)


@dataclass(frozen=True)
class DealResults:
    total_investment: float        # down payment + closing + renovation
    down_payment: float
    loan_amount: float
    monthly_mortgage: float        # P&I
    gross_monthly_income: float
    monthly_property_tax: float
    management_fee: float          # monthly
    total_monthly_expenses: float  # includes mortgage
    monthly_cash_flow: float
    annual_cash_flow: float
    annual_debt_service: float
    noi: float                     # annual, before debt service
    cap_rate: float                # % of purchase price
    cash_on_cash: float            # % of total investment
    dscr: float
    break_even_occupancy_pct: float
    is_profitable: bool
