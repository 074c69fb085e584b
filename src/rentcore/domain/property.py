from __future__ import annotations

import datetime as dt
from datetime import date
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

RecurringType = Literal["community", "ibi", "insurance", "garbage", "adminFee", "other"]

Periodicity = Literal["monthly", "quarterly", "biannual", "yearly"]

ExpenseCategory = Literal[
    "renovation",
    "repair",
    "maintenance",
    "furniture",
    "appliance",
    "improvement",
    "legal",
    "agency",
    "other",
]


class Record(BaseModel):
    # records are owned by the caller and never mutated by the engine
    model_config = ConfigDict(frozen=True, extra="ignore", allow_inf_nan=False)


class AcquisitionCosts(Record):
    """Closing-cost breakdown paid on top of the purchase price."""

    itp: float = Field(default=0.0, ge=0, description="Transfer tax")
    notary: float = Field(default=0.0, ge=0)
    registry: float = Field(default=0.0, ge=0)
    ajd: float = Field(default=0.0, ge=0, description="Stamp duty")
    initial_renovation: float = Field(default=0.0, ge=0)
    appliances: float = Field(default=0.0, ge=0)
    others: float = Field(default=0.0, ge=0)

    @property
    def total(self) -> float:
        return (
            self.itp
            + self.notary
            + self.registry
            + self.ajd
            + self.initial_renovation
            + self.appliances
            + self.others
        )


class Property(Record):
    id: str
    purchase_price: float = Field(..., ge=0)
    purchase_date: date | None = None
    closing_costs: AcquisitionCosts = Field(default_factory=AcquisitionCosts)
    current_value: float | None = Field(default=None, gt=0, description="Updated market value")

    # display-only
    name: str | None = None
    address: str | None = None
    city: str | None = None
    zip: str | None = None

    @property
    def label(self) -> str:
        return self.name or self.address or self.id

    @property
    def effective_value(self) -> float:
        return self.current_value if self.current_value is not None else self.purchase_price


class Loan(Record):
    property_id: str
    principal: float = Field(..., ge=0)
    annual_rate_pct: float = Field(..., ge=0, description="3.5 means 3.5% APR")
    term_months: int = Field(..., gt=0)
    start_date: date | None = None
    interest_only_months: int = Field(default=0, ge=0)
    up_front_fees: float = Field(default=0.0, ge=0)

    @model_validator(mode="after")
    def _io_shorter_than_term(self) -> "Loan":
        if self.interest_only_months >= self.term_months:
            raise ValueError("interest_only_months must be < term_months")
        return self


class Lease(Record):
    property_id: str
    start_date: date
    end_date: date | None = None  # open-ended when absent
    monthly_rent: float = Field(..., ge=0)
    # expected share of the year without rent (0..1); unset falls back to
    # the portfolio default
    vacancy_pct: float | None = Field(default=None, ge=0, le=1)
    is_active: bool = True
    tenant_name: str | None = None

    @model_validator(mode="after")
    def _end_after_start(self) -> "Lease":
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date must be on or after start_date")
        return self


class RecurringExpense(Record):
    property_id: str
    type: RecurringType = "other"
    amount: float = Field(..., ge=0, description="Amount per period")
    periodicity: Periodicity
    is_deductible: bool = True


class OneOffExpense(Record):
    property_id: str
    date: dt.date
    amount: float = Field(..., ge=0)
    category: ExpenseCategory = "other"
    is_deductible: bool = True
    description: str | None = None
