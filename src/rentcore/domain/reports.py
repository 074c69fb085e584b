from __future__ import annotations

from dataclasses import asdict, dataclass, field

import pandas as pd

from rentcore.domain.errors import ReportWarning


@dataclass(frozen=True)
class PropertyTaxLine:
    property_id: str
    property: str           # display label
    rental_income: float
    deductions: float
    net_income: float


@dataclass(frozen=True)
class TaxReport:
    """Fiscal-year snapshot of taxable rental income. Never persisted here."""

    year: int
    total_rental_income: float
    total_deductions: float
    net_taxable_income: float
    property_reports: list[PropertyTaxLine]
    warnings: list[ReportWarning] = field(default_factory=list)

    def to_frame(self) -> pd.DataFrame:
        columns = list(PropertyTaxLine.__dataclass_fields__)
        return pd.DataFrame([asdict(r) for r in self.property_reports], columns=columns)
