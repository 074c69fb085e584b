# src/rentcore/analysis/income.py
"""
Contracted rental income per calendar month of a fiscal year.

A lease counts for a month when its half-open interval
``[start_date, end_date)`` overlaps ``[month_start, next_month_start)``.
Any overlap earns the full monthly rent: fiscal reporting uses contracted
amounts, never prorated ones. Vacancy is applied only when the caller asks
for it (profitability views), per lease through ``Lease.vacancy_pct``.

Overlapping leases on one property are summed independently, so two
contracts for the same month double the income. That matches how the
records are modelled (co-tenancy with separate contracts is possible) and
is kept until product decides otherwise; overlaps are logged at debug level.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

import numpy as np

from rentcore.adapters.logging_utils import get_logger, log_context
from rentcore.domain.errors import require_year
from rentcore.domain.property import Lease

logger = get_logger(__name__)


@dataclass(frozen=True)
class PropertyIncome:
    property_id: str
    monthly: tuple[float, ...]   # 12 entries, January first
    overlap_months: tuple[int, ...] = ()

    @property
    def total(self) -> float:
        return float(sum(self.monthly))


@dataclass(frozen=True)
class RentalIncome:
    year: int
    by_property: dict[str, PropertyIncome] = field(default_factory=dict)

    @property
    def monthly(self) -> tuple[float, ...]:
        totals = np.zeros(12, dtype=float)
        for income in self.by_property.values():
            totals += np.asarray(income.monthly, dtype=float)
        return tuple(float(x) for x in totals)

    @property
    def total(self) -> float:
        return float(sum(p.total for p in self.by_property.values()))

    def for_property(self, property_id: str) -> float:
        income = self.by_property.get(property_id)
        return income.total if income is not None else 0.0


def month_bounds(year: int) -> tuple[np.ndarray, np.ndarray]:
    """First day of each month of ``year`` and first day of the following month."""
    starts = np.arange(
        np.datetime64(f"{year:04d}-01"),
        np.datetime64(f"{year:04d}-01") + 12,
        dtype="datetime64[M]",
    )
    return starts.astype("datetime64[D]"), (starts + 1).astype("datetime64[D]")


def active_months(lease: Lease, year: int) -> np.ndarray:
    """Boolean mask of the months of ``year`` the lease overlaps."""
    month_starts, month_ends = month_bounds(year)
    start = np.datetime64(lease.start_date, "D")
    mask = start < month_ends
    if lease.end_date is not None:
        mask &= np.datetime64(lease.end_date, "D") > month_starts
    return mask


def _effective_rent(lease: Lease, default_vacancy: float | None) -> float:
    if default_vacancy is None:
        return lease.monthly_rent
    vacancy = lease.vacancy_pct if lease.vacancy_pct is not None else default_vacancy
    return lease.monthly_rent * (1.0 - vacancy)


def reconstruct_income(
    leases: Iterable[Lease],
    year: int,
    property_ids: Iterable[str] | None = None,
    default_vacancy: float | None = None,
) -> RentalIncome:
    """
    Per-property monthly contracted rent for ``year``.

    When ``property_ids`` is given, only those properties are reported and
    each of them appears in the result even without leases.

    With ``default_vacancy`` set, each lease earns
    ``monthly_rent * (1 - vacancy)`` where vacancy is the lease's own
    ``vacancy_pct`` or, when unset, ``default_vacancy``. Left as None the
    result is contracted rent and lease vacancy is ignored.
    """
    require_year(year)
    selected = set(property_ids) if property_ids is not None else None

    income: dict[str, np.ndarray] = {}
    occupancy: dict[str, np.ndarray] = {}
    if selected is not None:
        for pid in selected:
            income[pid] = np.zeros(12, dtype=float)
            occupancy[pid] = np.zeros(12, dtype=int)

    for lease in leases:
        pid = lease.property_id
        if selected is not None and pid not in selected:
            continue
        mask = active_months(lease, year)
        income.setdefault(pid, np.zeros(12, dtype=float))
        occupancy.setdefault(pid, np.zeros(12, dtype=int))
        income[pid] += mask * _effective_rent(lease, default_vacancy)
        occupancy[pid] += mask

    by_property: dict[str, PropertyIncome] = {}
    for pid, monthly in income.items():
        overlaps = tuple(int(m) + 1 for m in np.flatnonzero(occupancy[pid] > 1))
        if overlaps:
            logger.debug(
                "overlapping_leases_counted",
                extra=log_context(property_id=pid, year=year, months=list(overlaps)),
            )
        by_property[pid] = PropertyIncome(
            property_id=pid,
            monthly=tuple(float(x) for x in monthly),
            overlap_months=overlaps,
        )

    return RentalIncome(year=year, by_property=by_property)
