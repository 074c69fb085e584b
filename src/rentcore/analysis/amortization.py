# src/rentcore/analysis/amortization.py
from __future__ import annotations

from dataclasses import dataclass

from rentcore.domain.errors import InvalidInputError, require_non_negative, require_year
from rentcore.domain.property import Loan


@dataclass(frozen=True)
class AmortizationRow:
    month: int              # 1-based
    payment: float
    interest: float
    principal_paid: float
    balance: float          # outstanding after this payment


@dataclass(frozen=True)
class AmortizationSchedule:
    principal: float
    payment: float          # fixed payment of the amortizing period
    rows: list[AmortizationRow]

    @property
    def total_interest(self) -> float:
        return sum(r.interest for r in self.rows)


def monthly_payment(principal: float, annual_rate_pct: float, term_months: int) -> float:
    """
    Standard fixed-rate (French) amortization formula:
    M = P * [ i(1+i)^n / ((1+i)^n - 1) ]
    P = loan principal
    i = monthly interest rate (annual_rate_pct / 100 / 12)
    n = number of payments (months)

    A zero rate degenerates to P / n; a cash purchase (P = 0) pays nothing.
    """
    require_non_negative(principal=principal, annual_rate_pct=annual_rate_pct)
    if term_months <= 0:
        raise InvalidInputError(f"term_months must be > 0 (got {term_months!r})")

    if principal == 0:
        return 0.0

    i = annual_rate_pct / 100.0 / 12.0
    n = term_months

    growth = (1 + i) ** n
    # rates small enough to vanish in float arithmetic behave like zero
    if i == 0 or growth == 1.0:
        return principal / n

    return principal * (i * growth) / (growth - 1)


def build_schedule(
    principal: float,
    annual_rate_pct: float,
    term_months: int,
    interest_only_months: int = 0,
) -> AmortizationSchedule:
    """
    Month-by-month schedule with an optional interest-only lead-in.

    During the interest-only months only interest is paid; the balance is
    then amortized over the remaining ``term_months - interest_only_months``.
    """
    if interest_only_months < 0 or interest_only_months >= term_months:
        raise InvalidInputError(
            f"interest_only_months must be in [0, term_months) "
            f"(got {interest_only_months!r} for term {term_months!r})"
        )

    i = annual_rate_pct / 100.0 / 12.0
    balance = principal
    rows: list[AmortizationRow] = []

    for month in range(1, interest_only_months + 1):
        interest = balance * i
        rows.append(AmortizationRow(month, interest, interest, 0.0, balance))

    payment = monthly_payment(principal, annual_rate_pct, term_months - interest_only_months)

    for month in range(interest_only_months + 1, term_months + 1):
        interest = balance * i
        principal_paid = payment - interest
        balance = max(0.0, balance - principal_paid)
        rows.append(AmortizationRow(month, payment, interest, principal_paid, balance))

    return AmortizationSchedule(principal=principal, payment=payment, rows=rows)


def schedule_for_loan(loan: Loan) -> AmortizationSchedule:
    return build_schedule(
        loan.principal,
        loan.annual_rate_pct,
        loan.term_months,
        loan.interest_only_months,
    )


def annual_debt_service(loan: Loan) -> float:
    """Amortizing payment x 12; interest-only relief is not reflected."""
    payment = monthly_payment(
        loan.principal,
        loan.annual_rate_pct,
        loan.term_months - loan.interest_only_months,
    )
    return payment * 12.0


def first_year_split(schedule: AmortizationSchedule) -> tuple[float, float]:
    """(interest, principal) paid over the first twelve rows."""
    first = schedule.rows[:12]
    return (
        sum(r.interest for r in first),
        sum(r.principal_paid for r in first),
    )


def remaining_balance(schedule: AmortizationSchedule, months_paid: int) -> float:
    if months_paid < 0:
        raise InvalidInputError(f"months_paid must be >= 0 (got {months_paid!r})")
    if months_paid == 0:
        return schedule.principal
    idx = min(months_paid, len(schedule.rows)) - 1
    return schedule.rows[idx].balance


def debt_service_for_year(loan: Loan, year: int) -> float:
    """
    Payments falling in calendar ``year``.

    Only the months inside ``[start_date, start_date + term_months)`` pay,
    each its scheduled amount, so interest-only months pay interest only.
    A loan without ``start_date`` is treated as running all year at the
    amortizing payment.
    """
    require_year(year)
    if loan.start_date is None:
        return annual_debt_service(loan)

    first = loan.start_date.year * 12 + loan.start_date.month - 1
    offset = year * 12 - first
    months = range(max(offset, 0), min(offset + 12, loan.term_months))
    if not months:
        return 0.0

    schedule = schedule_for_loan(loan)
    return sum((schedule.rows[k].payment for k in months), 0.0)
