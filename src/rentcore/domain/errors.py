"""Exception hierarchy and non-fatal report warnings for rentcore."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any


class RentcoreError(Exception):
    """Base exception for all rentcore errors."""


class InvalidInputError(RentcoreError, ValueError):
    """Raised when a computation receives values outside its domain."""


class MissingReferenceError(RentcoreError, LookupError):
    """A record points at a property that is not in the supplied set.

    Aggregations never raise this; they skip the record and attach a
    ``ReportWarning`` instead. Callers that want strict behaviour can
    escalate with ``raise_for_warnings``.
    """


@dataclass(frozen=True)
class ReportWarning:
    code: str
    message: str
    context: dict[str, Any] = field(default_factory=dict)


def raise_for_warnings(warnings: list[ReportWarning]) -> None:
    missing = [w for w in warnings if w.code in {"MISSING_PROPERTY", "UNKNOWN_PROPERTY_FILTER"}]
    if missing:
        raise MissingReferenceError("; ".join(w.message for w in missing))


def require_non_negative(**values: float) -> None:
    for name, value in values.items():
        if value is None or not math.isfinite(value) or value < 0:
            raise InvalidInputError(f"{name} must be >= 0 (got {value!r})")


def require_year(year: int) -> int:
    if isinstance(year, bool) or not isinstance(year, int):
        raise InvalidInputError(f"year must be an integer (got {year!r})")
    if not 1 <= year <= 9999:
        raise InvalidInputError(f"year out of range: {year}")
    return year
