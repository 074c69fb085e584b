# src/rentcore/services/billing.py
"""
Access gating derived from an organization's subscription record.

Nothing here stores a "current state": every check re-derives it from
status, grace_until and the caller's clock reading. Callers take ``now``
once per request and pass the same value to every check.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

from rentcore.adapters.config import config
from rentcore.adapters.logging_utils import get_logger, log_context
from rentcore.domain.billing import (
    AccessState,
    BillingRecord,
    BillingState,
    BillingVerdict,
    Plan,
    PlanLimits,
)
from rentcore.domain.errors import InvalidInputError

logger = get_logger(__name__)

PLAN_LIMITS: dict[str, PlanLimits] = {
    "free": PlanLimits(property_limit=2, seat_limit=1, report_export=False),
    "solo": PlanLimits(property_limit=10, seat_limit=1),
    "pro": PlanLimits(property_limit=50, seat_limit=3),
    "agency": PlanLimits(property_limit=200, seat_limit=10),
}

# Monthly list price in EUR, for display.
PLAN_PRICES: dict[str, float] = {
    "free": 0.0,
    "solo": 4.99,
    "pro": 9.99,
    "agency": 19.99,
}

_GRACE_STATUSES = {"past_due", "unpaid"}


def _as_utc(ts: datetime) -> datetime:
    # naive timestamps are stored as UTC by the billing back-end
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def plan_limits(plan: Plan) -> PlanLimits:
    try:
        return PLAN_LIMITS[plan]
    except KeyError:
        raise InvalidInputError(f"unknown plan: {plan!r}") from None


def plan_for_price(price_id: str | None) -> Plan:
    """Map a payment-provider price id to a plan by its naming convention."""
    if not price_id:
        return "free"
    if "SOLO" in price_id:
        return "solo"
    if "PRO" in price_id:
        return "pro"
    if "AGENCY" in price_id:
        return "agency"
    return "free"


def grace_deadline(failed_at: datetime, days: int | None = None) -> datetime:
    """End of the grace window opened by a failed payment at ``failed_at``."""
    window = config.GRACE_PERIOD_DAYS if days is None else days
    if window <= 0:
        raise InvalidInputError(f"grace window must be > 0 days (got {window!r})")
    return _as_utc(failed_at) + timedelta(days=window)


def access_state(record: BillingRecord | None, now: datetime) -> AccessState:
    if record is None:
        # no billing document yet: the org is on the free plan, not blocked
        return "active"

    status = record.status
    if status in ("active", "trialing"):
        return "active"
    if status == "canceled":
        return "blocked"
    if status in _GRACE_STATUSES:
        if record.grace_until is not None and _as_utc(now) <= _as_utc(record.grace_until):
            return "grace"
        # past_due without a grace date is treated as overdue
        return "blocked"
    raise InvalidInputError(f"unknown subscription status: {status!r}")


def resolve_billing_state(record: BillingRecord | None, now: datetime) -> BillingState:
    state = access_state(record, now)

    plan: Plan = record.plan if record is not None else config.DEFAULT_PLAN
    defaults = plan_limits(plan)
    property_limit = defaults.property_limit
    seat_limit = defaults.seat_limit
    grace_until = None
    if record is not None:
        if record.property_limit is not None:
            property_limit = record.property_limit
        if record.seat_limit is not None:
            seat_limit = record.seat_limit
        if record.status in _GRACE_STATUSES:
            grace_until = record.grace_until

    logger.debug(
        "billing_state_resolved",
        extra=log_context(
            org_id=record.org_id if record is not None else None,
            status=record.status if record is not None else None,
            state=state,
        ),
    )
    return BillingState(
        state=state,
        has_access=state in ("active", "grace"),
        plan=plan,
        property_limit=property_limit,
        seat_limit=seat_limit,
        grace_until=grace_until,
    )


def billing_verdict(record: BillingRecord | None, now: datetime) -> BillingVerdict:
    """Allow/deny answer with the reason shown to a blocked user."""
    state = access_state(record, now)
    grace_until = record.grace_until if record is not None else None
    if state == "active":
        return BillingVerdict(allowed=True)
    if state == "grace":
        return BillingVerdict(allowed=True, reason="Grace period active", grace_until=grace_until)
    if record is not None and record.status == "canceled":
        return BillingVerdict(allowed=False, reason="Subscription canceled")
    return BillingVerdict(allowed=False, reason="Payment overdue", grace_until=grace_until)


def can_add_property(state: BillingState, current_count: int) -> bool:
    return state.has_access and current_count < state.property_limit


def can_add_seat(state: BillingState, current_count: int) -> bool:
    return state.has_access and current_count < state.seat_limit


def can_export_reports(state: BillingState) -> bool:
    """Report export is a paid feature; stored limit overrides do not unlock it."""
    return state.has_access and plan_limits(state.plan).report_export
