from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Plan = Literal["free", "solo", "pro", "agency"]

SubscriptionStatus = Literal["active", "past_due", "unpaid", "canceled", "trialing"]

AccessState = Literal["active", "grace", "blocked"]


class BillingRecord(BaseModel):
    """Per-organization subscription snapshot, written by the billing back-end."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    org_id: str
    plan: Plan = "free"
    status: SubscriptionStatus = "active"
    grace_until: datetime | None = None

    # explicit limits stored on the record override the plan table
    property_limit: int | None = Field(default=None, ge=0)
    seat_limit: int | None = Field(default=None, ge=0)

    price_id: str | None = None


@dataclass(frozen=True)
class PlanLimits:
    property_limit: int
    seat_limit: int
    report_export: bool = True  # Excel/PDF export of fiscal reports


@dataclass(frozen=True)
class BillingState:
    state: AccessState
    has_access: bool
    plan: Plan
    property_limit: int
    seat_limit: int
    grace_until: datetime | None = None

    @property
    def show_banner(self) -> bool:
        # the warning banner is only for orgs still inside their grace window
        return self.state == "grace"


@dataclass(frozen=True)
class BillingVerdict:
    allowed: bool
    reason: str | None = None
    grace_until: datetime | None = None
