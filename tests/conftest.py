# tests/conftest.py
from datetime import date, datetime, timezone

import pytest

from rentcore.domain.property import Lease, OneOffExpense, Property, RecurringExpense


@pytest.fixture
def now():
    return datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def cash_flat():
    """
    59k flat bought cash, one open-ended lease since Oct 2022 and a yearly
    IBI bill. The 2024 fiscal year should net 10,550.
    """
    prop = Property(id="p1", purchase_price=59_000.0, address="Calle Mayor 1")
    leases = [Lease(property_id="p1", start_date=date(2022, 10, 1), monthly_rent=900.0)]
    recurring = [
        RecurringExpense(property_id="p1", type="ibi", amount=250.0, periodicity="yearly"),
    ]
    one_offs: list[OneOffExpense] = []
    return prop, leases, recurring, one_offs
