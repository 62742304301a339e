"""Shared fixtures for the restaurant dashboard tests."""

from __future__ import annotations

import pytest

from restaurant_dashboard.models import OrderRecord


def make_record(
    date: str = "01-06-2024",
    time: str = "13:00",
    order_id: str = "A1",
    item_name: str = "Thali",
    category: str = "Main",
    quantity: int = 1,
    unit_price: float = 100.0,
    total_amount: float | None = None,
) -> OrderRecord:
    """Build an OrderRecord; total defaults to quantity x unit price."""
    if total_amount is None:
        total_amount = quantity * unit_price
    return OrderRecord(
        date=date,
        time=time,
        order_id=order_id,
        item_name=item_name,
        category=category,
        quantity=quantity,
        unit_price=unit_price,
        total_amount=total_amount,
    )


@pytest.fixture()
def scenario_records() -> list[OrderRecord]:
    """Two single-item orders on consecutive days."""
    return [
        make_record(date="01-06-2024", time="13:00", order_id="A1", item_name="Thali",
                    category="Main", quantity=2, unit_price=100, total_amount=200),
        make_record(date="02-06-2024", time="20:00", order_id="A2", item_name="Soup",
                    category="Starter", quantity=1, unit_price=50, total_amount=50),
    ]


@pytest.fixture()
def ten_day_records() -> list[OrderRecord]:
    """One order per day for 10 days spanning a month boundary (27-05 .. 05-06)."""
    dates = [f"{d:02d}-05-2024" for d in range(27, 32)] + [f"{d:02d}-06-2024" for d in range(1, 6)]
    return [
        make_record(date=date, order_id=f"O{i}", total_amount=100.0 + i)
        for i, date in enumerate(dates)
    ]
