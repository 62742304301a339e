"""
Simulated order generator for the restaurant dashboard.

Generates realistic line items for a small Indian restaurant: multi-item
orders clustered around lunch and dinner. All values are synthetic.
"""

import datetime as dt

import numpy as np

from .config import DATE_FORMAT
from .models import OrderRecord

# ---------------------------------------------------------------------------
# Menu: (item, category, unit price, popularity weight)
# ---------------------------------------------------------------------------
_MENU = [
    ("Veg Thali", "Main Course", 180, 14),
    ("Paneer Butter Masala", "Main Course", 240, 10),
    ("Chicken Biryani", "Main Course", 280, 16),
    ("Dal Makhani", "Main Course", 200, 8),
    ("Masala Dosa", "South Indian", 120, 12),
    ("Idli Sambar", "South Indian", 80, 7),
    ("Butter Naan", "Breads", 45, 18),
    ("Tandoori Roti", "Breads", 30, 9),
    ("Tomato Soup", "Starters", 110, 4),
    ("Paneer Tikka", "Starters", 260, 6),
    ("Gulab Jamun", "Desserts", 90, 5),
    ("Rasmalai", "Desserts", 120, 1),
    ("Masala Chai", "Beverages", 40, 11),
    ("Sweet Lassi", "Beverages", 80, 6),
]

# Relative order volume per opening hour (8:00 - 22:00)
_HOUR_WEIGHTS = {
    8: 2, 9: 3, 10: 3, 11: 4,
    12: 9, 13: 11, 14: 7, 15: 3,
    16: 2, 17: 2, 18: 4,
    19: 9, 20: 12, 21: 8, 22: 3,
}


def generate_orders(
    start_date: str = "01-06-2024",
    n_days: int = 14,
    orders_per_day: int = 40,
    seed: int = 42,
) -> list[OrderRecord]:
    """Generate simulated order line items.

    Produces ``n_days`` consecutive days from ``start_date`` (DD-MM-YYYY).
    Daily order counts vary around ``orders_per_day`` with a weekend lift;
    each order carries one to four distinct items.
    """
    rng = np.random.default_rng(seed)
    start = dt.datetime.strptime(start_date, DATE_FORMAT).date()

    names = [m[0] for m in _MENU]
    weights = np.array([m[3] for m in _MENU], dtype=float)
    weights /= weights.sum()
    hours = list(_HOUR_WEIGHTS)
    hour_p = np.array(list(_HOUR_WEIGHTS.values()), dtype=float)
    hour_p /= hour_p.sum()

    records = []
    order_seq = 1000

    for day in range(n_days):
        date = start + dt.timedelta(days=day)
        is_weekend = date.weekday() >= 5
        n_orders = max(1, int(rng.poisson(orders_per_day * (1.3 if is_weekend else 1.0))))

        for _ in range(n_orders):
            order_seq += 1
            hour = int(rng.choice(hours, p=hour_p))
            minute = int(rng.integers(0, 60))
            n_items = int(rng.integers(1, 5))
            picks = rng.choice(len(names), size=n_items, replace=False, p=weights)

            for idx in picks:
                name, category, price, _ = _MENU[int(idx)]
                quantity = int(rng.integers(1, 4))
                records.append(OrderRecord(
                    date=date.strftime(DATE_FORMAT),
                    time=f"{hour:02d}:{minute:02d}",
                    order_id=f"ORD-{order_seq}",
                    item_name=name,
                    category=category,
                    quantity=quantity,
                    unit_price=float(price),
                    total_amount=float(price * quantity),
                ))

    return records
