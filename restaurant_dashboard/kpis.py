"""
KPI computation functions — pure functions with no side effects.

Provides headline metrics, revenue trend, item rankings, category shares,
the 24-hour sales distribution, heuristic insights, and display formatting.
"""

import logging
import math
from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal

import pandas as pd

from .config import (
    CURRENCY_SYMBOL,
    MAX_INSIGHTS,
    NOT_AVAILABLE,
    PEAK_HOUR_WINDOWS,
    PERFORMANCE_BAND_PCT,
    SLOW_MOVER_MIN_ITEMS,
    SLOW_MOVER_SHARE_PCT,
    STAFFING_HOURS,
    TOP_BOTTOM_SIZE,
    TOP_SELLER_SHARE_PCT,
)
from .models import (
    CategoryData,
    DashboardMetrics,
    HourlyData,
    Insight,
    InsightKind,
    ItemSalesData,
    OrderRecord,
    PerformanceStatus,
    StatusColor,
    Trend,
    TrendDataPoint,
)
from .transforms import records_to_frame, sorted_unique_dates

logger = logging.getLogger(__name__)


def _pct_change(latest: float, previous: float) -> float:
    """Percentage change from previous to latest; 0 when previous is not positive."""
    if previous <= 0:
        return 0.0
    return (latest - previous) / previous * 100


def is_peak_hour(hour: int) -> bool:
    """Static business-hours rule: lunch 12-14 and dinner 19-21, inclusive."""
    return any(start <= hour <= end for start, end in PEAK_HOUR_WINDOWS)


def calculate_metrics(records: Sequence[OrderRecord]) -> DashboardMetrics:
    """Headline metrics for a record set.

    Orders are counted by distinct order id, not by line item. The change
    figures compare the latest date present against the second-latest
    date present (calendar order); with fewer than two dates they are 0.
    """
    df = records_to_frame(records)

    total_revenue = float(df["total_amount"].sum())
    total_orders = int(df["order_id"].nunique())
    average_bill = total_revenue / total_orders if total_orders > 0 else 0.0

    dates = sorted_unique_dates(records)
    latest_df = df[df["date"] == dates[-1]] if dates else df.iloc[0:0]
    previous_df = df[df["date"] == dates[-2]] if len(dates) > 1 else df.iloc[0:0]

    revenue_change = _pct_change(
        float(latest_df["total_amount"].sum()),
        float(previous_df["total_amount"].sum()),
    )
    orders_change = _pct_change(
        latest_df["order_id"].nunique(),
        previous_df["order_id"].nunique(),
    )

    return DashboardMetrics(
        total_revenue=total_revenue,
        total_orders=total_orders,
        average_bill_value=average_bill,
        revenue_change=revenue_change,
        orders_change=orders_change,
    )


def generate_trend_data(records: Sequence[OrderRecord]) -> list[TrendDataPoint]:
    """Revenue per date, in calendar order."""
    df = records_to_frame(records)
    if df.empty:
        return []

    daily = df.groupby("date", sort=False)["total_amount"].sum()
    return [
        TrendDataPoint(date=date, revenue=float(daily[date]))
        for date in sorted_unique_dates(records)
    ]


def _item_stats(df: pd.DataFrame) -> pd.DataFrame:
    """Per-item quantity and revenue, best seller first.

    Ties keep first-appearance order.
    """
    stats = (
        df.groupby("item_name", sort=False)
        .agg(quantity=("quantity", "sum"), revenue=("total_amount", "sum"))
        .reset_index()
    )
    return stats.sort_values("quantity", ascending=False, kind="stable")


def get_top_bottom_items(
    records: Sequence[OrderRecord],
) -> tuple[list[ItemSalesData], list[ItemSalesData]]:
    """Return (top, bottom) item rankings by quantity sold.

    ``top`` is the first five of the descending ranking. ``bottom`` is the
    last five of the same ranking reversed, so the slowest item comes
    first. The two lists overlap when fewer than ten items exist.
    """
    df = records_to_frame(records)
    if df.empty:
        return [], []

    items = [
        ItemSalesData(name=row.item_name, quantity=int(row.quantity), revenue=float(row.revenue))
        for row in _item_stats(df).itertuples(index=False)
    ]
    top = items[:TOP_BOTTOM_SIZE]
    bottom = list(reversed(items[-TOP_BOTTOM_SIZE:]))
    return top, bottom


def get_category_data(records: Sequence[OrderRecord]) -> list[CategoryData]:
    """Revenue and revenue share per category, highest revenue first."""
    df = records_to_frame(records)
    if df.empty:
        return []

    revenue = df.groupby("category", sort=False)["total_amount"].sum()
    total = float(revenue.sum())
    ranked = revenue.sort_values(ascending=False, kind="stable")

    return [
        CategoryData(
            name=name,
            value=float(value),
            percentage=(float(value) / total * 100) if total > 0 else 0.0,
        )
        for name, value in ranked.items()
    ]


def _hourly_revenue(df: pd.DataFrame) -> pd.Series:
    """Revenue per parsed hour, in first-appearance order."""
    timed = df.dropna(subset=["hour"])
    return timed.groupby("hour", sort=False)["total_amount"].sum()


def get_hourly_data(records: Sequence[OrderRecord]) -> list[HourlyData]:
    """Sales for each of the 24 hours, always 24 entries ("00:00".."23:00")."""
    hourly = _hourly_revenue(records_to_frame(records))

    return [
        HourlyData(
            hour=f"{hour:02d}:00",
            sales=float(hourly.get(hour, 0.0)),
            is_peak=is_peak_hour(hour),
        )
        for hour in range(24)
    ]


def _hour_label(hour: int) -> str:
    if 12 <= hour <= 14:
        return "lunch (12-2 PM)"
    if 19 <= hour <= 21:
        return "dinner (7-9 PM)"
    return f"{hour}:00 hour"


def generate_insights(records: Sequence[OrderRecord]) -> list[Insight]:
    """Up to three narrative insights, in fixed priority order.

    1. Top seller: best item's share of units is above 20%.
    2. Slow mover: with more than 3 items, the slowest item's share is
       under 3% (and non-zero).
    3. Staffing: the two highest-revenue hours, named as lunch/dinner
       where they fall in those windows.

    Conditions that do not hold are skipped; the list is never padded.
    """
    df = records_to_frame(records)
    if df.empty:
        return []

    insights: list[Insight] = []
    total_quantity = int(df["quantity"].sum())
    stats = _item_stats(df)

    if not stats.empty and total_quantity > 0:
        top = stats.iloc[0]
        if int(top["quantity"]) / total_quantity * 100 > TOP_SELLER_SHARE_PCT:
            insights.append(Insight(
                kind=InsightKind.SUCCESS,
                message=f"{top['item_name']} is your top seller today — ensure stock availability",
                icon="🔥",
            ))

    if len(stats) > SLOW_MOVER_MIN_ITEMS and total_quantity > 0:
        slow = stats.iloc[-1]
        slow_qty = int(slow["quantity"])
        if slow_qty / total_quantity * 100 < SLOW_MOVER_SHARE_PCT and slow_qty > 0:
            insights.append(Insight(
                kind=InsightKind.WARNING,
                message=f"{slow['item_name']} sales are low — consider promoting or bundling it",
                icon="💡",
            ))

    hourly = _hourly_revenue(df)
    hourly = hourly[hourly > 0].sort_values(ascending=False, kind="stable")
    peak_hours = [int(h) for h in hourly.index[:STAFFING_HOURS]]

    if peak_hours:
        peak_text = " and ".join(_hour_label(h) for h in peak_hours)
        insights.append(Insight(
            kind=InsightKind.INFO,
            message=f"Peak sales during {peak_text} — plan staffing accordingly",
            icon="👥",
        ))

    return insights[:MAX_INSIGHTS]


def get_performance_status(current: float, average: float) -> PerformanceStatus:
    """Classify a value against its recent average.

    More than 10% above -> green/up, more than 10% below -> red/down,
    otherwise yellow/neutral. An average of 0 is treated as neutral.
    """
    if average == 0:
        return PerformanceStatus(label="Normal", color=StatusColor.YELLOW, trend=Trend.NEUTRAL)

    diff = (current - average) / average * 100
    if diff > PERFORMANCE_BAND_PCT:
        return PerformanceStatus(label="Above Average", color=StatusColor.GREEN, trend=Trend.UP)
    if diff < -PERFORMANCE_BAND_PCT:
        return PerformanceStatus(label="Below Average", color=StatusColor.RED, trend=Trend.DOWN)
    return PerformanceStatus(label="Normal", color=StatusColor.YELLOW, trend=Trend.NEUTRAL)


def format_currency(amount: float) -> str:
    """Format rupees with no decimals and Indian digit grouping (₹12,34,567)."""
    if not math.isfinite(amount):
        return NOT_AVAILABLE
    rounded = int(Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    sign = "-" if rounded < 0 else ""
    digits = str(abs(rounded))

    if len(digits) > 3:
        head, tail = digits[:-3], digits[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        digits = ",".join(groups + [tail])

    return f"{sign}{CURRENCY_SYMBOL}{digits}"


def format_percentage(value: float) -> str:
    """Signed percentage with one decimal place (+12.5%)."""
    sign = "+" if value > 0 else ""
    return f"{sign}{value:.1f}%"
