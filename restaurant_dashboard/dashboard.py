"""
Dashboard-ready output functions.

These are the primary entry points for the Streamlit front end and the CLI.
Each function returns value objects (or plain dicts of them) suitable for
rendering cards, charts, tables and the printable executive report.
"""

import calendar
import logging
from collections.abc import Sequence

from .config import (
    EXTRA_STAFF_BILL_MULTIPLE,
    MAX_ACTIONS,
    MONTHLY_REPORT_MIN_RECORDS,
    NOT_AVAILABLE,
    REVENUE_TREND_CHANGE_PCT,
    RUN_OFFER_MAX_QUANTITY,
    SLOW_DAY_CHANGE_PCT,
    STOCK_UP_MIN_QUANTITY,
    STRONG_DAY_CHANGE_PCT,
)
from .kpis import (
    calculate_metrics,
    format_currency,
    format_percentage,
    generate_insights,
    generate_trend_data,
    get_category_data,
    get_hourly_data,
    get_top_bottom_items,
)
from .loaders.utils import parse_order_date
from .models import (
    ActionColor,
    DateRange,
    ExecutiveReportData,
    FilterState,
    NamedQuantity,
    NamedRevenue,
    OrderRecord,
    ReportAction,
    ReportStatus,
    RevenueSummary,
    StatusColor,
    TimeStory,
    Trend,
)
from .transforms import apply_filters, get_unique_categories

logger = logging.getLogger(__name__)


def _month_label(date_text: str) -> str:
    """Month-year label, e.g. "June 2024" for "01-06-2024"."""
    parsed = parse_order_date(date_text)
    if parsed is None:
        return date_text or NOT_AVAILABLE
    return f"{calendar.month_name[parsed.month]} {parsed.year}"


def _report_title(records: Sequence[OrderRecord], date_range: DateRange) -> tuple[str, str]:
    first_date = records[0].date if records else ""

    if date_range is DateRange.THIS_MONTH or len(records) > MONTHLY_REPORT_MIN_RECORDS:
        label = _month_label(first_date) if records else NOT_AVAILABLE
        return "Monthly Performance Summary", label
    if date_range is DateRange.LAST_7_DAYS:
        return "Weekly Business Summary", "Last 7 Days"
    return "Daily Snapshot", first_date or NOT_AVAILABLE


def _report_status(revenue_change: float) -> ReportStatus:
    # Asymmetric thresholds: +10% for a strong day, -15% for a slow one
    if revenue_change > STRONG_DAY_CHANGE_PCT:
        return ReportStatus(
            label="Strong Day",
            color=StatusColor.GREEN,
            description="Excellent! You have outperformed your recent average.",
        )
    if revenue_change < SLOW_DAY_CHANGE_PCT:
        return ReportStatus(
            label="Slow Day",
            color=StatusColor.RED,
            description="Business was quieter than usual today.",
        )
    return ReportStatus(
        label="Average Day",
        color=StatusColor.YELLOW,
        description="Steady performance. Business is behaving normally.",
    )


def _revenue_summary(total_revenue: float, revenue_change: float) -> RevenueSummary:
    if revenue_change > REVENUE_TREND_CHANGE_PCT:
        trend, label = Trend.UP, "Better than usual"
    elif revenue_change < -REVENUE_TREND_CHANGE_PCT:
        trend, label = Trend.DOWN, "Below average"
    else:
        trend, label = Trend.NEUTRAL, "Consistent"
    return RevenueSummary(value=format_currency(total_revenue), trend=trend, trend_label=label)


def generate_executive_report(
    records: Sequence[OrderRecord],
    date_range: DateRange | str,
) -> ExecutiveReportData:
    """Compose the narrative executive report for an (already filtered) record set.

    Parameters
    ----------
    records : Records for the report window, typically the output of
        filter_by_date_range().
    date_range : The window the records were selected with; drives the
        title and the date-range label.

    Returns
    -------
    ExecutiveReportData. Missing rankings fall back to "N/A" with zero
    values; the action list always has at least one entry.
    """
    date_range = DateRange(date_range)

    metrics = calculate_metrics(records)
    hourly = get_hourly_data(records)
    categories = get_category_data(records)
    top_items, bottom_items = get_top_bottom_items(records)

    title, label = _report_title(records, date_range)

    top_item = (
        NamedQuantity(name=top_items[0].name, quantity=top_items[0].quantity)
        if top_items else NamedQuantity(name=NOT_AVAILABLE, quantity=0)
    )
    slow_item = (
        NamedQuantity(name=bottom_items[0].name, quantity=bottom_items[0].quantity)
        if bottom_items else NamedQuantity(name=NOT_AVAILABLE, quantity=0)
    )
    best_category = (
        NamedRevenue(name=categories[0].name, revenue=categories[0].value)
        if categories else NamedRevenue(name=NOT_AVAILABLE, revenue=0.0)
    )
    low_category = (
        NamedRevenue(name=categories[-1].name, revenue=categories[-1].value)
        if categories else NamedRevenue(name=NOT_AVAILABLE, revenue=0.0)
    )

    # First flagged hour to last flagged hour, gaps included
    peak_bars = [h for h in hourly if h.is_peak]
    peak_window = f"{peak_bars[0].hour} - {peak_bars[-1].hour}" if peak_bars else NOT_AVAILABLE

    actions = []
    if top_item.quantity > STOCK_UP_MIN_QUANTITY:
        actions.append(ReportAction(title=f"Stock up on {top_item.name}", icon="📦", color=ActionColor.GREEN))
    if slow_item.quantity < RUN_OFFER_MAX_QUANTITY:
        actions.append(ReportAction(title=f"Run offer on {slow_item.name}", icon="🏷️", color=ActionColor.AMBER))
    if any(b.sales > metrics.average_bill_value * EXTRA_STAFF_BILL_MULTIPLE for b in peak_bars):
        actions.append(ReportAction(title="Extra staff for lunch", icon="👥", color=ActionColor.BLUE))
    if not actions:
        actions.append(ReportAction(
            title="All good! Maintain current operations", icon="✨", color=ActionColor.PURPLE,
        ))

    report = ExecutiveReportData(
        title=title,
        date_range=label,
        status=_report_status(metrics.revenue_change),
        revenue=_revenue_summary(metrics.total_revenue, metrics.revenue_change),
        top_item=top_item,
        best_category=best_category,
        slow_item=slow_item,
        low_category=low_category,
        time_story=TimeStory(peak_window=peak_window, hourly_bars=tuple(hourly)),
        actions=tuple(actions[:MAX_ACTIONS]),
    )
    logger.info("Generated '%s' report for %s (%d records)", title, label, len(records))
    return report


def render_report_markdown(report: ExecutiveReportData) -> str:
    """Printable Markdown rendering of an executive report."""
    busiest = max(report.time_story.hourly_bars, key=lambda h: h.sales, default=None)
    busiest_line = (
        f"Busiest hour: **{busiest.hour}** ({format_currency(busiest.sales)})"
        if busiest is not None and busiest.sales > 0
        else "No timed sales recorded."
    )

    lines = [
        f"# {report.title}",
        f"_{report.date_range}_",
        "",
        f"## {report.status.label}",
        report.status.description,
        "",
        f"**Revenue:** {report.revenue.value} ({report.revenue.trend_label})",
        "",
        "## What worked",
        f"- Top item: **{report.top_item.name}** ({report.top_item.quantity} sold)",
        f"- Best category: **{report.best_category.name}** ({format_currency(report.best_category.revenue)})",
        "",
        "## Needs attention",
        f"- Slowest item: **{report.slow_item.name}** ({report.slow_item.quantity} sold)",
        f"- Weakest category: **{report.low_category.name}** ({format_currency(report.low_category.revenue)})",
        "",
        "## Time of day",
        f"Peak window: **{report.time_story.peak_window}**",
        busiest_line,
        "",
        "## Recommended actions",
    ]
    lines.extend(f"{i}. {a.icon} {a.title}" for i, a in enumerate(report.actions, start=1))
    return "\n".join(lines) + "\n"


def get_dashboard_view(
    records: Sequence[OrderRecord],
    state: FilterState,
) -> dict:
    """Single entry point the app calls to populate every dashboard panel.

    Returns
    -------
    Dict with keys: filtered, metrics (None when nothing survives the
    filters), trend, top_items, bottom_items, categories, hourly,
    insights, category_options.
    """
    filtered = apply_filters(records, state)
    top_items, bottom_items = get_top_bottom_items(filtered)

    view = {
        "filtered": filtered,
        "metrics": calculate_metrics(filtered) if filtered else None,
        "trend": generate_trend_data(filtered),
        "top_items": top_items,
        "bottom_items": bottom_items,
        "categories": get_category_data(filtered),
        "hourly": get_hourly_data(filtered) if filtered else [],
        "insights": generate_insights(filtered),
        "category_options": get_unique_categories(records),
    }

    if view["metrics"] is not None:
        logger.debug(
            "View: %d records, revenue change %s",
            len(filtered),
            format_percentage(view["metrics"].revenue_change),
        )
    return view
