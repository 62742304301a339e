"""
Restaurant Sales Dashboard — End-to-end analytics pipeline.

Runs the full pipeline from a data source to dashboard-ready outputs and
prints smoke-test summaries.

Usage:
    python main.py                      # default Google Sheet
    python main.py --demo               # simulated orders
    python main.py --csv orders.csv --range last7days
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent))

from restaurant_dashboard.config import DEFAULT_SHEET_URL
from restaurant_dashboard.dashboard import (
    generate_executive_report,
    get_dashboard_view,
    render_report_markdown,
)
from restaurant_dashboard.errors import DashboardError
from restaurant_dashboard.kpis import format_currency, format_percentage
from restaurant_dashboard.loaders import (
    fetch_sheet_records,
    load_records_from_csv,
    load_records_from_excel,
)
from restaurant_dashboard.models import DateRange, FilterState, TimeSlot
from restaurant_dashboard.simulator import generate_orders
from restaurant_dashboard.transforms import filter_by_date_range

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Restaurant sales analytics pipeline")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--sheet", default=None, help="Google Sheet URL or ID")
    source.add_argument("--csv", default=None, help="Path to a CSV export")
    source.add_argument("--excel", default=None, help="Path to an .xlsx workbook")
    source.add_argument("--demo", action="store_true", help="Use simulated orders")
    parser.add_argument("--range", default="all", choices=[d.value for d in DateRange])
    parser.add_argument("--category", default="all")
    parser.add_argument("--slot", default="all", choices=[s.value for s in TimeSlot])
    return parser.parse_args(argv)


def load_source(args: argparse.Namespace):
    if args.demo:
        return generate_orders()
    if args.csv:
        return load_records_from_csv(args.csv)
    if args.excel:
        return load_records_from_excel(args.excel)
    return fetch_sheet_records(args.sheet or DEFAULT_SHEET_URL)


def main(argv=None) -> int:
    """Run the full analytics pipeline and print smoke-test outputs."""
    args = parse_args(argv)

    print("=" * 70)
    print("  RESTAURANT SALES DASHBOARD")
    print("  Analytics Pipeline Smoke Test")
    print("=" * 70)
    print()

    # ------------------------------------------------------------------
    # 1. Load source data
    # ------------------------------------------------------------------
    print("[ 1 ] LOADING SOURCE DATA")
    print("-" * 40)

    try:
        records = load_source(args)
    except DashboardError as e:
        logger.error("Could not load records: %s", e)
        return 1

    print(f"\nOrder records: {len(records)} rows loaded")

    # ------------------------------------------------------------------
    # 2. Dashboard outputs
    # ------------------------------------------------------------------
    print("\n")
    print("[ 2 ] DASHBOARD OUTPUTS")
    print("-" * 40)

    state = FilterState(date_range=DateRange(args.range), category=args.category, time_slot=TimeSlot(args.slot))
    view = get_dashboard_view(records, state)
    print(f"\nFilters: {args.range} / {args.category} / {args.slot} -> {len(view['filtered'])} records")
    print(f"Categories: {view['category_options']}")

    m = view["metrics"]
    if m is None:
        print("\nNo records match the selected filters.")
    else:
        print(f"\n  Total revenue : {format_currency(m.total_revenue)} ({format_percentage(m.revenue_change)})")
        print(f"  Total orders  : {m.total_orders} ({format_percentage(m.orders_change)})")
        print(f"  Average bill  : {format_currency(m.average_bill_value)}")

        print("\nTop sellers:")
        for item in view["top_items"]:
            print(f"  {item.name:28s} {item.quantity:5d}  {format_currency(item.revenue)}")

        print("\nSlow movers:")
        for item in view["bottom_items"]:
            print(f"  {item.name:28s} {item.quantity:5d}  {format_currency(item.revenue)}")

        print("\nCategories:")
        for cat in view["categories"]:
            print(f"  {cat.name:28s} {cat.percentage:5.1f}%  {format_currency(cat.value)}")

        print("\nInsights:")
        for insight in view["insights"]:
            print(f"  [{insight.kind.value}] {insight.message}")

    # ------------------------------------------------------------------
    # 3. Executive report
    # ------------------------------------------------------------------
    print("\n")
    print("[ 3 ] EXECUTIVE REPORT")
    print("-" * 40)
    print()

    report_range = DateRange(args.range)
    report = generate_executive_report(filter_by_date_range(records, report_range), report_range)
    print(render_report_markdown(report))

    print("=" * 70)
    print("  Pipeline complete.")
    print("=" * 70)
    return 0


if __name__ == "__main__":
    sys.exit(main())
