"""
Configuration: source columns, remote endpoints, cache location, and the
fixed business constants used by the aggregation and report layers.

Remote URLs, the HTTP timeout and the cache file can be overridden through
environment variables; everything else is a constant.
"""

import os
from pathlib import Path

# ---------------------------------------------------------------------------
# Source layout
# ---------------------------------------------------------------------------
EXPECTED_COLUMNS: tuple[str, ...] = (
    "Date",
    "Time",
    "Order_ID",
    "Item_Name",
    "Category",
    "Quantity",
    "Unit_Price",
    "Total_Amount",
)

# Column name -> OrderRecord attribute
COLUMN_FIELD_MAP: dict[str, str] = {
    "Date": "date",
    "Time": "time",
    "Order_ID": "order_id",
    "Item_Name": "item_name",
    "Category": "category",
    "Quantity": "quantity",
    "Unit_Price": "unit_price",
    "Total_Amount": "total_amount",
}

DATE_FORMAT = "%d-%m-%Y"
TIME_FORMAT = "%H:%M"

# ---------------------------------------------------------------------------
# Remote data source (environment overrides)
# ---------------------------------------------------------------------------
DEFAULT_SHEET_URL = os.getenv(
    "RESTAURANT_SHEET_URL",
    "https://docs.google.com/spreadsheets/d/1ZavNIywb80lOThdIXM7zH9FCUj1N8hPe9v1azr2O0gA",
)
DEFAULT_SCRIPT_URL = os.getenv("RESTAURANT_SCRIPT_URL", "")

SHEET_EXPORT_BASE = "https://docs.google.com/spreadsheets/d/"
SHEET_EXPORT_SUFFIX = "/export?format=csv"
SHEET_ID_PATTERNS = (
    r"/spreadsheets/d/([a-zA-Z0-9\-_]+)",
    r"/d/([a-zA-Z0-9\-_]+)",
)

HTTP_TIMEOUT_SECONDS = float(os.getenv("RESTAURANT_HTTP_TIMEOUT", "30"))

# ---------------------------------------------------------------------------
# Local cache of the last successful fetch
# ---------------------------------------------------------------------------
CACHE_FILE = Path(
    os.getenv(
        "RESTAURANT_CACHE_FILE",
        str(Path.home() / ".restaurant_dashboard" / "sales_cache.json"),
    )
)
CACHE_RECORDS_KEY = "restaurant_sales_data"
CACHE_TIMESTAMP_KEY = "restaurant_sales_last_updated"

# ---------------------------------------------------------------------------
# Time-of-day rules
# ---------------------------------------------------------------------------
# Inclusive hour ranges flagged as peak regardless of observed volume
PEAK_HOUR_WINDOWS: tuple[tuple[int, int], ...] = ((12, 14), (19, 21))

# Half-open [start, end) hour ranges for the time-slot filter
TIME_SLOT_WINDOWS: dict[str, tuple[int, int]] = {
    "morning": (6, 12),
    "lunch": (12, 16),
    "dinner": (19, 23),
}

# ---------------------------------------------------------------------------
# Rankings and insights
# ---------------------------------------------------------------------------
TOP_BOTTOM_SIZE = 5
TOP_SELLER_SHARE_PCT = 20.0
SLOW_MOVER_SHARE_PCT = 3.0
SLOW_MOVER_MIN_ITEMS = 3
STAFFING_HOURS = 2
MAX_INSIGHTS = 3

# ---------------------------------------------------------------------------
# Executive report
# ---------------------------------------------------------------------------
MONTHLY_REPORT_MIN_RECORDS = 50
STRONG_DAY_CHANGE_PCT = 10.0
SLOW_DAY_CHANGE_PCT = -15.0
REVENUE_TREND_CHANGE_PCT = 5.0
PERFORMANCE_BAND_PCT = 10.0

STOCK_UP_MIN_QUANTITY = 10
RUN_OFFER_MAX_QUANTITY = 3
EXTRA_STAFF_BILL_MULTIPLE = 5
MAX_ACTIONS = 3

CURRENCY_SYMBOL = "₹"
NOT_AVAILABLE = "N/A"
