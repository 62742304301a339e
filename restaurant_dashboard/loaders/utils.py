"""
Shared utilities for data ingestion: lenient numeric coercion, date and hour
parsing, spreadsheet cell normalisation.
"""

import datetime as dt
import logging
import math
import re
from typing import Any

import pandas as pd

from ..config import DATE_FORMAT, TIME_FORMAT

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_LEADING_FLOAT = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def clean_text(val: Any) -> str:
    """Return a stripped string, or "" for None / NaN."""
    if val is None:
        return ""
    if isinstance(val, float) and math.isnan(val):
        return ""
    return str(val).strip()


def safe_int(val: Any) -> int:
    """Coerce a value to int using its leading digits, 0 when there are none.

    "3 pcs" -> 3, "2.9" -> 2, "abc" -> 0.
    """
    if isinstance(val, bool):
        return int(val)
    if isinstance(val, int):
        return val
    if isinstance(val, float):
        return 0 if math.isnan(val) or math.isinf(val) else int(val)
    match = _LEADING_INT.match(clean_text(val))
    if not match:
        return 0
    return int(match.group(1))


def safe_float(val: Any) -> float:
    """Coerce a value to float using its leading number.

    0.0 when there is none, or when the value is NaN or infinite ("1e999").
    """
    if isinstance(val, (int, float)) and not isinstance(val, bool):
        val = float(val)
    else:
        match = _LEADING_FLOAT.match(clean_text(val))
        if not match:
            return 0.0
        val = float(match.group(1))
    return val if math.isfinite(val) else 0.0


def parse_order_date(text: str) -> dt.date | None:
    """Parse a day-month-year date string. Returns None for unparseable values."""
    ts = pd.to_datetime(clean_text(text), format=DATE_FORMAT, errors="coerce")
    if pd.isna(ts):
        return None
    return ts.date()


def date_sort_key(text: str) -> tuple[int, dt.date]:
    """Calendar ordering key; unparseable dates sort before every valid one."""
    parsed = parse_order_date(text)
    if parsed is None:
        return (0, dt.date.min)
    return (1, parsed)


def parse_hour(text: str) -> int | None:
    """Return the integer hour from an "HH:MM" string, or None."""
    head = clean_text(text).split(":")[0]
    match = _LEADING_INT.match(head)
    if not match:
        return None
    return int(match.group(1))


def cell_to_text(val: Any) -> str:
    """Normalise an openpyxl cell value to the text form used by the sheet export.

    Dates become DD-MM-YYYY, times HH:MM, and integral floats lose their
    trailing ".0" so order ids typed as numbers survive.
    """
    if val is None:
        return ""
    if isinstance(val, dt.datetime):
        # Time-only cells come back anchored to the Excel epoch
        if val.date() == dt.date(1899, 12, 30):
            return val.strftime(TIME_FORMAT)
        return val.strftime(DATE_FORMAT)
    if isinstance(val, dt.date):
        return val.strftime(DATE_FORMAT)
    if isinstance(val, dt.time):
        return val.strftime(TIME_FORMAT)
    if isinstance(val, float) and val.is_integer():
        return str(int(val))
    return str(val).strip()


def find_header_row(
    sheet,
    signature: set[str],
    max_rows: int = 20,
) -> int | None:
    """Scan an openpyxl sheet for the row containing signature strings.

    Returns the 1-based row index where at least two cells match values
    in `signature`, or None if not found within `max_rows`.
    """
    for row_idx, row in enumerate(sheet.iter_rows(max_row=max_rows, values_only=True), start=1):
        matches = sum(1 for val in row if val is not None and str(val).strip() in signature)
        if matches >= 2:
            return row_idx
    return None
