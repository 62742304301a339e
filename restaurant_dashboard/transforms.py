"""
Data transforms: the record -> DataFrame bridge and the filter pipeline.

The three filters are independent conjunctive predicates, so the order in
which they are applied does not change the result. Date windows are
relative to the dates present in the data, not to the wall clock.
"""

import logging
from collections.abc import Sequence

import pandas as pd

from .config import TIME_SLOT_WINDOWS
from .loaders.utils import date_sort_key, parse_hour, parse_order_date
from .models import DateRange, FilterState, OrderRecord, TimeSlot

logger = logging.getLogger(__name__)

FRAME_COLUMNS = [
    "date",
    "time",
    "order_id",
    "item_name",
    "category",
    "quantity",
    "unit_price",
    "total_amount",
]


def records_to_frame(records: Sequence[OrderRecord]) -> pd.DataFrame:
    """Build a DataFrame with one row per record and a fixed column set.

    Adds an ``hour`` column (nullable Int64) parsed from ``time``.
    """
    df = pd.DataFrame([r.to_dict() for r in records], columns=FRAME_COLUMNS)
    df["quantity"] = df["quantity"].astype("int64")
    df["unit_price"] = df["unit_price"].astype("float64")
    df["total_amount"] = df["total_amount"].astype("float64")
    df["hour"] = pd.array([parse_hour(t) for t in df["time"]], dtype="Int64")
    return df


def sorted_unique_dates(records: Sequence[OrderRecord]) -> list[str]:
    """Distinct date strings in true calendar order (ascending)."""
    return sorted({r.date for r in records}, key=date_sort_key)


def filter_by_date_range(
    records: Sequence[OrderRecord],
    date_range: DateRange | str,
) -> list[OrderRecord]:
    """Narrow records to a window anchored on the most recent date present.

    - today:     the latest date present
    - yesterday: the second-latest date present (latest if only one)
    - last7days: the 7 latest distinct dates present
    - thismonth: same month and year as the latest date present
    - all:       no filtering
    """
    date_range = DateRange(date_range)
    if date_range is DateRange.ALL:
        return list(records)

    dates = sorted_unique_dates(records)
    if not dates:
        return []

    latest = dates[-1]

    if date_range is DateRange.TODAY:
        keep = {latest}
    elif date_range is DateRange.YESTERDAY:
        keep = {dates[-2] if len(dates) > 1 else latest}
    elif date_range is DateRange.LAST_7_DAYS:
        keep = set(dates[-7:])
    else:  # THIS_MONTH
        latest_parsed = parse_order_date(latest)
        if latest_parsed is None:
            return []
        keep = set()
        for d in dates:
            parsed = parse_order_date(d)
            if parsed is not None and (parsed.month, parsed.year) == (latest_parsed.month, latest_parsed.year):
                keep.add(d)

    return [r for r in records if r.date in keep]


def filter_by_category(records: Sequence[OrderRecord], category: str) -> list[OrderRecord]:
    """Exact category match; "all" (or empty) passes everything through."""
    if not category or category == "all":
        return list(records)
    return [r for r in records if r.category == category]


def filter_by_time_slot(
    records: Sequence[OrderRecord],
    slot: TimeSlot | str,
) -> list[OrderRecord]:
    """Keep records whose hour falls in the slot's [start, end) window.

    Records with an unparseable time only survive the "all" slot.
    """
    slot = TimeSlot(slot)
    if slot is TimeSlot.ALL:
        return list(records)

    start, end = TIME_SLOT_WINDOWS[slot.value]
    result = []
    for r in records:
        hour = parse_hour(r.time)
        if hour is not None and start <= hour < end:
            result.append(r)
    return result


def apply_filters(records: Sequence[OrderRecord], state: FilterState) -> list[OrderRecord]:
    """Run date -> category -> time-slot filters in sequence."""
    filtered = filter_by_date_range(records, state.date_range)
    filtered = filter_by_category(filtered, state.category)
    filtered = filter_by_time_slot(filtered, state.time_slot)
    logger.debug("Filters %s kept %d of %d records", state, len(filtered), len(records))
    return filtered


def get_unique_categories(records: Sequence[OrderRecord]) -> list[str]:
    """Sorted list of distinct categories for UI dropdowns."""
    return sorted({r.category for r in records})
