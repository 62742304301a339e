"""
Loader for order line items from delimited text or an Excel workbook.

The source is the sheet's CSV export: a header row with the columns in
config.EXPECTED_COLUMNS followed by one row per order line item. Column
matching is exact and case-sensitive; unknown columns are ignored and
missing ones fall back to empty strings or zero.
"""

import csv
import io
import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any, BinaryIO

import openpyxl
import pandas as pd

from ..config import EXPECTED_COLUMNS
from ..errors import RecordParseError
from ..models import OrderRecord
from .utils import cell_to_text, clean_text, find_header_row, safe_float, safe_int

logger = logging.getLogger(__name__)


def records_from_rows(rows: Iterable[Mapping[str, Any]]) -> list[OrderRecord]:
    """Coerce raw column-keyed rows into OrderRecords.

    A row is kept only if it has a non-empty Order_ID and a strictly
    positive Total_Amount. Every other malformed field is defaulted.
    """
    records = []
    dropped = 0

    for row in rows:
        record = OrderRecord(
            date=clean_text(row.get("Date")),
            time=clean_text(row.get("Time")),
            order_id=clean_text(row.get("Order_ID")),
            item_name=clean_text(row.get("Item_Name")),
            category=clean_text(row.get("Category")),
            quantity=safe_int(row.get("Quantity")),
            unit_price=safe_float(row.get("Unit_Price")),
            total_amount=safe_float(row.get("Total_Amount")),
        )
        if record.order_id and record.total_amount > 0:
            records.append(record)
        else:
            dropped += 1

    if dropped:
        logger.info("Dropped %d rows without an order id or positive total", dropped)
    return records


def _trim_long_line(bad_line: list[str]) -> list[str]:
    """Keep a row with surplus fields; pandas drops the fields past the header."""
    logger.warning("Ignoring extra fields in row: %s", bad_line)
    return bad_line


def parse_csv_text(text: str) -> list[OrderRecord]:
    """Parse CSV text with a header row into OrderRecords.

    Raises
    ------
    RecordParseError
        If the text is empty or cannot be tokenized into rows.
    """
    if not text or not text.strip():
        raise RecordParseError("No data: the source is empty")

    try:
        df = pd.read_csv(
            io.StringIO(text),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            engine="python",
            index_col=False,
            on_bad_lines=_trim_long_line,
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError, csv.Error) as exc:
        raise RecordParseError(f"Could not parse CSV data: {exc}") from exc

    missing = [c for c in EXPECTED_COLUMNS if c not in df.columns]
    if len(missing) == len(EXPECTED_COLUMNS):
        logger.warning("None of the expected columns found in header: %s", list(df.columns))
    elif missing:
        logger.warning("Missing columns default to empty values: %s", missing)

    records = records_from_rows(df.to_dict("records"))
    logger.info("Parsed %d order records from %d rows", len(records), len(df))
    return records


def load_records_from_csv(path: str | Path) -> list[OrderRecord]:
    """Load OrderRecords from a CSV file on disk."""
    try:
        text = Path(path).read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as exc:
        raise RecordParseError(f"File is not UTF-8 delimited text: {path}") from exc
    return parse_csv_text(text)


def load_records_from_excel(path: str | Path | BinaryIO, sheet_name: str | None = None) -> list[OrderRecord]:
    """Load OrderRecords from an Excel workbook (path or binary file object).

    Assumptions
    -----------
    - The header row carrying the expected column names sits within the
      first 20 rows; anything above it (titles, notes) is ignored.
    - Date cells may be real dates; they are normalised to DD-MM-YYYY.
    - Time cells may be real times; they are normalised to HH:MM.
    """
    try:
        wb = openpyxl.load_workbook(path, data_only=True)
    except Exception as exc:
        logger.exception("Failed to open workbook: %s", path)
        raise RecordParseError(f"Could not open workbook: {path}") from exc

    try:
        if sheet_name is None:
            ws = wb.worksheets[0]
        elif sheet_name in wb.sheetnames:
            ws = wb[sheet_name]
        else:
            ws = wb.worksheets[0]
            logger.warning("Sheet '%s' not found, using '%s'", sheet_name, ws.title)

        header_idx = find_header_row(ws, set(EXPECTED_COLUMNS))
        if header_idx is None:
            raise RecordParseError(f"No header row with the expected columns in '{ws.title}'")

        header_cells = next(ws.iter_rows(min_row=header_idx, max_row=header_idx, values_only=True))
        headers = [cell_to_text(c) for c in header_cells]

        rows = []
        for values in ws.iter_rows(min_row=header_idx + 1, values_only=True):
            if all(v is None for v in values):
                continue
            rows.append({
                header: cell_to_text(value)
                for header, value in zip(headers, values)
                if header
            })
    finally:
        wb.close()

    records = records_from_rows(rows)
    logger.info("Loaded %d order records from %s", len(records), path)
    return records
