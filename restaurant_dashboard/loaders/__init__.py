"""Data ingestion loaders for restaurant order sources."""

from .orders import load_records_from_csv, load_records_from_excel
from .orders import parse_csv_text, records_from_rows
from .sheets import fetch_sheet_csv, fetch_sheet_records
from .sheets import get_sheet_csv_url, is_valid_sheet_url

__all__ = [
    "load_records_from_csv",
    "load_records_from_excel",
    "parse_csv_text",
    "records_from_rows",
    "fetch_sheet_csv",
    "fetch_sheet_records",
    "get_sheet_csv_url",
    "is_valid_sheet_url",
]
