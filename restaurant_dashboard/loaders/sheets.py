"""
Remote record source: a shared Google Sheet read through its CSV export.

Each fetch is a single GET with no retry; callers decide how to surface a
failure.
"""

import logging
import re

import requests

from ..config import (
    HTTP_TIMEOUT_SECONDS,
    SHEET_EXPORT_BASE,
    SHEET_EXPORT_SUFFIX,
    SHEET_ID_PATTERNS,
)
from ..errors import SheetFetchError
from ..models import OrderRecord
from .orders import parse_csv_text

logger = logging.getLogger(__name__)

_SHEET_URL_RE = re.compile(r"^https://docs\.google\.com/spreadsheets/d/[a-zA-Z0-9\-_]+")
_SHEET_ID_RE = re.compile(r"^[a-zA-Z0-9\-_]{25,}$")


def get_sheet_csv_url(sheet_url: str) -> str:
    """Convert a sheet URL (or bare document id) into its CSV export URL."""
    sheet_url = sheet_url.strip()
    for pattern in SHEET_ID_PATTERNS:
        match = re.search(pattern, sheet_url)
        if match:
            return f"{SHEET_EXPORT_BASE}{match.group(1)}{SHEET_EXPORT_SUFFIX}"

    if "export?format=csv" in sheet_url:
        return sheet_url

    return f"{SHEET_EXPORT_BASE}{sheet_url}{SHEET_EXPORT_SUFFIX}"


def is_valid_sheet_url(url: str) -> bool:
    """True for a Google Sheets URL or something shaped like a document id."""
    if not url:
        return False
    url = url.strip()
    return bool(_SHEET_URL_RE.match(url) or _SHEET_ID_RE.match(url))


def fetch_sheet_csv(sheet_url: str) -> str:
    """Download the raw CSV export of a sheet.

    Raises
    ------
    SheetFetchError
        On any transport failure or non-success HTTP status.
    """
    csv_url = get_sheet_csv_url(sheet_url)
    logger.info("Fetching sheet export: %s", csv_url)

    try:
        response = requests.get(csv_url, timeout=HTTP_TIMEOUT_SECONDS)
    except requests.RequestException as exc:
        logger.warning("Sheet fetch failed: %s", exc)
        raise SheetFetchError(f"Failed to fetch sheet: {exc}", url=csv_url) from exc

    if not response.ok:
        logger.warning("Sheet fetch returned HTTP %s", response.status_code)
        raise SheetFetchError(
            f"Failed to fetch sheet: {response.status_code} {response.reason}",
            url=csv_url,
            status_code=response.status_code,
        )

    return response.content.decode("utf-8-sig", errors="replace")


def fetch_sheet_records(sheet_url: str) -> list[OrderRecord]:
    """Fetch a sheet and parse it into OrderRecords."""
    return parse_csv_text(fetch_sheet_csv(sheet_url))
