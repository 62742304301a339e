"""
CSV export of the current record set, in the same 8-column layout the
loaders read.
"""

import datetime as dt
import logging
from collections.abc import Sequence

import pandas as pd

from .config import EXPECTED_COLUMNS
from .models import OrderRecord

logger = logging.getLogger(__name__)


def records_to_csv(records: Sequence[OrderRecord]) -> str:
    """Serialise records to CSV text with the fixed header row."""
    df = pd.DataFrame([r.to_row() for r in records], columns=list(EXPECTED_COLUMNS))
    text = df.to_csv(index=False, lineterminator="\n")
    logger.info("Exported %d records to CSV", len(df))
    return text


def export_filename(today: dt.date | None = None) -> str:
    """Download name stamped with the current date: sales_data_YYYY-MM-DD.csv."""
    today = today or dt.date.today()
    return f"sales_data_{today.isoformat()}.csv"
