"""
In-memory holder for the session's record collection.

Loading is two-phase: ``warm_start()`` paints from the local cache, then
``refresh()`` reconciles with the remote sheet. The collection is only ever
replaced wholesale; a failed refresh leaves it untouched.
"""

import datetime as dt
import logging
from pathlib import Path

from .cache import load_cached_records, save_cached_records
from .config import CACHE_FILE
from .errors import RecordParseError, SheetFetchError
from .loaders import fetch_sheet_records
from .models import OrderRecord

logger = logging.getLogger(__name__)


class RecordStore:
    """Current record set plus where and when it came from."""

    def __init__(self, cache_path: Path = CACHE_FILE, fetch=fetch_sheet_records):
        self.cache_path = cache_path
        self._fetch = fetch
        self.records: list[OrderRecord] = []
        self.last_updated: dt.datetime | None = None
        self.source: str | None = None
        self.error: str | None = None
        self.from_cache = False

    @property
    def loaded(self) -> bool:
        return self.last_updated is not None

    def warm_start(self) -> bool:
        """Populate from the cache. Returns True on a cache hit."""
        cached = load_cached_records(self.cache_path)
        if cached is None:
            return False

        self.records = cached.records
        self.last_updated = cached.fetched_at
        self.source = "cache"
        self.from_cache = True
        return True

    def refresh(self, sheet_url: str) -> bool:
        """Fetch the sheet and replace the records. Returns True on success.

        On failure the previous records are kept and ``error`` carries a
        message suitable for a banner.
        """
        try:
            records = self._fetch(sheet_url)
        except (SheetFetchError, RecordParseError) as exc:
            logger.warning("Refresh from %s failed: %s", sheet_url, exc)
            self.error = str(exc)
            return False

        self.load_records(records, source=sheet_url)
        save_cached_records(self.records, self.last_updated, self.cache_path)
        return True

    def load_records(self, records: list[OrderRecord], source: str) -> None:
        """Replace the collection from any source (sheet, upload, demo data)."""
        self.records = list(records)
        self.last_updated = dt.datetime.now()
        self.source = source
        self.error = None
        self.from_cache = False
        logger.info("Loaded %d records from %s", len(self.records), source)
