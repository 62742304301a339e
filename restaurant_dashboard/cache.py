"""
Best-effort local cache of the last successfully fetched record set.

The cache is a single JSON file with two keys: the serialised records and
the ISO 8601 fetch timestamp. A missing or corrupt file is a cache miss;
a failed write is logged and otherwise ignored.
"""

import datetime as dt
import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from .config import CACHE_FILE, CACHE_RECORDS_KEY, CACHE_TIMESTAMP_KEY
from .models import OrderRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CachedRecords:
    records: list[OrderRecord]
    fetched_at: dt.datetime


def save_cached_records(
    records: Sequence[OrderRecord],
    fetched_at: dt.datetime,
    path: Path = CACHE_FILE,
) -> bool:
    """Write records and their fetch time to the cache file. Returns success."""
    payload = {
        CACHE_RECORDS_KEY: [r.to_dict() for r in records],
        CACHE_TIMESTAMP_KEY: fetched_at.isoformat(),
    }
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload), encoding="utf-8")
    except OSError as exc:
        logger.warning("Could not write cache %s: %s", path, exc)
        return False

    logger.info("Cached %d records at %s", len(records), path)
    return True


def load_cached_records(path: Path = CACHE_FILE) -> CachedRecords | None:
    """Read the cache file, or None on a miss (absent, unreadable or corrupt)."""
    if not path.exists():
        return None

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
        records = [OrderRecord.from_dict(item) for item in payload[CACHE_RECORDS_KEY]]
        fetched_at = dt.datetime.fromisoformat(payload[CACHE_TIMESTAMP_KEY])
    except (OSError, ValueError, KeyError, TypeError) as exc:
        logger.warning("Ignoring unreadable cache %s: %s", path, exc)
        return None

    logger.info("Loaded %d cached records from %s", len(records), path)
    return CachedRecords(records=records, fetched_at=fetched_at)


def clear_cache(path: Path = CACHE_FILE) -> None:
    path.unlink(missing_ok=True)
