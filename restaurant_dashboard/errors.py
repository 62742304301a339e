"""
Exception types raised by the loaders and the write gateway.

Row-level problems in the source data are never raised; they are coerced to
defaults and filtered out during ingestion.
"""


class DashboardError(Exception):
    """Base class for all dashboard errors."""


class SheetFetchError(DashboardError):
    """The record source was unreachable or answered with a non-success status."""

    def __init__(self, message: str, url: str = "", status_code: int | None = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class RecordParseError(DashboardError):
    """Source content could not be tokenized into rows."""


class EntryValidationError(DashboardError):
    """A new-entry form was rejected before submission."""


class MissingScriptUrlError(DashboardError):
    """No write endpoint is configured."""


class EntrySubmitError(DashboardError):
    """The write endpoint rejected or failed to process a new entry."""
