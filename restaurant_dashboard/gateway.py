"""
Write side of the remote data gateway: build a new order line item and
forward it to the sheet's Apps Script endpoint.

Submissions are best-effort. There is no retry and no idempotency key;
a failure is reported back to the caller, who may resubmit by hand.
"""

import datetime as dt
import logging
from typing import Any

import requests

from .config import DATE_FORMAT, HTTP_TIMEOUT_SECONDS, TIME_FORMAT
from .errors import EntrySubmitError, EntryValidationError, MissingScriptUrlError

logger = logging.getLogger(__name__)

MISSING_SCRIPT_URL_MESSAGE = "Missing Google Apps Script URL"


def build_entry(
    item_name: str,
    category: str,
    quantity: int,
    unit_price: float,
    date: str | None = None,
    time: str | None = None,
    order_id: str | None = None,
    now: dt.datetime | None = None,
) -> dict[str, Any]:
    """Assemble a new-entry payload keyed by sheet column.

    Date, time and order id default from ``now``; Total_Amount is always
    quantity x unit price.
    """
    now = now or dt.datetime.now()
    epoch_ms = str(int(now.timestamp() * 1000))

    return {
        "Date": date or now.strftime(DATE_FORMAT),
        "Time": time or now.strftime(TIME_FORMAT),
        "Order_ID": order_id or f"ORD-{epoch_ms[-6:]}",
        "Item_Name": item_name,
        "Category": category,
        "Quantity": quantity,
        "Unit_Price": unit_price,
        "Total_Amount": quantity * unit_price,
    }


def validate_entry(entry: dict[str, Any]) -> None:
    if not str(entry.get("Item_Name", "")).strip():
        raise EntryValidationError("Please enter an item name")


def submit_entry(script_url: str, entry: dict[str, Any]) -> str:
    """POST one entry to the Apps Script endpoint and return its message.

    Raises
    ------
    MissingScriptUrlError
        If no script URL is configured; nothing is sent.
    EntrySubmitError
        On transport failure, a non-JSON reply, or any result other than
        "success".
    """
    if not script_url:
        raise MissingScriptUrlError(MISSING_SCRIPT_URL_MESSAGE)

    try:
        response = requests.post(script_url, json=entry, timeout=HTTP_TIMEOUT_SECONDS)
    except requests.RequestException as exc:
        logger.warning("Entry submission failed: %s", exc)
        raise EntrySubmitError(str(exc) or "Internal server error") from exc

    try:
        result = response.json()
    except ValueError as exc:
        logger.warning("Entry endpoint returned non-JSON reply")
        raise EntrySubmitError("Invalid response from Apps Script") from exc

    if isinstance(result, dict) and result.get("result") == "success":
        message = result.get("message") or "Entry added"
        logger.info("Entry %s submitted: %s", entry.get("Order_ID"), message)
        return message

    message = result.get("message") if isinstance(result, dict) else None
    logger.warning("Entry endpoint rejected submission: %s", message)
    raise EntrySubmitError(message or "Failed to update sheet")


def forward_entry(payload: dict[str, Any]) -> tuple[int, dict[str, Any]]:
    """Forwarding-endpoint semantics for a ``{scriptUrl, data}`` request body.

    Returns
    -------
    (status_code, body):
        200, {"success": True, "message": ...}
        400, {"error": "Missing Google Apps Script URL"}
        500, {"error": ...}
    """
    script_url = payload.get("scriptUrl")
    if not script_url:
        return 400, {"error": MISSING_SCRIPT_URL_MESSAGE}

    try:
        message = submit_entry(script_url, payload.get("data") or {})
    except EntrySubmitError as exc:
        return 500, {"error": str(exc) or "Internal server error"}

    return 200, {"success": True, "message": message}
