"""
HTTP forwarding endpoint for new order entries.

Run with:  uvicorn restaurant_dashboard.api:app
"""

import logging
from typing import Any

from fastapi import APIRouter, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .gateway import forward_entry

logger = logging.getLogger(__name__)

router = APIRouter(tags=["entries"])


class AddEntryRequest(BaseModel):
    scriptUrl: str | None = Field(default=None, description="Google Apps Script web-app URL")
    data: dict[str, Any] = Field(default_factory=dict, description="One order line item keyed by sheet column")


@router.post("/api/add-entry")
def add_entry(request: AddEntryRequest) -> JSONResponse:
    """
    Forward one new order line item to the sheet's Apps Script endpoint.
    """

    status_code, body = forward_entry(request.model_dump())
    if status_code != 200:
        logger.warning("add-entry failed with %d: %s", status_code, body.get("error"))
    return JSONResponse(status_code=status_code, content=body)


app = FastAPI(title="Restaurant Sales Dashboard API")
app.include_router(router)
