"""
Alerts API Router
Serves the latest live alert and the recent alert history

Both endpoints answer from memory (the poller's latest slot and the
history cache) and never fail because of the store: the worst case is a
``null`` alert or an empty history.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from oref_api.dependencies import get_query_service
from oref_core import AlertQueryService

logger = logging.getLogger(__name__)

router = APIRouter()

NO_STORE_HEADERS = {"Cache-Control": "no-store"}


class AlertJSONResponse(JSONResponse):
    media_type = "application/json; charset=utf-8"


@router.get("/alerts", response_class=AlertJSONResponse)
def get_latest_alert(service: AlertQueryService = Depends(get_query_service)):
    """
    Get the alert currently active on the feed.

    Returns the most recent new alert seen by the poller, or ``null`` when
    none has been seen since startup.
    """
    payload = service.get_latest()
    content = payload.model_dump(mode="json", by_alias=True) if payload is not None else None
    return AlertJSONResponse(content=content, headers=NO_STORE_HEADERS)


@router.get("/history", response_class=AlertJSONResponse)
def get_alert_history(service: AlertQueryService = Depends(get_query_service)):
    """
    Get recent alert history, newest first (at most 200 entries).
    """
    content = [view.model_dump(mode="json", by_alias=True) for view in service.get_history()]
    return AlertJSONResponse(content=content, headers=NO_STORE_HEADERS)
