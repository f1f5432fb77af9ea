"""
System API Router
Provides the health endpoint used by load balancers and container probes
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Request

from oref_api import __version__
from oref_api.schemas.system import HealthCheckResponse
from oref_core import StoreError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health", response_model=HealthCheckResponse)
def health_check(request: Request):
    """
    Report store reachability, poller liveness and cached history size.
    """
    state = request.app.state
    checks = {}
    stored_alerts = 0

    count = getattr(state.store, "count", None)
    if count is not None:
        try:
            stored_alerts = count()
            checks["store"] = True
        except StoreError as exc:
            logger.warning("Health check could not reach the store: %s", exc)
            checks["store"] = False

    poller = state.poller
    checks["poller"] = poller.is_running or not state.poller_expected

    all_healthy = all(checks.values())
    status = "healthy" if all_healthy else "degraded" if any(checks.values()) else "unhealthy"

    return HealthCheckResponse(
        status=status,
        version=__version__,
        timestamp=datetime.now(timezone.utc),
        checks=checks,
        history_size=len(state.query_service.history),
        stored_alerts=stored_alerts,
    )
