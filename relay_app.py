#!/usr/bin/env python3
"""
Oref Relay - FastAPI Application

Polls the Home Front Command civil alert feed in a background thread and
serves the latest alert and recent history to the web UI.

Endpoints:
- GET /api/alerts   latest alert, or null
- GET /api/history  up to 200 recent alerts, newest first
- GET /health       store / poller health
- /                 static front-end bundle (when STATIC_DIR exists)
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from oref_api import __version__
from oref_api.config import Settings, get_settings
from oref_api.routers import alerts, system
from oref_core import (
    AlertQueryService,
    AlertStore,
    HistoryCache,
    LatestAlert,
    SQLAlchemyAlertStore,
    connect_store,
)
from oref_utils import set_display_timezone
from poller import FeedClient, OrefPoller

# Load environment variables
load_dotenv(override=True)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[AlertStore] = None,
    feed: Optional[FeedClient] = None,
    start_poller: Optional[bool] = None,
) -> FastAPI:
    """Build the application.

    ``store`` and ``feed`` replace the PostgreSQL store and the live feed
    client (tests pass in-memory fakes). ``start_poller`` overrides the
    ``POLLER_ENABLED`` setting.
    """
    settings = settings or get_settings()
    logging.getLogger().setLevel(settings.log_level.upper())

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator:
        # Startup
        logger.info("Starting Oref Relay...")
        logger.info(f"Environment: {settings.environment}")
        set_display_timezone(settings.display_timezone)

        engine = None
        alert_store = store
        if alert_store is None:
            # Raises StoreUnavailableError: no serving without a working store
            engine = connect_store(settings.database_url, connect_timeout=settings.store_connect_timeout_sec)
            alert_store = SQLAlchemyAlertStore(
                engine,
                insert_timeout=settings.store_insert_timeout_sec,
                query_timeout=settings.store_query_timeout_sec,
            )

        feed_client = feed or FeedClient(settings.oref_feed_url, timeout=settings.feed_timeout_sec)
        history = HistoryCache(alert_store, limit=settings.history_limit)
        latest = LatestAlert()
        poller = OrefPoller(feed_client, alert_store, history, latest, interval=settings.poll_interval_sec)

        app.state.settings = settings
        app.state.store = alert_store
        app.state.poller = poller
        app.state.query_service = AlertQueryService(latest, history)
        app.state.poller_expected = settings.poller_enabled if start_poller is None else start_poller

        if app.state.poller_expected:
            poller.start()
        else:
            logger.info("Background polling disabled")

        yield

        # Shutdown
        logger.info("Shutting down Oref Relay...")
        poller.stop()
        if feed is None:
            feed_client.close()
        if engine is not None:
            engine.dispose()
            logger.info("Database connections closed")

    app = FastAPI(
        title="Oref Relay API",
        description="Latest civil alert and recent alert history",
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
        lifespan=lifespan,
        debug=settings.debug,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.cors_origin],
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
    )

    app.include_router(alerts.router, prefix="/api", tags=["Alerts"])
    app.include_router(system.router, tags=["System"])

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler for unhandled errors"""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "detail": str(exc) if settings.debug else "An error occurred"
            }
        )

    # Mounted last so the API routes take precedence
    static_dir = Path(settings.static_dir)
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=str(static_dir), html=True), name="ui")
    else:
        logger.info("Static UI directory %s not found; serving API only", static_dir)

    return app


app = create_app()


def main() -> None:
    import uvicorn

    settings = get_settings()
    host, port = settings.bind
    logger.info(f"Serving at http://{host}:{port}")
    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


if __name__ == "__main__":
    main()
