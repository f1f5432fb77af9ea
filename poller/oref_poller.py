#!/usr/bin/env python3
"""
Oref Civil Alert Poller
Polls the Home Front Command alerts feed once per second and records each new alert

Per tick:
1. Fetch the feed (4 second timeout, fixed browser-like headers)
2. Parse the body; empty / ``null`` / malformed bodies mean "no alert"
3. Skip the alert if its identifier matches the last one seen
4. Otherwise publish it as the latest alert, store it and prepend it to the history cache

Ticks never overlap and missed ticks are not queued: a slow tick only
delays the next one. Feed and store failures are logged and the loop moves
on to the next tick.

The last-seen identifier lives in memory only. After a restart the alert
that is active at that moment is processed once more; the store's unique
identifier index turns that second insert into a no-op.

Database Configuration (via environment variables or --database-url):
  DATABASE_URL or POSTGRES_* - see oref_core.database
"""

import argparse
import json
import logging
import os
import sys
import threading
import time
from typing import Any, Dict, Optional

import certifi
import requests
from dotenv import load_dotenv

from oref_core import (
    AlertRecord,
    AlertStore,
    AlertView,
    HistoryCache,
    LatestAlert,
    SQLAlchemyAlertStore,
    StoreError,
    build_database_url_from_env,
    connect_store,
)
from oref_core.alerts import AlertPayload
from oref_utils import utc_now

from .payload import parse_payload

logger = logging.getLogger(__name__)

OREF_ALERTS_URL = "https://www.oref.org.il/WarningMessages/alert/alerts.json"
DEFAULT_POLL_INTERVAL = 1.0
DEFAULT_FEED_TIMEOUT = 4.0

FEED_HEADERS = {
    "Referer": "https://www.oref.org.il/",
    "X-Requested-With": "XMLHttpRequest",
    "User-Agent": "Mozilla/5.0",
    "Accept": "application/json",
}


class FeedError(Exception):
    """The feed could not be fetched this tick."""


class FeedClient:
    """HTTP client for the alerts feed; one GET per call, no retries."""

    def __init__(
        self,
        url: str = OREF_ALERTS_URL,
        timeout: float = DEFAULT_FEED_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(FEED_HEADERS)

        ca_bundle_override = os.getenv("REQUESTS_CA_BUNDLE") or os.getenv("OREF_CA_BUNDLE")
        if ca_bundle_override:
            logger.debug("Using custom CA bundle for feed polling: %s", ca_bundle_override)
            self.session.verify = ca_bundle_override
        elif session is None:
            self.session.verify = certifi.where()

    def fetch(self) -> bytes:
        """Return the raw response body.

        Raises:
            FeedError: transport failure, timeout or non-2xx status.
        """
        try:
            response = self.session.get(self.url, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as exc:
            raise FeedError(f"Error fetching {self.url}: {exc}") from exc
        return response.content

    def close(self) -> None:
        self.session.close()


class Deduplicator:
    """Remembers the last alert identifier and flags repeats of it."""

    def __init__(self) -> None:
        self._last_seen = ""

    @property
    def last_seen(self) -> str:
        return self._last_seen

    def observe(self, payload: AlertPayload) -> bool:
        """Return True when ``payload`` is a new alert.

        The identifier is recorded before the caller does anything else
        with the payload.
        """
        if payload.identifier == self._last_seen:
            return False
        self._last_seen = payload.identifier
        return True


class OrefPoller:
    """Background poll loop feeding the store, the history cache and the latest slot."""

    def __init__(
        self,
        feed: FeedClient,
        store: AlertStore,
        history: HistoryCache,
        latest: LatestAlert,
        interval: float = DEFAULT_POLL_INTERVAL,
    ):
        self.feed = feed
        self.store = store
        self.history = history
        self.latest = latest
        self.interval = interval
        self.deduplicator = Deduplicator()

        self.ticks = 0
        self.last_stats: Optional[Dict[str, Any]] = None
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def poll_once(self) -> Dict[str, Any]:
        """Run a single tick and return its stats."""
        start = time.monotonic()
        stats: Dict[str, Any] = {
            "status": "EMPTY",
            "identifier": None,
            "stored": False,
            "error_message": None,
            "execution_time_ms": 0,
        }

        try:
            raw = self.feed.fetch()
        except FeedError as exc:
            logger.warning("Feed request failed: %s", exc)
            stats["status"] = "FEED_ERROR"
            stats["error_message"] = str(exc)
            return self._finish(stats, start)

        payload = parse_payload(raw)
        if payload is None:
            return self._finish(stats, start)

        stats["identifier"] = payload.identifier
        if not self.deduplicator.observe(payload):
            stats["status"] = "DUPLICATE"
            return self._finish(stats, start)

        stats["status"] = "NEW"
        logger.info("New alert: %s (%s, %d areas)", payload.identifier, payload.title, len(payload.lines))
        self.latest.set(payload)

        record = AlertRecord.from_payload(payload, received_at=utc_now())
        try:
            stats["stored"] = self.store.insert(record)
        except StoreError as exc:
            logger.error("Could not store alert %s: %s", record.identifier, exc)
            stats["status"] = "STORE_ERROR"
            stats["error_message"] = str(exc)

        # An already-stored identifier keeps its original received time in history
        if stats["stored"] or stats["status"] == "STORE_ERROR":
            self.history.push(AlertView.from_record(record))
        return self._finish(stats, start)

    def _finish(self, stats: Dict[str, Any], start: float) -> Dict[str, Any]:
        stats["execution_time_ms"] = int((time.monotonic() - start) * 1000)
        self.last_stats = stats
        return stats

    def run_forever(self, stop_event: Optional[threading.Event] = None) -> None:
        """Poll until ``stop()`` is called (or ``stop_event`` is set).

        Each tick is followed by a wait for whatever is left of the interval;
        the wait is interrupted immediately by ``stop()``.
        """
        stop_event = stop_event or self._stop_event
        logger.info("Polling %s every %.1f seconds", self.feed.url, self.interval)
        while not stop_event.is_set():
            started = time.monotonic()
            try:
                self.poll_once()
            except Exception as exc:
                logger.error("Unexpected error in poll tick: %s", exc, exc_info=True)
            self.ticks += 1

            remaining = self.interval - (time.monotonic() - started)
            if remaining > 0:
                stop_event.wait(remaining)
        logger.info("Poller stopped after %d ticks", self.ticks)

    def start(self) -> None:
        """Start the poll loop in a background thread."""
        if self.is_running:
            logger.warning("Poller is already running")
            return

        # Each run gets its own event so a lingering loop stays stopped
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self.run_forever, args=(self._stop_event,), name="oref-poller", daemon=True
        )
        self._thread.start()

    def stop(self, timeout: float = 10.0) -> None:
        """Ask the loop to exit and wait for the current tick to finish.

        A thread still busy after ``timeout`` stays attached, so ``start()``
        refuses to launch a second loop until it has exited.
        """
        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=timeout)
            if self._thread.is_alive():
                logger.warning("Poller thread did not exit within %.1f seconds", timeout)
                return
            self._thread = None


# =======================================================================================
# Main
# =======================================================================================

def main():
    load_dotenv(override=True)

    parser = argparse.ArgumentParser(description="Oref civil alert poller")
    parser.add_argument("--database-url", default=build_database_url_from_env(),
                        help="SQLAlchemy DB URL (defaults from env POSTGRES_* or DATABASE_URL)")
    parser.add_argument("--feed-url", default=os.getenv("OREF_FEED_URL", OREF_ALERTS_URL),
                        help="Alerts feed URL")
    parser.add_argument("--interval", type=float, default=float(os.getenv("POLL_INTERVAL_SEC", "1")),
                        help="Polling interval seconds (default: 1)")
    parser.add_argument("--timeout", type=float, default=float(os.getenv("FEED_TIMEOUT_SEC", "4")),
                        help="Feed request timeout seconds (default: 4)")
    parser.add_argument("--log-level", default=os.getenv("LOG_LEVEL", "INFO"),
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Logging level")
    parser.add_argument("--once", action="store_true", help="Run a single poll and print its stats")
    args = parser.parse_args()

    # Logging to stdout (container-friendly)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    engine = connect_store(args.database_url)
    store = SQLAlchemyAlertStore(engine)
    feed = FeedClient(args.feed_url, timeout=args.timeout)
    poller = OrefPoller(feed, store, HistoryCache(store), LatestAlert(), interval=args.interval)

    try:
        if args.once:
            print(json.dumps(poller.poll_once(), indent=2))
        else:
            try:
                poller.run_forever()
            except KeyboardInterrupt:
                logger.info("Received interrupt signal, shutting down")
    finally:
        feed.close()
        engine.dispose()


if __name__ == "__main__":
    main()
