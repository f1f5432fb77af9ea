"""
Oref Relay - Civil Alert Relay
Copyright (c) 2025 Timothy Kramer (KR8MER)

This file is part of Oref Relay.

Oref Relay is dual-licensed software:
- GNU Affero General Public License v3 (AGPL-3.0) for open-source use
- Commercial License for proprietary use

You should have received a copy of both licenses with this software.
For more information, see LICENSE and LICENSE-COMMERCIAL files.

IMPORTANT: This software cannot be rebranded or have attribution removed.
See NOTICE file for complete terms.
"""

"""Read side consumed by the HTTP layer: latest alert and history."""

import threading
from typing import List, Optional

from .alerts import AlertPayload, AlertView
from .history import HistoryCache


class LatestAlert:
    """Single slot holding the most recently accepted alert.

    Written only by the poller; read by any number of request handlers.
    Payloads are immutable, so publishing a new one is a reference swap
    under the lock.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._payload: Optional[AlertPayload] = None

    def get(self) -> Optional[AlertPayload]:
        with self._lock:
            return self._payload

    def set(self, payload: Optional[AlertPayload]) -> None:
        with self._lock:
            self._payload = payload


class AlertQueryService:
    """Side-effect free reads for the alert endpoints."""

    def __init__(self, latest: LatestAlert, history: HistoryCache):
        self.latest = latest
        self.history = history

    def get_latest(self) -> Optional[AlertPayload]:
        return self.latest.get()

    def get_history(self) -> List[AlertView]:
        return self.history.get()
