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

from __future__ import annotations

"""Bounded, newest-first in-memory mirror of recently stored alerts.

The cache serves history reads without touching the store once it holds
anything. When it is empty (process start, or after ``clear()``) the next
``get()`` loads the most recent records from the store. It never refreshes
itself on a timer; the poller is the only writer that keeps it current.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Iterator, List

from .alerts import AlertView
from .errors import StoreError
from .store import AlertStore

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 200


class ReadWriteLock:
    """Shared/exclusive lock: any number of readers, or one writer.

    Waiting writers block new readers so a steady stream of history reads
    cannot starve the poller. Not reentrant.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()


class HistoryCache:
    """Most-recent-first alert history capped at ``limit`` entries."""

    def __init__(self, store: AlertStore, limit: int = DEFAULT_HISTORY_LIMIT):
        if limit < 1:
            raise ValueError("History limit must be at least 1")
        self.store = store
        self.limit = limit
        self._entries: List[AlertView] = []
        self._lock = ReadWriteLock()

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._entries)

    def get(self) -> List[AlertView]:
        """Return a snapshot of the history, newest first.

        A store failure during the cold-start load yields an empty list and
        leaves the cache empty so the next call tries again.
        """
        with self._lock.read_locked():
            if self._entries:
                return list(self._entries)

        # Loading counts as a write: readers and the poller wait until the
        # buffer is fully replaced.
        with self._lock.write_locked():
            if self._entries:
                return list(self._entries)

            try:
                records = self.store.recent(self.limit)
            except StoreError as exc:
                logger.warning("Alert history unavailable: %s", exc)
                return []

            self._entries = [AlertView.from_record(record) for record in records[: self.limit]]
            if self._entries:
                logger.info("Loaded %d alerts into history cache", len(self._entries))
            return list(self._entries)

    def push(self, view: AlertView) -> None:
        """Prepend ``view``, dropping the oldest entries beyond the limit.

        An entry already cached under the same identifier is replaced so
        a cold load racing with the poller cannot list an alert twice.
        """
        with self._lock.write_locked():
            entries = [entry for entry in self._entries if entry.identifier != view.identifier]
            entries.insert(0, view)
            del entries[self.limit:]
            self._entries = entries

    def clear(self) -> None:
        with self._lock.write_locked():
            self._entries = []
