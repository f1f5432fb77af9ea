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

"""Pytest configuration and shared fixtures for Oref Relay tests.

Provides an in-memory fake store with call counters, a SQLite-backed
SQLAlchemy store and small factories for alert payloads and records.
"""
import sys
import threading
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable, List, Optional
from unittest.mock import MagicMock

import pytest

# Add project root to Python path for imports
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from oref_core import (  # noqa: E402
    AlertPayload,
    AlertRecord,
    SQLAlchemyAlertStore,
    StoreError,
    connect_store,
)
from oref_utils import UTC_TZ  # noqa: E402

BASE_TIME = datetime(2025, 6, 13, 0, 0, 0, tzinfo=UTC_TZ)


class FakeAlertStore:
    """In-memory alert store that counts every call."""

    def __init__(self, records: Optional[List[AlertRecord]] = None):
        self.records: List[AlertRecord] = list(records or [])
        self.insert_calls = 0
        self.recent_calls = 0
        self.fail_insert = False
        self.fail_recent = False
        self._lock = threading.Lock()

    def insert(self, record: AlertRecord) -> bool:
        with self._lock:
            self.insert_calls += 1
            if self.fail_insert:
                raise StoreError("insert failed")
            if any(existing.identifier == record.identifier for existing in self.records):
                return False
            self.records.append(record)
            return True

    def recent(self, limit: int) -> List[AlertRecord]:
        with self._lock:
            self.recent_calls += 1
            if self.fail_recent:
                raise StoreError("store offline")
            ordered = sorted(self.records, key=lambda record: record.received_at, reverse=True)
            return ordered[:limit]

    def count(self) -> int:
        with self._lock:
            return len(self.records)


# ============================================================================
# Factories
# ============================================================================

@pytest.fixture
def make_payload() -> Callable[..., AlertPayload]:
    def _make(identifier: str = "133912345670000000", **overrides) -> AlertPayload:
        fields = {
            "identifier": identifier,
            "category": "1",
            "title": "Rocket and missile fire",
            "lines": ["Sderot", "Ashkelon"],
            "description": "Enter the protected space",
        }
        fields.update(overrides)
        return AlertPayload(**fields)

    return _make


@pytest.fixture
def make_record(make_payload) -> Callable[..., AlertRecord]:
    def _make(identifier: str, minutes: int = 0, **overrides) -> AlertRecord:
        return AlertRecord.from_payload(
            make_payload(identifier, **overrides),
            received_at=BASE_TIME + timedelta(minutes=minutes),
        )

    return _make


# ============================================================================
# Stores
# ============================================================================

@pytest.fixture
def store_factory():
    """Return the fake store class so tests can seed or subclass it."""
    return FakeAlertStore


@pytest.fixture
def fake_store() -> FakeAlertStore:
    return FakeAlertStore()


@pytest.fixture
def sqlite_engine():
    engine = connect_store("sqlite://")
    yield engine
    engine.dispose()


@pytest.fixture
def sql_store(sqlite_engine) -> SQLAlchemyAlertStore:
    return SQLAlchemyAlertStore(sqlite_engine)


@pytest.fixture
def mock_feed() -> MagicMock:
    """Feed client double; set ``fetch.return_value`` or ``side_effect`` per test."""
    feed = MagicMock()
    feed.url = "https://feed.test/alerts.json"
    feed.fetch.return_value = b""
    return feed
