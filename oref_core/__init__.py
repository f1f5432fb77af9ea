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

"""Alert ingestion core: data model, persistent store and history cache."""

from .alerts import AlertPayload, AlertRecord, AlertView
from .database import build_database_url_from_env, connect_store, create_store_engine
from .errors import StoreError, StoreUnavailableError
from .history import DEFAULT_HISTORY_LIMIT, HistoryCache, ReadWriteLock
from .query import AlertQueryService, LatestAlert
from .store import AlertStore, SQLAlchemyAlertStore

__all__ = [
    "AlertPayload",
    "AlertRecord",
    "AlertView",
    "AlertStore",
    "SQLAlchemyAlertStore",
    "StoreError",
    "StoreUnavailableError",
    "HistoryCache",
    "ReadWriteLock",
    "DEFAULT_HISTORY_LIMIT",
    "LatestAlert",
    "AlertQueryService",
    "build_database_url_from_env",
    "connect_store",
    "create_store_engine",
]
