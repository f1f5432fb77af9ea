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

"""Persistent alert store.

The store is append-only from the service's point of view: one row per
distinct alert identifier, never updated or deleted here. A second insert
of the same identifier is an expected outcome and is reported as a
duplicate rather than an error.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, List, Protocol

from sqlalchemy import func, select, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from .alerts import AlertRecord
from .errors import StoreError
from .models import OrefAlert

logger = logging.getLogger(__name__)

DEFAULT_INSERT_TIMEOUT = 5.0
DEFAULT_QUERY_TIMEOUT = 5.0


class AlertStore(Protocol):
    """Interface the poller and the history cache need from durable storage."""

    def insert(self, record: AlertRecord) -> bool:
        """Store ``record``; return False if its identifier is already stored."""
        ...

    def recent(self, limit: int) -> List[AlertRecord]:
        """Return up to ``limit`` records, most recently received first."""
        ...


class SQLAlchemyAlertStore:
    """Alert store backed by a SQLAlchemy engine (PostgreSQL in production)."""

    def __init__(
        self,
        engine: Engine,
        insert_timeout: float = DEFAULT_INSERT_TIMEOUT,
        query_timeout: float = DEFAULT_QUERY_TIMEOUT,
    ):
        self.engine = engine
        self.insert_timeout = insert_timeout
        self.query_timeout = query_timeout
        self._session_factory = sessionmaker(bind=engine, expire_on_commit=False)
        self._supports_statement_timeout = engine.dialect.name == "postgresql"

    @contextmanager
    def _session(self, timeout: float) -> Iterator[Session]:
        session = self._session_factory()
        try:
            if self._supports_statement_timeout:
                session.execute(text(f"SET LOCAL statement_timeout = {int(timeout * 1000)}"))
            yield session
        finally:
            session.close()

    def insert(self, record: AlertRecord) -> bool:
        row = OrefAlert(
            identifier=record.identifier,
            category=record.category,
            title=record.title,
            lines=list(record.lines),
            description=record.description,
            received_at=record.received_at,
        )
        try:
            with self._session(self.insert_timeout) as session:
                try:
                    session.add(row)
                    session.commit()
                except IntegrityError:
                    session.rollback()
                    logger.debug("Alert %s already stored; skipping", record.identifier)
                    return False
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to store alert {record.identifier}: {exc}") from exc
        return True

    def recent(self, limit: int) -> List[AlertRecord]:
        query = (
            select(OrefAlert)
            .order_by(OrefAlert.received_at.desc(), OrefAlert.id.desc())
            .limit(limit)
        )
        try:
            with self._session(self.query_timeout) as session:
                rows = session.execute(query).scalars().all()
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to load alert history: {exc}") from exc

        return [
            AlertRecord(
                identifier=row.identifier,
                category=row.category or "",
                title=row.title or "",
                lines=list(row.lines or []),
                description=row.description or "",
                received_at=row.received_at,
            )
            for row in rows
        ]

    def count(self) -> int:
        try:
            with self._session(self.query_timeout) as session:
                return int(session.execute(select(func.count(OrefAlert.id))).scalar_one())
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to count stored alerts: {exc}") from exc
