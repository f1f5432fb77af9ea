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

"""Engine construction and one-time bootstrap for the alert store.

Database Configuration (via environment variables):
  DATABASE_URL       - Full SQLAlchemy URL; overrides the individual variables
  POSTGRES_HOST      - Database host (default: localhost)
  POSTGRES_PORT      - Database port (default: 5432)
  POSTGRES_DB        - Database name (default: alerts_db)
  POSTGRES_USER      - Database user (default: postgres)
  POSTGRES_PASSWORD  - Database password (optional)
"""

import logging
import os
from typing import Any, Dict
from urllib.parse import quote

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.engine.url import make_url
from sqlalchemy.exc import ArgumentError, SQLAlchemyError
from sqlalchemy.pool import StaticPool

from .errors import StoreUnavailableError
from .models import Base

logger = logging.getLogger(__name__)

DEFAULT_CONNECT_TIMEOUT = 10.0


def build_database_url_from_env() -> str:
    """Build a SQLAlchemy database URL from environment variables."""

    url = os.getenv("DATABASE_URL")
    if url:
        return url

    user = os.getenv("POSTGRES_USER", "postgres") or "postgres"
    password = os.getenv("POSTGRES_PASSWORD", "")
    host = os.getenv("POSTGRES_HOST", "localhost") or "localhost"
    port = os.getenv("POSTGRES_PORT", "5432") or "5432"
    database = os.getenv("POSTGRES_DB", "alerts_db") or "alerts_db"

    user_part = quote(user, safe="")
    password_part = quote(password, safe="") if password else ""

    if password_part:
        auth_segment = f"{user_part}:{password_part}"
    else:
        auth_segment = user_part

    return f"postgresql+psycopg2://{auth_segment}@{host}:{port}/{database}"


def redact_database_url(url: str) -> str:
    """Return the URL with any password masked, for logging."""

    try:
        return make_url(url).render_as_string(hide_password=True)
    except ArgumentError:
        return "<invalid database url>"


def _engine_kwargs(url: str, connect_timeout: float) -> Dict[str, Any]:
    parsed = make_url(url)
    backend = parsed.get_backend_name()
    kwargs: Dict[str, Any] = {"pool_pre_ping": True, "future": True}

    if backend == "postgresql":
        kwargs["pool_recycle"] = 3600
        kwargs["connect_args"] = {"connect_timeout": max(1, int(connect_timeout))}
    elif backend == "sqlite":
        kwargs["connect_args"] = {"timeout": connect_timeout, "check_same_thread": False}
        if parsed.database in (None, "", ":memory:"):
            # A single shared connection keeps the in-memory database alive across threads
            kwargs["poolclass"] = StaticPool

    return kwargs


def create_store_engine(url: str, connect_timeout: float = DEFAULT_CONNECT_TIMEOUT) -> Engine:
    return create_engine(url, **_engine_kwargs(url, connect_timeout))


def connect_store(url: str, connect_timeout: float = DEFAULT_CONNECT_TIMEOUT) -> Engine:
    """Connect to the alert store, verify it answers and create its indexes.

    Raises:
        StoreUnavailableError: the store cannot be reached or initialised.
            The service must not start serving in that case.
    """

    safe_url = redact_database_url(url)
    try:
        engine = create_store_engine(url, connect_timeout=connect_timeout)
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        Base.metadata.create_all(engine)
    except (ArgumentError, SQLAlchemyError) as exc:
        logger.error("Alert store unavailable at %s: %s", safe_url, exc)
        raise StoreUnavailableError(f"Cannot connect to alert store at {safe_url}: {exc}") from exc

    logger.info("Connected to alert store at %s", safe_url)
    return engine
