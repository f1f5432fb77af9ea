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

"""Timezone and datetime helpers for alert timestamps."""

import logging
import os
from datetime import datetime
from typing import Optional

import pytz

logger = logging.getLogger(__name__)

DEFAULT_DISPLAY_TIMEZONE = os.getenv("DISPLAY_TIMEZONE", "Asia/Jerusalem")
ALERT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
UTC_TZ = pytz.UTC
_display_timezone = pytz.timezone(DEFAULT_DISPLAY_TIMEZONE)


def get_display_timezone():
    """Return the timezone used for client-facing alert dates."""

    return _display_timezone


def get_display_timezone_name() -> str:
    tz = get_display_timezone()
    return getattr(tz, "zone", DEFAULT_DISPLAY_TIMEZONE)


def set_display_timezone(tz_name: Optional[str]) -> None:
    """Update the display timezone, keeping the current one if the name is unknown."""

    global _display_timezone

    if not tz_name:
        return

    try:
        _display_timezone = pytz.timezone(tz_name)
        logger.info("Updated display timezone to %s", tz_name)
    except pytz.UnknownTimeZoneError:
        logger.warning(
            "Invalid timezone '%s', keeping %s",
            tz_name,
            get_display_timezone_name(),
        )


def utc_now() -> datetime:
    """Return the current timezone-aware UTC timestamp."""

    return datetime.now(UTC_TZ)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes and normalise aware ones to UTC."""

    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC_TZ)
    return dt.astimezone(UTC_TZ)


def format_alert_date(dt: Optional[datetime]) -> str:
    """Format a received timestamp the way the alert clients display it.

    The result is always rendered in the display timezone regardless of the
    server locale, e.g. ``2025-06-13 03:12:45``.
    """

    if dt is None:
        return ""
    return ensure_utc(dt).astimezone(get_display_timezone()).strftime(ALERT_DATE_FORMAT)
