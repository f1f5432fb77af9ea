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

"""Utility helpers shared by the poller and the API."""

from .time import (
    ALERT_DATE_FORMAT,
    UTC_TZ,
    ensure_utc,
    format_alert_date,
    get_display_timezone,
    get_display_timezone_name,
    set_display_timezone,
    utc_now,
)

__all__ = [
    "ALERT_DATE_FORMAT",
    "UTC_TZ",
    "utc_now",
    "ensure_utc",
    "format_alert_date",
    "get_display_timezone",
    "get_display_timezone_name",
    "set_display_timezone",
]
