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

"""Exceptions raised by the persistent alert store."""


class StoreError(Exception):
    """A persistent store operation failed."""


class StoreUnavailableError(StoreError):
    """The store could not be reached when the service started."""
