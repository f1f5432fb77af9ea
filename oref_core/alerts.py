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

"""Alert data model shared by the poller, the history cache and the API.

Three shapes of the same alert flow through the service:

* ``AlertPayload`` - what the upstream feed publishes (wire names ``id``,
  ``cat``, ``title``, ``data``, ``desc``).
* ``AlertRecord`` - a payload plus the moment this process first saw it.
  This is what the persistent store holds.
* ``AlertView`` - the client-facing projection with a formatted
  ``alertDate`` in the display timezone. Never stored on its own.
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from oref_utils import ensure_utc, format_alert_date, utc_now


class AlertFields(BaseModel):
    """Fields common to every alert shape."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    identifier: str = Field(default="", alias="id", description="Upstream alert identifier")
    category: str = Field(default="", alias="cat", description="Alert category code")
    title: str = Field(default="", description="Alert title")
    lines: List[str] = Field(default_factory=list, alias="data", description="Affected areas, one per line")
    description: str = Field(default="", alias="desc", description="Protective instructions")

    @field_validator("identifier", "category", "title", "description", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("lines", mode="before")
    @classmethod
    def _coerce_lines(cls, value: Any) -> Any:
        if value is None:
            return []
        return value


class AlertPayload(AlertFields):
    """Alert as published by the upstream feed."""

    @property
    def is_empty(self) -> bool:
        """An empty identifier means there is no active alert."""
        return not self.identifier


class AlertRecord(AlertFields):
    """Persisted alert: the payload plus the time it was first received."""

    received_at: datetime = Field(..., description="First observation time (UTC)")

    @field_validator("received_at")
    @classmethod
    def _normalise_received_at(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    @classmethod
    def from_payload(cls, payload: AlertPayload, received_at: Optional[datetime] = None) -> "AlertRecord":
        return cls(
            identifier=payload.identifier,
            category=payload.category,
            title=payload.title,
            lines=list(payload.lines),
            description=payload.description,
            received_at=received_at or utc_now(),
        )


class AlertView(AlertFields):
    """Display-ready alert served by the history endpoint."""

    alert_date: str = Field(default="", alias="alertDate", description="Received time in the display timezone")

    @classmethod
    def from_record(cls, record: AlertRecord) -> "AlertView":
        return cls(
            identifier=record.identifier,
            category=record.category,
            title=record.title,
            lines=list(record.lines),
            description=record.description,
            alert_date=format_alert_date(record.received_at),
        )
