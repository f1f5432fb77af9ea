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

"""Database models for persisted alerts."""

from sqlalchemy import JSON, Column, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import declarative_base

from oref_utils import utc_now

Base = declarative_base()


class OrefAlert(Base):
    __tablename__ = "alerts"

    id = Column(Integer, primary_key=True)
    identifier = Column(String(255), nullable=False)
    category = Column(Text, nullable=False, default="")
    title = Column(Text, nullable=False, default="")
    lines = Column(JSON, nullable=False, default=list)
    description = Column(Text, nullable=False, default="")
    received_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<OrefAlert {self.identifier} {self.received_at}>"


Index("ux_alerts_identifier", OrefAlert.identifier, unique=True)
Index("ix_alerts_received_at_desc", OrefAlert.received_at.desc())
