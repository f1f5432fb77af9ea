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

"""Tests for the alert data model and the display-time helpers."""

from datetime import datetime

import pytest
from pydantic import ValidationError

from oref_api.config import Settings
from oref_core import AlertPayload, AlertRecord, AlertView
from oref_utils import (
    UTC_TZ,
    ensure_utc,
    format_alert_date,
    get_display_timezone_name,
    set_display_timezone,
)


@pytest.fixture(autouse=True)
def _restore_display_timezone():
    previous = get_display_timezone_name()
    yield
    set_display_timezone(previous)


class TestAlertDateFormatting:
    """Received timestamps are rendered in Asia/Jerusalem regardless of server locale."""

    def test_summer_time_offset(self):
        set_display_timezone("Asia/Jerusalem")
        dt = datetime(2025, 6, 13, 0, 12, 45, tzinfo=UTC_TZ)

        assert format_alert_date(dt) == "2025-06-13 03:12:45"

    def test_winter_time_offset(self):
        set_display_timezone("Asia/Jerusalem")
        dt = datetime(2024, 1, 10, 22, 30, 0, tzinfo=UTC_TZ)

        assert format_alert_date(dt) == "2024-01-11 00:30:00"

    def test_naive_datetimes_are_utc(self):
        set_display_timezone("Asia/Jerusalem")

        assert format_alert_date(datetime(2025, 6, 13, 0, 0, 0)) == "2025-06-13 03:00:00"

    def test_none_formats_as_empty(self):
        assert format_alert_date(None) == ""

    def test_invalid_timezone_keeps_current(self):
        set_display_timezone("Asia/Jerusalem")
        set_display_timezone("Not/AZone")

        assert get_display_timezone_name() == "Asia/Jerusalem"

    def test_ensure_utc_converts_aware_datetimes(self):
        import pytz

        local = pytz.timezone("Asia/Jerusalem").localize(datetime(2025, 6, 13, 3, 0, 0))

        assert ensure_utc(local) == datetime(2025, 6, 13, 0, 0, 0, tzinfo=UTC_TZ)
        assert ensure_utc(None) is None


class TestAlertModels:
    """Payload, record and view projections."""

    def test_payload_serialises_with_wire_names(self):
        payload = AlertPayload.model_validate(
            {"id": "1", "cat": "1", "title": "Alert", "data": ["CityA"], "desc": "Shelter"}
        )

        assert payload.model_dump(by_alias=True) == {
            "id": "1",
            "cat": "1",
            "title": "Alert",
            "data": ["CityA"],
            "desc": "Shelter",
        }

    def test_payload_is_immutable(self, make_payload):
        payload = make_payload("1")

        with pytest.raises(ValidationError):
            payload.identifier = "2"

    def test_record_from_payload_keeps_fields(self, make_payload):
        received = datetime(2025, 6, 13, 0, 0, 0, tzinfo=UTC_TZ)
        record = AlertRecord.from_payload(make_payload("1"), received_at=received)

        assert record.identifier == "1"
        assert record.lines == ["Sderot", "Ashkelon"]
        assert record.received_at == received

    def test_record_defaults_received_at_to_now(self, make_payload):
        before = datetime.now(UTC_TZ)
        record = AlertRecord.from_payload(make_payload("1"))

        assert record.received_at >= before

    def test_view_has_alert_date(self, make_record):
        set_display_timezone("Asia/Jerusalem")
        view = AlertView.from_record(make_record("1", minutes=90))

        dumped = view.model_dump(by_alias=True)
        assert dumped["alertDate"] == "2025-06-13 04:30:00"
        assert dumped["id"] == "1"
        assert "received_at" not in dumped


class TestSettings:
    """Environment-backed configuration."""

    def test_defaults(self):
        settings = Settings(_env_file=None, database_url="sqlite://")

        assert settings.bind == ("0.0.0.0", 8080)
        assert settings.poll_interval_sec == 1.0
        assert settings.feed_timeout_sec == 4.0
        assert settings.history_limit == 200
        assert settings.display_timezone == "Asia/Jerusalem"
        assert settings.cors_origin == "http://127.0.0.1:8080"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("ADDR_INFO", "127.0.0.1:9090")
        monkeypatch.setenv("CORS_ORIGIN", "https://alerts.example")
        monkeypatch.setenv("DATABASE_URL", "sqlite:///alerts.db")
        monkeypatch.setenv("POLLER_ENABLED", "false")

        settings = Settings(_env_file=None)

        assert settings.bind == ("127.0.0.1", 9090)
        assert settings.cors_origin == "https://alerts.example"
        assert settings.database_url == "sqlite:///alerts.db"
        assert settings.poller_enabled is False
