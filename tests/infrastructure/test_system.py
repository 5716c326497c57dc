"""Tests for the system clock and id generator."""

from datetime import UTC, datetime, timedelta
from unittest.mock import patch

from stockpilot.infrastructure.system import SystemClock, UuidGenerator


class TestSystemClock:
    def test_returns_aware_utc(self):
        now = SystemClock().now()
        assert now.tzinfo is UTC

    def test_never_goes_backwards(self):
        clock = SystemClock()
        later = datetime(2024, 1, 15, 12, 0, tzinfo=UTC)
        earlier = later - timedelta(hours=1)

        with patch("stockpilot.infrastructure.system.datetime") as fake:
            fake.now.side_effect = [later, earlier]
            assert clock.now() == later
            assert clock.now() == later


def test_uuid_ids_are_unique_hex():
    ids = UuidGenerator()
    values = {ids.new_id() for _ in range(100)}
    assert len(values) == 100
    assert all(len(v) == 32 and int(v, 16) >= 0 for v in values)
