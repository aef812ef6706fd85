"""Tests for time handling utilities."""

from datetime import datetime, timedelta, timezone

import pytest

from fxsync_app.utils.time import (
    elapsed_minutes,
    ensure_utc,
    format_timestamp,
    hourly_steps,
    parse_timestamp,
    utc_now,
)


class TestParseTimestamp:
    """Test payload timestamp parsing."""

    def test_iso_with_z_suffix(self):
        ts = parse_timestamp("2024-01-15T12:00:00Z")
        assert ts == datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)

    def test_iso_with_offset_is_converted_to_utc(self):
        ts = parse_timestamp("2024-01-15T14:00:00+02:00")
        assert ts == datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)
        assert ts.tzinfo == timezone.utc

    def test_naive_iso_is_taken_as_utc(self):
        ts = parse_timestamp("2024-01-15T12:00:00")
        assert ts.tzinfo == timezone.utc
        assert ts.hour == 12

    def test_epoch_milliseconds(self):
        expected = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)
        ts = parse_timestamp(int(expected.timestamp() * 1000))
        assert ts == expected

    def test_datetime_passthrough(self):
        naive = datetime(2024, 1, 15, 12, 0)
        assert parse_timestamp(naive) == naive.replace(tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", ["", "   ", "yesterday", True, -5, float("nan"), None, [1]])
    def test_rejects_invalid_values(self, value):
        with pytest.raises(ValueError):
            parse_timestamp(value)


class TestTimeHelpers:
    """Test formatting and arithmetic helpers."""

    def test_utc_now_is_aware(self):
        assert utc_now().tzinfo == timezone.utc

    def test_ensure_utc_converts_offsets(self):
        ts = datetime(2024, 1, 15, 7, 0, tzinfo=timezone(timedelta(hours=-5)))
        assert ensure_utc(ts) == datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)

    def test_format_timestamp(self):
        ts = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)
        assert format_timestamp(ts) == "2024-01-15T12:00:00+00:00"

    def test_elapsed_minutes_floors(self):
        start = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)
        assert elapsed_minutes(start, start + timedelta(seconds=59)) == 0
        assert elapsed_minutes(start, start + timedelta(seconds=119)) == 1
        assert elapsed_minutes(start, start - timedelta(seconds=30)) == -1

    def test_hourly_steps(self):
        anchor = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)
        steps = hourly_steps(anchor, 3, start_offset=-2)
        assert steps == [
            anchor - timedelta(hours=2),
            anchor - timedelta(hours=1),
            anchor,
        ]
        assert hourly_steps(anchor, 0) == []
