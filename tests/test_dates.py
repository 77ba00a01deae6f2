"""Tests for date normalization and derived keys."""

from datetime import UTC, date, datetime, timedelta, timezone

from ledger_reports.dates import (
    month_key,
    month_label,
    normalize_date,
    quarter_for_date,
    quarter_label,
)


class _Timestamp:
    """Stand-in for a datastore timestamp object."""

    def __init__(self, value: datetime):
        self._value = value

    def toDate(self) -> datetime:  # noqa: N802
        return self._value


class TestNormalizeDate:
    def test_iso_date_string(self):
        assert normalize_date("2025-03-14") == date(2025, 3, 14)

    def test_iso_datetime_with_z(self):
        assert normalize_date("2025-03-14T23:30:00Z") == date(2025, 3, 14)

    def test_offset_string_keeps_written_date(self):
        assert normalize_date("2025-01-31T20:00:00-05:00") == date(2025, 1, 31)

    def test_aware_datetime_converted_to_utc(self):
        eastern = timezone(timedelta(hours=-5))
        value = datetime(2025, 3, 14, 22, 0, tzinfo=eastern)

        assert normalize_date(value) == date(2025, 3, 15)

    def test_date_passthrough(self):
        assert normalize_date(date(2024, 12, 31)) == date(2024, 12, 31)

    def test_epoch_milliseconds(self):
        millis = int(datetime(2025, 7, 4, tzinfo=UTC).timestamp() * 1000)

        assert normalize_date(millis) == date(2025, 7, 4)

    def test_timestamp_like_object(self):
        stamp = _Timestamp(datetime(2025, 2, 1, 8, 0, tzinfo=UTC))

        assert normalize_date(stamp) == date(2025, 2, 1)

    def test_slash_format(self):
        assert normalize_date("2025/06/01") == date(2025, 6, 1)

    def test_garbage_returns_none(self):
        assert normalize_date("not a date") is None
        assert normalize_date("") is None
        assert normalize_date(None) is None
        assert normalize_date(True) is None
        assert normalize_date(object()) is None


class TestDerivedKeys:
    def test_month_key(self):
        assert month_key(date(2025, 1, 9)) == "2025-01"
        assert month_key(None) == "unknown"

    def test_month_label(self):
        assert month_label(date(2025, 1, 9)) == "Jan 2025"
        assert month_label(None) == "Unknown"

    def test_quarter_for_date(self):
        assert quarter_for_date(date(2025, 3, 31)) == "Q1"
        assert quarter_for_date(date(2025, 4, 1)) == "Q2"
        assert quarter_for_date(date(2025, 12, 1)) == "Q4"
        assert quarter_for_date(None) is None

    def test_quarter_label(self):
        assert quarter_label("Q3") == "Q3"
        assert quarter_label("q3") is None
        assert quarter_label("Q5") is None
        assert quarter_label(None) is None
