"""Date normalization shared by every report.

Storage documents carry dates as ISO strings, datetimes, epoch milliseconds,
or timestamp-like objects exposing ``to_date()`` / ``toDate()``. All of them go
through :func:`normalize_date` before a report reads them.
"""

from datetime import UTC, date, datetime
from typing import Any

UNKNOWN_MONTH = "unknown"

QUARTERS = ("Q1", "Q2", "Q3", "Q4")

_MONTH_ABBR = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

_FALLBACK_FORMATS = ("%Y/%m/%d", "%Y.%m.%d", "%m/%d/%Y", "%m-%d-%Y")


def _from_datetime(value: datetime) -> date:
    if value.tzinfo is not None:
        value = value.astimezone(UTC)
    return value.date()


def _from_string(value: str) -> date | None:
    text = value.strip()
    if not text:
        return None
    try:
        # The calendar date as written, not shifted by its offset
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        pass
    for fmt in _FALLBACK_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def normalize_date(value: Any) -> date | None:
    """Return the calendar date of a stored date value, or None.

    Aware datetime objects are converted to UTC first; ISO strings keep the
    date they were written with. Numbers are epoch milliseconds. Never
    raises on bad input.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return _from_datetime(value)
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return _from_string(value)
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=UTC).date()
        except (OverflowError, OSError, ValueError):
            return None
    for attr in ("to_date", "toDate", "to_datetime"):
        converter = getattr(value, attr, None)
        if callable(converter):
            try:
                return normalize_date(converter())
            except Exception:
                return None
    return None


def month_key(value: date | None) -> str:
    """``YYYY-MM`` for a date, ``"unknown"`` when there is none."""
    if value is None:
        return UNKNOWN_MONTH
    return f"{value.year:04d}-{value.month:02d}"


def month_label(value: date | None) -> str:
    """Display label such as ``"Jan 2025"``."""
    if value is None:
        return "Unknown"
    return f"{_MONTH_ABBR[value.month - 1]} {value.year}"


def quarter_for_date(value: date | None) -> str | None:
    """Calendar quarter of a date (Jan-Mar is Q1), None when undated."""
    if value is None:
        return None
    return QUARTERS[(value.month - 1) // 3]


def quarter_label(value: Any) -> str | None:
    """Validate a precomputed quarter label, returning None if it is not Q1-Q4."""
    if isinstance(value, str) and value in QUARTERS:
        return value
    return None
