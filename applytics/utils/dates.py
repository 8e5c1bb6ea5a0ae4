"""Date normalisation helpers."""

from datetime import UTC, date, datetime, timedelta
from typing import Any

# Spreadsheet day 0; serial 25569 is 1970-01-01.
EXCEL_EPOCH = datetime(1899, 12, 30)

MS_PER_DAY = 86_400_000


def utc_now() -> datetime:
    """Return current UTC time as timezone-naive datetime."""
    return datetime.now(UTC).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """Drop tzinfo after converting aware datetimes to UTC."""
    if value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


def excel_serial_to_datetime(serial: float) -> datetime:
    """Convert a spreadsheet serial day count to a datetime (millisecond precision)."""
    return EXCEL_EPOCH + timedelta(milliseconds=round(serial * MS_PER_DAY))


def coerce_datetime(value: Any, *, allow_serial: bool = False) -> datetime | None:
    """Normalise dates coming from forms or spreadsheets.

    Accepts datetimes, dates and ISO-8601 strings. Numbers are spreadsheet
    serial day counts and are only accepted with ``allow_serial``.
    Blank values give ``None``; anything else raises ``ValueError``.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError(f"Not a date: {value!r}")
    if isinstance(value, datetime):
        return to_naive_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, int | float):
        if not allow_serial:
            raise ValueError(f"Numeric dates are not accepted: {value!r}")
        return excel_serial_to_datetime(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return to_naive_utc(datetime.fromisoformat(text.replace("Z", "+00:00")))
        except ValueError:
            raise ValueError(f"Unrecognised date: {value!r}") from None
    raise ValueError(f"Not a date: {value!r}")
