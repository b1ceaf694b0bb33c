"""Date helpers shared by the availability and cancellation engines.

Engines work on calendar days. Timestamps are compared in UTC; naive
datetimes are taken to already be UTC and plain dates mean midnight UTC.
"""

import datetime as dt
from collections.abc import Iterator


def to_date(value: dt.date | dt.datetime) -> dt.date:
    """Reduce a date or datetime to its calendar date."""
    if isinstance(value, dt.datetime):
        return value.date()
    return value


def to_utc_datetime(value: dt.date | dt.datetime) -> dt.datetime:
    """Normalize a date or datetime to an aware UTC datetime."""
    if isinstance(value, dt.datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=dt.UTC)
        return value.astimezone(dt.UTC)
    return dt.datetime(value.year, value.month, value.day, tzinfo=dt.UTC)


def iter_dates(start: dt.date, end: dt.date) -> Iterator[dt.date]:
    """Yield every date in ``[start, end)``."""
    for i in range((end - start).days):
        yield start + dt.timedelta(days=i)


def parse_month(month: str) -> tuple[dt.date, dt.date]:
    """Parse ``YYYY-MM`` into the half-open range covering that month.

    Raises:
        ValueError: If the string is not a valid month
    """
    year_str, sep, month_str = month.partition("-")
    if not sep or len(year_str) != 4 or len(month_str) != 2:
        raise ValueError(f"Invalid month format: {month!r} (expected YYYY-MM)")

    year, month_num = int(year_str), int(month_str)
    if not 1 <= month_num <= 12:
        raise ValueError("Month must be between 01 and 12")

    first_day = dt.date(year, month_num, 1)
    if month_num == 12:
        next_month = dt.date(year + 1, 1, 1)
    else:
        next_month = dt.date(year, month_num + 1, 1)
    return first_day, next_month


def utc_now() -> dt.datetime:
    """Current time as an aware UTC datetime."""
    return dt.datetime.now(dt.UTC)
