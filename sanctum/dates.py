"""Calendar-day bucketing helpers.

Every day-level comparison in the engine goes through the ``YYYY-MM-DD``
key produced here, never through raw instants.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone, tzinfo


DAY_LABELS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


def _as_tzinfo(tz: tzinfo | timedelta | None) -> tzinfo:
    if tz is None:
        return timezone.utc
    if isinstance(tz, timedelta):
        return timezone(tz)
    return tz


def to_calendar_date(instant: datetime, tz: tzinfo | timedelta | None = None) -> date:
    """Local calendar date of *instant* in *tz* (a zone or a UTC offset).

    Naive instants are taken to be UTC.
    """
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(_as_tzinfo(tz)).date()


def calendar_date_key(d: date | str) -> str:
    if isinstance(d, str):
        return parse_date_key(d).isoformat()
    if isinstance(d, datetime):
        d = d.date()
    return d.isoformat()


def parse_date_key(key: str) -> date:
    return date.fromisoformat(key.strip()[:10])


def days_between(a: date | str, b: date | str) -> int:
    """Signed whole calendar days from *b* to *a* (``a - b``)."""
    return (parse_date_key(calendar_date_key(a)) - parse_date_key(calendar_date_key(b))).days


def start_of_week(d: date | str) -> date:
    """Most recent Sunday at or before *d*."""
    day = parse_date_key(calendar_date_key(d))
    # date.weekday(): Monday == 0 ... Sunday == 6
    return day - timedelta(days=(day.weekday() + 1) % 7)


def week_dates(d: date | str) -> list[date]:
    sunday = start_of_week(d)
    return [sunday + timedelta(days=i) for i in range(7)]


def day_label(d: date | str) -> str:
    day = parse_date_key(calendar_date_key(d))
    return DAY_LABELS[(day.weekday() + 1) % 7]
