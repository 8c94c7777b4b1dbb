"""Weekly aggregation of timestamped, duration-bearing activity.

The chart needs exactly seven fixed-position bars (Sun..Sat); days without
entries report 0 rather than being omitted.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import replace
from datetime import date

from sanctum.dates import DAY_LABELS, calendar_date_key, start_of_week, week_dates
from sanctum.models import ActivityLogEntry, DayBucket, WeeklySummary


DEFAULT_RETENTION = 100


def _minutes_by_day(log: list[ActivityLogEntry]) -> dict[str, float]:
    totals: dict[str, float] = defaultdict(float)
    for entry in log:
        try:
            totals[calendar_date_key(entry.date)] += entry.duration_minutes
        except ValueError:
            # Unparseable date keys cannot fall in any bucket
            continue
    return totals


def weekly_buckets(log: list[ActivityLogEntry], reference_date: date | str) -> list[DayBucket]:
    totals = _minutes_by_day(log)
    return [
        DayBucket(label=label, date=day.isoformat(), total_minutes=totals.get(day.isoformat(), 0))
        for label, day in zip(DAY_LABELS, week_dates(reference_date))
    ]


def total_weekly_minutes(log: list[ActivityLogEntry], reference_date: date | str) -> float:
    return sum(b.total_minutes for b in weekly_buckets(log, reference_date))


def minutes_by_tag(log: list[ActivityLogEntry], reference_date: date | str) -> dict[str, float]:
    keys = {d.isoformat() for d in week_dates(reference_date)}
    by_tag: dict[str, float] = defaultdict(float)
    for entry in log:
        try:
            key = calendar_date_key(entry.date)
        except ValueError:
            continue
        if key in keys:
            by_tag[entry.tag] += entry.duration_minutes
    return dict(by_tag)


def weekly_summary(log: list[ActivityLogEntry], reference_date: date | str) -> WeeklySummary:
    buckets = weekly_buckets(log, reference_date)
    return WeeklySummary(
        week_start=start_of_week(reference_date).isoformat(),
        buckets=buckets,
        total_minutes=sum(b.total_minutes for b in buckets),
        minutes_by_tag=minutes_by_tag(log, reference_date),
    )


def append_entry(
    log: list[ActivityLogEntry],
    entry: ActivityLogEntry,
    retention: int = DEFAULT_RETENTION,
) -> list[ActivityLogEntry]:
    """Return a new log with *entry* first, keeping the most recent *retention*."""
    if entry.duration_minutes < 0:
        raise ValueError("duration_minutes must be >= 0")
    entry = replace(entry, date=calendar_date_key(entry.date))
    return [entry, *log][: max(retention, 1)]
