"""Tests for sanctum/activity.py — weekly buckets and log retention."""

import pytest

from sanctum.activity import (
    append_entry,
    minutes_by_tag,
    total_weekly_minutes,
    weekly_buckets,
    weekly_summary,
)
from sanctum.models import ActivityLogEntry


def _entry(day: str, minutes: float, tag: str = "prayer") -> ActivityLogEntry:
    return ActivityLogEntry(date=day, duration_minutes=minutes, tag=tag)


def test_empty_log_has_seven_zero_buckets():
    buckets = weekly_buckets([], "2026-02-11")
    assert len(buckets) == 7
    assert [b.label for b in buckets] == ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
    assert all(b.total_minutes == 0 for b in buckets)
    assert buckets[0].date == "2026-02-08"


def test_buckets_sum_per_day_and_ignore_other_weeks():
    log = [
        _entry("2026-02-09", 10),
        _entry("2026-02-09", 5),
        _entry("2026-02-11", 15),
        _entry("2026-02-07", 99),  # previous Saturday
        _entry("2026-02-15", 99),  # next Sunday
    ]
    buckets = weekly_buckets(log, "2026-02-12")
    assert [b.total_minutes for b in buckets] == [0, 15, 0, 15, 0, 0, 0]
    assert total_weekly_minutes(log, "2026-02-12") == 30


def test_minutes_by_tag():
    log = [_entry("2026-02-09", 10), _entry("2026-02-10", 20, "fasting"), _entry("2026-02-01", 5)]
    assert minutes_by_tag(log, "2026-02-09") == {"prayer": 10, "fasting": 20}


def test_weekly_summary_to_dict():
    summary = weekly_summary([_entry("2026-02-14", 12.5)], "2026-02-08")
    d = summary.to_dict()
    assert d["weekStart"] == "2026-02-08"
    assert d["totalMinutes"] == 12.5
    assert d["days"][6] == {"name": "Sat", "date": "2026-02-14", "minutes": 12.5}


def test_append_entry_newest_first():
    log = append_entry([], _entry("2026-02-09", 10))
    log = append_entry(log, _entry("2026-02-10", 20))
    assert [e.date for e in log] == ["2026-02-10", "2026-02-09"]


def test_append_entry_retention():
    log = []
    for i in range(105):
        log = append_entry(log, _entry("2026-02-09", i))
    assert len(log) == 100
    assert log[0].duration_minutes == 104
    assert log[-1].duration_minutes == 5


def test_append_entry_custom_retention():
    log = [_entry("2026-02-09", 1), _entry("2026-02-08", 2)]
    assert len(append_entry(log, _entry("2026-02-10", 3), retention=2)) == 2


def test_negative_duration_rejected():
    with pytest.raises(ValueError):
        append_entry([], _entry("2026-02-09", -1))


def test_zero_duration_allowed():
    log = append_entry([], _entry("2026-02-09", 0))
    assert log[0].duration_minutes == 0


def test_append_normalizes_date_key():
    log = append_entry([], _entry("2026-02-09T22:15:00Z", 5))
    assert log[0].date == "2026-02-09"


def test_minutes_by_tag_normalizes_timestamps():
    log = [_entry("2026-02-09T10:00:00", 10), _entry("not a date", 7)]
    assert total_weekly_minutes(log, "2026-02-09") == 10
    assert minutes_by_tag(log, "2026-02-09") == {"prayer": 10}
