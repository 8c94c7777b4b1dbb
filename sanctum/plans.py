"""Ordered multi-day plan progress (devotional plans, fasting sessions).

One state machine serves every plan kind; the per-day payload is opaque here.
NotStarted -> InProgress(current_day) -> Completed.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Any

from sanctum.dates import calendar_date_key, days_between
from sanctum.errors import AlreadyStartedError, InvalidDayError
from sanctum.models import PlanProgress


VALID_KINDS = {"devotional", "fasting"}


def next_incomplete_day(completed: list[int] | set[int], total_days: int) -> int:
    """Smallest day not yet completed, or *total_days* once all are done."""
    done = set(completed)
    for day in range(1, total_days + 1):
        if day not in done:
            return day
    return total_days


def start_plan(
    plan_id: str,
    total_days: int,
    start_date: date | str,
    existing: dict[str, PlanProgress] | None = None,
    kind: str = "devotional",
    gated: bool = False,
) -> PlanProgress:
    """Create fresh progress for *plan_id*.

    Raises AlreadyStartedError rather than silently resetting existing progress.
    """
    if existing and plan_id in existing:
        raise AlreadyStartedError(plan_id)
    if total_days < 1:
        raise InvalidDayError(total_days, total_days)
    if kind not in VALID_KINDS:
        raise ValueError(f"Invalid plan kind: {kind}")
    return PlanProgress(
        plan_id=plan_id,
        total_days=total_days,
        current_day=1,
        completed_days=[],
        is_completed=False,
        start_date=calendar_date_key(start_date),
        kind=kind,
        gated=gated,
    )


def complete_day(progress: PlanProgress, day: int, note: Any = None) -> PlanProgress:
    """Mark *day* complete.

    Re-completing a day returns *progress* unchanged. The cursor is recomputed
    as the next incomplete day, so out-of-order completion never skips ahead.
    """
    if not 1 <= day <= progress.total_days:
        raise InvalidDayError(day, progress.total_days)
    if day in progress.completed_days:
        return progress

    completed = sorted(set(progress.completed_days) | {day})
    notes = dict(progress.day_notes)
    if note is not None:
        notes[day] = note
    return replace(
        progress,
        completed_days=completed,
        current_day=next_incomplete_day(completed, progress.total_days),
        is_completed=len(completed) == progress.total_days,
        day_notes=notes,
    )


def progress_percent(progress: PlanProgress) -> float:
    return round(100 * len(progress.completed_days) / progress.total_days, 1)


def days_remaining(progress: PlanProgress, today: date | str) -> int:
    """Calendar days left until the plan's scheduled last day (never negative)."""
    if not progress.start_date:
        return progress.total_days - len(progress.completed_days)
    elapsed = days_between(today, progress.start_date)
    return max(0, progress.total_days - 1 - elapsed)


def summarize(progress: PlanProgress, today: date | str) -> dict[str, Any]:
    d = progress.to_dict()
    d["progressPercent"] = progress_percent(progress)
    d["daysRemaining"] = days_remaining(progress, today)
    return d
