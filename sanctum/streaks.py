"""Consecutive-day engagement tracking and the milestone ladder."""

from __future__ import annotations

from dataclasses import replace
from datetime import date

from sanctum.dates import calendar_date_key, days_between
from sanctum.errors import StaleStateError
from sanctum.models import StreakState


MILESTONES = (7, 14, 30, 60, 90, 180, 365)


def record_engagement(state: StreakState, today: date | str) -> StreakState:
    """Return the streak state after engaging on *today*.

    Idempotent within a day. Exactly one day after the last engagement
    continues the streak; any larger gap (or no history) restarts it at 1.
    Milestones are achievements and are never removed.
    Raises StaleStateError if *today* is before the last engagement.
    """
    key = calendar_date_key(today)
    last = state.last_engaged_date

    if last is not None:
        gap = days_between(key, last)
        if gap == 0:
            return state
        if gap < 0:
            raise StaleStateError(key, last)
        current = state.current_streak + 1 if gap == 1 else 1
    else:
        current = 1

    reached = set(state.milestones_reached)
    reached.update(m for m in MILESTONES if current >= m)

    return replace(
        state,
        current_streak=current,
        longest_streak=max(state.longest_streak, current),
        last_engaged_date=key,
        total_engaged_days=state.total_engaged_days + 1,
        milestones_reached=sorted(reached),
    )


def is_streak_alive(state: StreakState, today: date | str) -> bool:
    """True if the streak can still be continued (engaged today or yesterday)."""
    if state.last_engaged_date is None or state.current_streak == 0:
        return False
    return days_between(today, state.last_engaged_date) in (0, 1)


def next_milestone(streak: int) -> int:
    for m in MILESTONES:
        if m > streak:
            return m
    return MILESTONES[-1]


def previous_milestone(streak: int) -> int:
    reached = [m for m in MILESTONES if m <= streak]
    return reached[-1] if reached else 0


def milestone_progress(state: StreakState) -> float:
    """Fraction of the way from the previous milestone to the next one."""
    current = state.current_streak
    lo = previous_milestone(current)
    hi = next_milestone(current)
    if current >= MILESTONES[-1]:
        return 1.0
    return round((current - lo) / (hi - lo), 3)
