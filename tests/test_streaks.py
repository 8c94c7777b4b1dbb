"""Tests for sanctum/streaks.py — consecutive-day streaks and milestones."""

from datetime import date, timedelta

import pytest

from sanctum.errors import StaleStateError
from sanctum.models import StreakState
from sanctum.streaks import (
    MILESTONES,
    is_streak_alive,
    milestone_progress,
    next_milestone,
    record_engagement,
)


START = date(2026, 2, 9)


def _engage_days(state: StreakState, days: list[date]) -> StreakState:
    for d in days:
        state = record_engagement(state, d)
    return state


def test_first_engagement():
    state = record_engagement(StreakState(), START)
    assert state.current_streak == 1
    assert state.longest_streak == 1
    assert state.total_engaged_days == 1
    assert state.last_engaged_date == "2026-02-09"
    assert state.milestones_reached == []


def test_same_day_is_idempotent():
    once = record_engagement(StreakState(), START)
    twice = record_engagement(once, START)
    assert twice == once
    assert twice.total_engaged_days == 1


def test_seven_consecutive_days_reach_first_milestone():
    state = _engage_days(StreakState(), [START + timedelta(days=i) for i in range(7)])
    assert state.current_streak == 7
    assert 7 in state.milestones_reached
    assert 14 not in state.milestones_reached


def test_gap_resets_streak_but_keeps_longest():
    state = _engage_days(StreakState(), [START + timedelta(days=i) for i in range(3)])
    state = record_engagement(state, START + timedelta(days=2 + 5))
    assert state.current_streak == 1
    assert state.longest_streak == 3
    assert state.total_engaged_days == 4


def test_two_day_gap_resets():
    state = record_engagement(StreakState(), START)
    state = record_engagement(state, START + timedelta(days=2))
    assert state.current_streak == 1


def test_milestones_survive_reset():
    state = _engage_days(StreakState(), [START + timedelta(days=i) for i in range(14)])
    assert state.milestones_reached == [7, 14]
    state = record_engagement(state, START + timedelta(days=30))
    assert state.current_streak == 1
    assert state.milestones_reached == [7, 14]


def test_monotonic_counters_across_gaps():
    days = [START, START + timedelta(days=1), START + timedelta(days=5), START + timedelta(days=6)]
    state = StreakState()
    for d in days:
        prev = state
        state = record_engagement(state, d)
        assert state.longest_streak >= prev.longest_streak
        assert state.total_engaged_days >= prev.total_engaged_days
        assert set(prev.milestones_reached) <= set(state.milestones_reached)
        assert state.longest_streak >= state.current_streak


def test_out_of_order_date_raises_stale():
    state = record_engagement(StreakState(), START)
    with pytest.raises(StaleStateError):
        record_engagement(state, START - timedelta(days=1))


def test_resumes_from_restored_state():
    state = StreakState(current_streak=29, longest_streak=29, last_engaged_date="2026-02-08",
                        total_engaged_days=40, milestones_reached=[7, 14])
    state = record_engagement(state, START)
    assert state.current_streak == 30
    assert state.milestones_reached == [7, 14, 30]


def test_next_milestone():
    assert next_milestone(0) == 7
    assert next_milestone(7) == 14
    assert next_milestone(45) == 60
    assert next_milestone(400) == MILESTONES[-1]


def test_milestone_progress():
    assert milestone_progress(StreakState(current_streak=0)) == 0
    assert milestone_progress(StreakState(current_streak=10)) == round(3 / 7, 3)
    assert milestone_progress(StreakState(current_streak=365)) == 1.0


def test_is_streak_alive():
    state = record_engagement(StreakState(), START)
    assert is_streak_alive(state, START) is True
    assert is_streak_alive(state, START + timedelta(days=1)) is True
    assert is_streak_alive(state, START + timedelta(days=2)) is False
    assert is_streak_alive(StreakState(), START) is False
