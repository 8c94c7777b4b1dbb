"""Generic time-lock primitive for sealed letters and gated plan days.

This is the one place where instants (not calendar-date keys) are compared,
because sub-day precision matters for an unlock moment.
"""

from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Any

from sanctum.dates import parse_date_key, calendar_date_key
from sanctum.errors import LockedError
from sanctum.models import ScheduledUnlock


def create_unlock(
    payload: Any,
    delay: timedelta,
    now: datetime,
    unlock_id: str | None = None,
) -> ScheduledUnlock:
    """Seal *payload* for *delay*; a non-positive delay is readable at once."""
    return ScheduledUnlock(
        id=unlock_id or uuid.uuid4().hex,
        payload=payload,
        created_at=now,
        unlock_at=now + delay if delay > timedelta(0) else None,
    )


def is_unlocked(unlock: ScheduledUnlock, now: datetime) -> bool:
    # Once opened, an item never re-locks (e.g. clock moved backward).
    if unlock.first_opened_at is not None:
        return True
    return unlock.unlock_at is None or now >= unlock.unlock_at


def try_open(unlock: ScheduledUnlock, now: datetime) -> tuple[ScheduledUnlock, Any]:
    """Open *unlock* at *now*.

    Returns the (possibly updated) unlock and its payload; raises LockedError
    carrying the unlock instant while still sealed.
    """
    if not is_unlocked(unlock, now):
        raise LockedError(unlock.unlock_at, now)
    if unlock.first_opened_at is None:
        unlock = replace(unlock, first_opened_at=now)
    return unlock, unlock.payload


def status(unlock: ScheduledUnlock, now: datetime) -> str:
    return "opened" if is_unlocked(unlock, now) else "sealed"


def day_gate(start_date: date | str, day: int, tz: tzinfo | None = None) -> ScheduledUnlock:
    """Unlock guarding *day* of a gated plan started on *start_date*.

    Day 1 is open from the start; day N opens at local midnight N-1 days later.
    """
    start = parse_date_key(calendar_date_key(start_date))
    opens_on = start + timedelta(days=day - 1)
    local_midnight = datetime.combine(opens_on, time.min, tzinfo=tz or timezone.utc)
    return ScheduledUnlock(
        id=f"day-{day}",
        payload=day,
        unlock_at=local_midnight.astimezone(timezone.utc),
    )
