"""Error taxonomy for the Sanctum engagement engine.

- SanctumError: base class for every known failure
- AlreadyStartedError / InvalidDayError: caller mistakes, never retried
- LockedError: expected outcome while sealed content is still time-gated
- StoreError: backend I/O failure, surfaced to the caller as "try again"
- StaleStateError: an engagement dated before the last recorded one
- NotFoundError: unknown plan or sealed item id
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta


class SanctumError(Exception):
    """Base class for all engine errors."""

    def __init__(self, message: str, hint: str | None = None):
        self.message = message
        self.hint = hint
        super().__init__(message)

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message} ({self.hint})"
        return self.message


class AlreadyStartedError(SanctumError):
    def __init__(self, plan_id: str):
        self.plan_id = plan_id
        super().__init__(
            f"Plan {plan_id!r} is already started",
            hint="continue the existing progress instead of restarting it",
        )


class InvalidDayError(SanctumError):
    def __init__(self, day: int, total_days: int):
        self.day = day
        self.total_days = total_days
        if total_days < 1:
            message = f"A plan needs at least one day, got {total_days}"
        else:
            message = f"Day {day} is outside 1..{total_days}"
        super().__init__(message)


class LockedError(SanctumError):
    """Sealed content is not readable yet.

    ``remaining_days`` is rounded up so an item sealed for 30 days never
    reports "0 days left" while it is still locked.
    """

    def __init__(self, unlocks_at: datetime, now: datetime):
        self.unlocks_at = unlocks_at
        self.remaining = max(unlocks_at - now, timedelta(0))
        super().__init__(
            f"Sealed until {unlocks_at.isoformat(timespec='seconds')}",
            hint=f"opens in {self.remaining_days} day(s)",
        )

    @property
    def remaining_days(self) -> int:
        return math.ceil(self.remaining / timedelta(days=1))


class StoreError(SanctumError):
    def __init__(self, message: str, key: str | None = None):
        self.key = key
        super().__init__(message, hint="couldn't save, try again")


class StaleStateError(SanctumError):
    def __init__(self, today: str, last_engaged: str):
        self.today = today
        self.last_engaged = last_engaged
        super().__init__(f"Engagement on {today} is older than last engagement {last_engaged}")


class NotFoundError(SanctumError):
    def __init__(self, kind: str, ident: str):
        self.kind = kind
        self.ident = ident
        super().__init__(f"No {kind} with id {ident!r}")
