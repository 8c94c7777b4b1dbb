"""The engine's only source of "now"."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Protocol

from sanctum.dates import to_calendar_date


class ClockSource(Protocol):
    tz: tzinfo

    def now(self) -> datetime:
        """Current instant, UTC-anchored."""
        ...

    def today(self) -> date:
        """Current calendar date in the user's zone."""
        ...


class SystemClock:
    def __init__(self, tz: tzinfo | None = None):
        self.tz = tz or timezone.utc

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def today(self) -> date:
        return to_calendar_date(self.now(), self.tz)


class FixedClock:
    """Settable clock for tests and replays."""

    def __init__(self, instant: datetime, tz: tzinfo | None = None):
        self.tz = tz or timezone.utc
        self.set(instant)

    def set(self, instant: datetime) -> None:
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=self.tz)
        self._now = instant.astimezone(timezone.utc)

    def advance(self, **kwargs: float) -> datetime:
        self._now += timedelta(**kwargs)
        return self._now

    def now(self) -> datetime:
        return self._now

    def today(self) -> date:
        return to_calendar_date(self._now, self.tz)
