"""Typed dataclasses for the engagement engine's persisted state.

All models use from_dict/to_dict for JSON serialization.
camelCase in JSON is mapped to snake_case in Python.
Unknown keys are ignored; missing keys use defaults.
Calendar dates are kept as ``YYYY-MM-DD`` keys, instants as UTC datetimes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


def _parse_instant(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        text = str(value)
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        dt = datetime.fromisoformat(text)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _format_instant(value: datetime | None) -> str | None:
    if value is None:
        return None
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


# ── Streak ────────────────────────────────────────────────────


@dataclass
class StreakState:
    current_streak: int = 0
    longest_streak: int = 0
    last_engaged_date: str | None = None
    total_engaged_days: int = 0
    milestones_reached: list[int] = field(default_factory=list)

    @classmethod
    def from_dict(cls, d: dict[str, Any] | None) -> StreakState:
        if not d or not isinstance(d, dict):
            return cls()
        return cls(
            current_streak=int(d.get("currentStreak", 0) or 0),
            longest_streak=int(d.get("longestStreak", 0) or 0),
            last_engaged_date=d.get("lastEngagedDate"),
            total_engaged_days=int(d.get("totalEngagedDays", 0) or 0),
            milestones_reached=sorted({int(m) for m in (d.get("milestonesReached") or [])}),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "currentStreak": self.current_streak,
            "longestStreak": self.longest_streak,
            "lastEngagedDate": self.last_engaged_date,
            "totalEngagedDays": self.total_engaged_days,
            "milestonesReached": sorted(self.milestones_reached),
        }


# ── Scheduled unlock ──────────────────────────────────────────


@dataclass
class ScheduledUnlock:
    id: str = ""
    payload: Any = None
    created_at: datetime | None = None
    unlock_at: datetime | None = None  # None: readable immediately
    first_opened_at: datetime | None = None
    scripture_seal: dict[str, Any] | None = None

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> ScheduledUnlock:
        if not d or not isinstance(d, dict):
            return cls()
        return cls(
            id=str(d.get("id", "")),
            payload=d.get("payload"),
            created_at=_parse_instant(d.get("createdAt")),
            unlock_at=_parse_instant(d.get("unlockAt")),
            first_opened_at=_parse_instant(d.get("firstOpenedAt")),
            scripture_seal=d.get("scriptureSeal"),
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "id": self.id,
            "payload": self.payload,
            "createdAt": _format_instant(self.created_at),
            "unlockAt": _format_instant(self.unlock_at),
            "firstOpenedAt": _format_instant(self.first_opened_at),
        }
        if self.scripture_seal:
            d["scriptureSeal"] = self.scripture_seal
        return d


# ── Plan progress ─────────────────────────────────────────────


@dataclass
class PlanProgress:
    plan_id: str = ""
    total_days: int = 1
    current_day: int = 1
    completed_days: list[int] = field(default_factory=list)
    is_completed: bool = False
    start_date: str = ""
    kind: str = "devotional"  # devotional, fasting
    gated: bool = False
    day_notes: dict[int, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> PlanProgress:
        if not d or not isinstance(d, dict):
            return cls()
        notes = {int(k): v for k, v in (d.get("dayNotes") or {}).items()}
        return cls(
            plan_id=str(d.get("planId", "")),
            total_days=int(d.get("totalDays", 1)),
            current_day=int(d.get("currentDay", 1)),
            completed_days=sorted({int(x) for x in (d.get("completedDays") or [])}),
            is_completed=bool(d.get("isCompleted", False)),
            start_date=str(d.get("startDate", "")),
            kind=str(d.get("kind", "devotional")),
            gated=bool(d.get("gated", False)),
            day_notes=notes,
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "planId": self.plan_id,
            "totalDays": self.total_days,
            "currentDay": self.current_day,
            "completedDays": sorted(self.completed_days),
            "isCompleted": self.is_completed,
            "startDate": self.start_date,
            "kind": self.kind,
            "gated": self.gated,
        }
        if self.day_notes:
            # JSON object keys are strings
            d["dayNotes"] = {str(k): v for k, v in sorted(self.day_notes.items())}
        return d


# ── Activity ──────────────────────────────────────────────────


@dataclass
class ActivityLogEntry:
    date: str = ""
    duration_minutes: float = 0.0
    tag: str = "prayer"

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> ActivityLogEntry:
        if not d or not isinstance(d, dict):
            return cls()
        return cls(
            date=str(d.get("date", "")),
            duration_minutes=float(d.get("durationMinutes", 0.0) or 0.0),
            tag=str(d.get("tag", "prayer")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"date": self.date, "durationMinutes": self.duration_minutes, "tag": self.tag}


@dataclass
class DayBucket:
    label: str = ""
    date: str = ""
    total_minutes: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.label, "date": self.date, "minutes": self.total_minutes}


@dataclass
class WeeklySummary:
    week_start: str = ""
    buckets: list[DayBucket] = field(default_factory=list)
    total_minutes: float = 0.0
    minutes_by_tag: dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "weekStart": self.week_start,
            "days": [b.to_dict() for b in self.buckets],
            "totalMinutes": self.total_minutes,
            "minutesByTag": self.minutes_by_tag,
        }


# ── Plan catalog ──────────────────────────────────────────────


@dataclass
class PlanDefinition:
    id: str = ""
    title: str = ""
    kind: str = "devotional"
    duration: int = 1
    description: str = ""
    days: dict[int, dict[str, Any]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> PlanDefinition:
        if not d or not isinstance(d, dict):
            return cls()
        days = {}
        for entry in d.get("days") or []:
            if isinstance(entry, dict) and "day" in entry:
                days[int(entry["day"])] = {k: v for k, v in entry.items() if k != "day"}
        duration = d.get("duration")
        return cls(
            id=str(d.get("id", "")),
            title=str(d.get("title", "")),
            kind=str(d.get("kind", "devotional")),
            duration=int(duration) if duration is not None else max(len(days), 1),
            description=str(d.get("description", "")),
            days=days,
        )
