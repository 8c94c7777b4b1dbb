"""EngagementFacade: the operations the UI calls.

Each operation loads one state object from the injected Store, applies a
pure function from streaks/plans/unlock/activity, saves the result wholesale
and returns it. Nothing is cached between calls, so a failed save leaves
neither the store nor the facade half-updated.
"""

from __future__ import annotations

from datetime import date, timedelta
from pathlib import Path
from typing import Any

from sanctum import activity, plans, streaks, unlock
from sanctum.catalog import find_plan, load_catalog, plan_day_content
from sanctum.clock import ClockSource, SystemClock
from sanctum.config import Settings, load_settings, workspace_root
from sanctum.content import ContentGenerator, GuardedContentGenerator, TemplateContentGenerator
from sanctum.errors import LockedError, NotFoundError, StaleStateError
from sanctum.logger import get_logger
from sanctum.models import (
    ActivityLogEntry,
    PlanDefinition,
    PlanProgress,
    ScheduledUnlock,
    StreakState,
    WeeklySummary,
)
from sanctum.store import Store, open_store


log = get_logger("engagement")

STREAK_KEY = "streak"
PLANS_KEY = "plans"
SEALED_KEY = "sealed"
ACTIVITY_KEY = "activity_log"


class EngagementFacade:
    def __init__(
        self,
        store: Store,
        clock: ClockSource,
        content: ContentGenerator | None = None,
        settings: Settings | None = None,
        catalog: dict[str, PlanDefinition] | None = None,
    ):
        self.store = store
        self.clock = clock
        self.content = GuardedContentGenerator(content, TemplateContentGenerator(clock))
        self.settings = settings or Settings()
        self.catalog = catalog or {}

    @classmethod
    def from_workspace(
        cls,
        root: Path | None = None,
        clock: ClockSource | None = None,
        content: ContentGenerator | None = None,
    ) -> EngagementFacade:
        """Build a facade from ``profile.yaml`` and ``plans.yaml`` under *root*."""
        if root is None:
            root = workspace_root()
        settings = load_settings(root)
        return cls(
            store=open_store(settings, root),
            clock=clock or SystemClock(settings.tzinfo()),
            content=content,
            settings=settings,
            catalog=load_catalog(root),
        )

    def close(self) -> None:
        """Release the store's connections, if it holds any."""
        close = getattr(self.store, "close", None)
        if close is not None:
            close()

    # ── State loading ─────────────────────────────────────────

    def _load_streak(self) -> StreakState:
        return StreakState.from_dict(self.store.load(STREAK_KEY))

    def _load_plans(self) -> dict[str, PlanProgress]:
        data = self.store.load(PLANS_KEY) or {}
        return {pid: PlanProgress.from_dict(p) for pid, p in data.items()}

    def _save_plans(self, all_plans: dict[str, PlanProgress]) -> None:
        self.store.save(PLANS_KEY, {pid: p.to_dict() for pid, p in all_plans.items()})

    def _load_sealed(self) -> dict[str, ScheduledUnlock]:
        data = self.store.load(SEALED_KEY) or {}
        return {sid: ScheduledUnlock.from_dict(s) for sid, s in data.items()}

    def _save_sealed(self, sealed: dict[str, ScheduledUnlock]) -> None:
        self.store.save(SEALED_KEY, {sid: s.to_dict() for sid, s in sealed.items()})

    def _load_log(self) -> list[ActivityLogEntry]:
        return [ActivityLogEntry.from_dict(e) for e in (self.store.load(ACTIVITY_KEY) or [])]

    # ── Streak ────────────────────────────────────────────────

    def record_engagement_today(
        self,
        duration_minutes: float | None = None,
        tag: str = "prayer",
    ) -> StreakState:
        """Count today toward the streak, optionally logging minutes spent.

        The activity entry is validated before anything is saved, so a
        rejected duration leaves the streak untouched.
        """
        today = self.clock.today()
        updated_log = None
        if duration_minutes is not None:
            entry = ActivityLogEntry(date=str(today), duration_minutes=float(duration_minutes), tag=tag)
            updated_log = activity.append_entry(
                self._load_log(), entry, self.settings.activity_retention
            )

        state = self._load_streak()
        try:
            updated = streaks.record_engagement(state, today)
        except StaleStateError as e:
            log.warning("ignoring out-of-order engagement: %s", e)
            updated = state

        if updated is not state:
            self.store.save(STREAK_KEY, updated.to_dict())
            if updated.milestones_reached != state.milestones_reached:
                new = sorted(set(updated.milestones_reached) - set(state.milestones_reached))
                log.info("streak milestone reached: %s", new)

        if updated_log is not None:
            self.store.save(ACTIVITY_KEY, [e.to_dict() for e in updated_log])
        return updated

    def current_streak_summary(self) -> dict[str, Any]:
        state = self._load_streak()
        summary = state.to_dict()
        summary["nextMilestone"] = streaks.next_milestone(state.current_streak)
        summary["milestoneProgress"] = streaks.milestone_progress(state)
        summary["isAlive"] = streaks.is_streak_alive(state, self.clock.today())
        return summary

    # ── Plans ─────────────────────────────────────────────────

    def start_plan(
        self,
        plan_id: str,
        total_days: int | None = None,
        kind: str | None = None,
        gated: bool | None = None,
    ) -> PlanProgress:
        """Begin *plan_id*. Length and kind default to the catalog entry.

        Fasting plans are gated by default: day N opens on the Nth calendar day.
        """
        if total_days is None or kind is None:
            definition = self.catalog.get(plan_id)
            if total_days is None:
                total_days = find_plan(self.catalog, plan_id).duration
            if kind is None:
                kind = definition.kind if definition else "devotional"
        if gated is None:
            gated = kind == "fasting"

        all_plans = self._load_plans()
        progress = plans.start_plan(
            plan_id,
            total_days,
            self.clock.today(),
            existing=all_plans,
            kind=kind,
            gated=gated,
        )
        all_plans[plan_id] = progress
        self._save_plans(all_plans)
        log.info("started plan %s (%d days, %s)", plan_id, total_days, kind)
        return progress

    def complete_day(self, plan_id: str, day: int, note: Any = None) -> PlanProgress:
        all_plans = self._load_plans()
        progress = all_plans.get(plan_id)
        if progress is None:
            raise NotFoundError("plan", plan_id)

        if progress.gated and 1 <= day <= progress.total_days and day not in progress.completed_days:
            gate = unlock.day_gate(progress.start_date, day, self.clock.tz)
            now = self.clock.now()
            if not unlock.is_unlocked(gate, now):
                raise LockedError(gate.unlock_at, now)

        updated = plans.complete_day(progress, day, note)
        if updated is progress:
            return progress

        all_plans[plan_id] = updated
        self._save_plans(all_plans)
        if updated.is_completed:
            log.info("plan %s completed", plan_id)
        return updated

    def plan_summary(self, plan_id: str) -> dict[str, Any]:
        progress = self._load_plans().get(plan_id)
        if progress is None:
            raise NotFoundError("plan", plan_id)
        return self._summarize_plan(progress)

    def list_plans(self) -> list[dict[str, Any]]:
        return [self._summarize_plan(p) for p in self._load_plans().values()]

    def _summarize_plan(self, progress: PlanProgress) -> dict[str, Any]:
        summary = plans.summarize(progress, self.clock.today())
        if progress.plan_id in self.catalog:
            summary["title"] = self.catalog[progress.plan_id].title
            summary["currentDayContent"] = plan_day_content(
                self.catalog, progress.plan_id, progress.current_day
            )
        return summary

    # ── Sealed content ────────────────────────────────────────

    def seal_content(
        self,
        payload: Any,
        delay_days: float,
        with_scripture: bool = False,
    ) -> ScheduledUnlock:
        """Seal *payload* for *delay_days*; 0 makes it readable immediately."""
        now = self.clock.now()
        item = unlock.create_unlock(payload, timedelta(days=delay_days), now)
        if with_scripture:
            item.scripture_seal = self.content.generate(
                "scripture_seal",
                {"date": self.clock.today().isoformat(), "text": str(payload)},
            )
        sealed = self._load_sealed()
        sealed[item.id] = item
        self._save_sealed(sealed)
        log.info("sealed %s until %s", item.id, item.unlock_at)
        return item

    def try_open_sealed(self, sealed_id: str) -> Any:
        """Payload of *sealed_id*; raises LockedError while still sealed."""
        sealed = self._load_sealed()
        item = sealed.get(sealed_id)
        if item is None:
            raise NotFoundError("sealed item", sealed_id)

        opened, payload = unlock.try_open(item, self.clock.now())
        if opened is not item:
            sealed[sealed_id] = opened
            self._save_sealed(sealed)
            log.info("opened sealed item %s", sealed_id)
        return payload

    def list_sealed(self) -> list[dict[str, Any]]:
        """Sealed items newest first; payloads of locked items are withheld."""
        now = self.clock.now()
        out = []
        for item in self._load_sealed().values():
            d = item.to_dict()
            d["status"] = unlock.status(item, now)
            if d["status"] == "sealed":
                d.pop("payload")
                d["daysRemaining"] = LockedError(item.unlock_at, now).remaining_days
            else:
                d["daysRemaining"] = 0
            out.append(d)
        out.sort(key=lambda d: d.get("createdAt") or "", reverse=True)
        return out

    # ── Activity ──────────────────────────────────────────────

    def log_activity(
        self,
        duration_minutes: float,
        tag: str = "prayer",
        day: date | str | None = None,
    ) -> ActivityLogEntry:
        entry = ActivityLogEntry(
            date=str(day or self.clock.today()),
            duration_minutes=float(duration_minutes),
            tag=tag,
        )
        updated = activity.append_entry(self._load_log(), entry, self.settings.activity_retention)
        self.store.save(ACTIVITY_KEY, [e.to_dict() for e in updated])
        return updated[0]

    def weekly_summary(self, reference_date: date | str | None = None) -> WeeklySummary:
        return activity.weekly_summary(self._load_log(), reference_date or self.clock.today())

    # ── Misc ──────────────────────────────────────────────────

    def daily_verse(self) -> dict[str, Any]:
        return self.content.generate("daily_verse", {"date": self.clock.today().isoformat()})

    def export_state(self) -> dict[str, Any]:
        """Every persisted state object, e.g. for a user data export."""
        return {
            STREAK_KEY: self._load_streak().to_dict(),
            PLANS_KEY: {pid: p.to_dict() for pid, p in self._load_plans().items()},
            SEALED_KEY: {sid: s.to_dict() for sid, s in self._load_sealed().items()},
            ACTIVITY_KEY: [e.to_dict() for e in self._load_log()],
        }
