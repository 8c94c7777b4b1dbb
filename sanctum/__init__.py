"""Sanctum engagement engine — streaks, plan progress, sealed content, weekly activity.

Public API re-exports for convenient imports:
    from sanctum import EngagementFacade, LocalStore, FixedClock, ...
"""

# Dates & clock
from sanctum.dates import (
    DAY_LABELS,
    to_calendar_date,
    calendar_date_key,
    parse_date_key,
    days_between,
    start_of_week,
    week_dates,
)
from sanctum.clock import ClockSource, SystemClock, FixedClock

# Errors
from sanctum.errors import (
    SanctumError,
    AlreadyStartedError,
    InvalidDayError,
    LockedError,
    StoreError,
    StaleStateError,
    NotFoundError,
)

# Models
from sanctum.models import (
    StreakState,
    ScheduledUnlock,
    PlanProgress,
    ActivityLogEntry,
    DayBucket,
    WeeklySummary,
    PlanDefinition,
)

# Pure engines
from sanctum.streaks import MILESTONES, record_engagement, next_milestone, milestone_progress
from sanctum.unlock import create_unlock, is_unlocked, try_open, day_gate
from sanctum.plans import start_plan, complete_day, next_incomplete_day
from sanctum.activity import weekly_buckets, total_weekly_minutes, append_entry

# Adapters & facade
from sanctum.config import Settings, load_settings, workspace_root
from sanctum.store import Store, LocalStore, RemoteStore, open_store
from sanctum.content import ContentGenerator, TemplateContentGenerator, GuardedContentGenerator
from sanctum.engagement import EngagementFacade
