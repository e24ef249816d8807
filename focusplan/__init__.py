"""FocusPlan core library — settings, calendar import and day schedule generation.

Public API re-exports for convenient imports:
    from focusplan import plan_for_date, update_settings, import_calendar, ...
"""

# Errors
from focusplan.errors import InputError, PlannerError, ScheduleDefect

# Workspace & paths
from focusplan.workspace import (
    workspace_root,
    get_user_timezone,
    date_key,
    today_key,
    upcoming_date_keys,
    settings_path,
    calendar_path,
    adjustments_path,
    progress_path,
)

# Time arithmetic
from focusplan.clock import (
    to_minute_of_day,
    from_minute_of_day,
    parse_hhmm,
    format_hhmm,
    format_12h,
    format_duration,
)

# Calendar
from focusplan.events import (
    events_for_date,
    drop_overlapping,
    load_events,
    save_events,
    clear_events,
    import_calendar,
)
from focusplan.ics import parse_ics

# Peak windows
from focusplan.peak import PEAK_RANGES, resolve_peak_range

# Schedule generation
from focusplan.scheduler import generate_blocks, verify_schedule

# Goals
from focusplan.goals import (
    scheduled_focus_minutes,
    evaluate_goal,
    effective_goal,
    apply_adjustment,
    load_adjustments,
    save_adjustments,
)

# Settings
from focusplan.settings import load_settings, save_settings, update_settings

# Planning service
from focusplan.planner import plan_day, plan_for_date, week_days, adjust_focus, reset_adjustment

# Progress
from focusplan.progress import BlockTimer, load_progress, complete_block, set_active

# Models
from focusplan.models import (
    ClockTime,
    CalendarEvent,
    DayEvent,
    BlockKind,
    ScheduleBlock,
    ScheduleConfig,
    GoalStatus,
    DayPlan,
    Settings,
    Progress,
)
