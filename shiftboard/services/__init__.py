"""Services for scheduling logic."""

from .rules import (
    apply_on_call_coupling,
    is_day_locked,
    merge_overlapping_shifts,
    next_day,
    revert_post_call_rest,
    split_day_shifts_by_meetings,
)
from .weekly import WeeklyView, compute_weekly_minutes, weekly_hours_frame

__all__ = [
    "apply_on_call_coupling",
    "is_day_locked",
    "merge_overlapping_shifts",
    "next_day",
    "revert_post_call_rest",
    "split_day_shifts_by_meetings",
    "WeeklyView",
    "compute_weekly_minutes",
    "weekly_hours_frame",
]
