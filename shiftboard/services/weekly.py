"""Read-side views over the shift snapshot."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from shiftboard.domain.models import DAYS_PER_WEEK, Employee, Shift, ShiftType
from shiftboard.domain.repositories import ShiftRepository
from shiftboard.timeutils import duration_minutes, format_minutes, to_minutes


def rest_sorts_last(shift: Shift) -> Tuple[bool, int]:
    """Sort key for a day's bucket: by start time, post-call rests at the end."""
    return shift.type is ShiftType.POST_CALL_REST, to_minutes(shift.start)


def group_week(shifts: Iterable[Shift], employee_id: str) -> Dict[int, List[Shift]]:
    week: Dict[int, List[Shift]] = {d: [] for d in range(DAYS_PER_WEEK)}
    for shift in shifts:
        if shift.employee_id == employee_id and shift.day_index in week:
            week[shift.day_index].append(shift)
    for bucket in week.values():
        bucket.sort(key=rest_sorts_last)
    return week


def counts_toward_hours(shift: Shift) -> bool:
    return shift.type is not ShiftType.POST_CALL_REST and shift.has_times


def weekly_minutes(shifts: Iterable[Shift], employee_id: str) -> int:
    """Total minutes worked in the week, overnight shifts counted past midnight."""
    return sum(
        duration_minutes(s.start, s.end)
        for s in shifts
        if s.employee_id == employee_id and counts_toward_hours(s)
    )


def compute_weekly_minutes(repository: ShiftRepository, employee_id: str) -> int:
    """Weekly minutes read straight from the stored snapshot."""
    return weekly_minutes(repository.load(), employee_id)


class WeeklyView:
    """
    Derived views for one repository.

    Holds no copy of the snapshot: each call reads the latest one, so views
    built on separate instances agree after any save.
    """

    def __init__(self, repository: ShiftRepository):
        self.repository = repository

    def get_week_schedule(self, employee_id: str) -> Dict[int, List[Shift]]:
        """Shifts bucketed by day index 0..6, each bucket ordered by start."""
        return group_week(self.repository.load(), employee_id)

    def get_weekly_minutes(self, employee_id: str) -> int:
        return weekly_minutes(self.repository.load(), employee_id)


def weekly_hours_frame(
    shifts: Sequence[Shift],
    employees: Optional[Iterable[Employee]] = None,
    threshold_hours: float = 60.0,
) -> pd.DataFrame:
    """
    Summarise weekly hours per employee.

    Args:
        shifts: Snapshot to summarise
        employees: Optional roster; listed employees appear even with no shifts
        threshold_hours: Hours at or above which over_threshold is set

    Returns:
        DataFrame with employee_id, name, minutes, hours, label, over_threshold
    """
    rows = [
        {"employee_id": s.employee_id, "minutes": duration_minutes(s.start, s.end)}
        for s in shifts
        if counts_toward_hours(s)
    ]
    worked = pd.DataFrame(rows, columns=["employee_id", "minutes"])
    totals = worked.groupby("employee_id", as_index=False)["minutes"].sum()

    roster = pd.DataFrame(
        [{"employee_id": e.id, "name": e.name} for e in (employees or [])],
        columns=["employee_id", "name"],
    )
    all_ids = pd.DataFrame(
        {"employee_id": pd.unique(pd.concat([roster["employee_id"], totals["employee_id"]]))}
    )
    df = all_ids.merge(roster, on="employee_id", how="left").merge(totals, on="employee_id", how="left")
    df["name"] = df["name"].fillna("")
    df["minutes"] = df["minutes"].fillna(0).astype(int)
    df["hours"] = (df["minutes"] / 60).round(2)
    df["label"] = df["minutes"].map(format_minutes)
    df["over_threshold"] = df["hours"] >= threshold_hours
    return df[["employee_id", "name", "minutes", "hours", "label", "over_threshold"]]
