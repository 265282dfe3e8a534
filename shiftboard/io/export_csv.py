"""CSV export utilities."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import pandas as pd

from shiftboard.domain.models import Shift

SHIFT_COLUMNS = ["id", "employeeId", "dayIndex", "type", "start", "end"]


def shifts_to_frame(shifts: Sequence[Shift]) -> pd.DataFrame:
    """Snapshot as a DataFrame using the persisted column names."""
    return pd.DataFrame([s.to_record() for s in shifts], columns=SHIFT_COLUMNS)


def export_shifts_csv(shifts: Sequence[Shift], csv_path: str | Path) -> int:
    """
    Export a shift snapshot to CSV.
    
    Args:
        shifts: Snapshot to write
        csv_path: Output path
    
    Returns:
        Number of shifts exported
    """
    df = shifts_to_frame(shifts)
    df.to_csv(csv_path, index=False)
    print(f"[INFO] Exported {len(df)} shifts to {csv_path}")
    return len(df)


def export_weekly_hours_csv(summary: pd.DataFrame, csv_path: str | Path) -> int:
    """Write a weekly_hours_frame summary to CSV. Returns row count."""
    summary.to_csv(csv_path, index=False)
    print(f"[INFO] Exported weekly hours for {len(summary)} employees to {csv_path}")
    return len(summary)
