"""CSV import utilities."""

from __future__ import annotations

from pathlib import Path
from typing import Tuple

import pandas as pd

from shiftboard.domain.errors import MalformedPersistedData
from shiftboard.domain.models import Shift

_TEXT_COLUMNS = {"id": str, "employeeId": str, "type": str, "start": str, "end": str}


def import_shifts_csv(csv_path: str | Path) -> Tuple[Shift, ...]:
    """
    Read a shift snapshot previously written by export_shifts_csv.
    
    Args:
        csv_path: Path to shifts CSV
    
    Returns:
        Tuple of shifts in file order
    
    Raises:
        MalformedPersistedData: If a row is missing fields or breaks a field constraint
    """
    df = pd.read_csv(csv_path, dtype=_TEXT_COLUMNS, keep_default_na=False)
    
    # Normalize column names
    df.columns = df.columns.str.strip()
    missing = {"id", "employeeId", "dayIndex", "type"} - set(df.columns)
    if missing:
        raise MalformedPersistedData(f"{csv_path} is missing columns: {sorted(missing)}")
    
    shifts = []
    for record in df.to_dict(orient="records"):
        shifts.append(Shift.from_record(record))
    
    print(f"[INFO] Imported {len(shifts)} shifts from {csv_path}")
    return tuple(shifts)
