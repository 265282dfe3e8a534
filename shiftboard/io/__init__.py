"""I/O utilities for CSV import/export."""

from .export_csv import export_shifts_csv, export_weekly_hours_csv, shifts_to_frame
from .import_csv import import_shifts_csv

__all__ = [
    "export_shifts_csv",
    "export_weekly_hours_csv",
    "shifts_to_frame",
    "import_shifts_csv",
]
