"""Domain models and data access layer."""

from .errors import InvalidShiftError, MalformedPersistedData, PersistenceError, RuleViolation, ShiftboardError
from .models import Base, Employee, KeyValueEntry, Shift, ShiftType
from .repositories import (
    EmployeeRepository,
    InMemoryShiftRepository,
    ShiftRepository,
    SqlShiftRepository,
)

__all__ = [
    "Shift",
    "ShiftType",
    "Employee",
    "KeyValueEntry",
    "Base",
    "ShiftRepository",
    "InMemoryShiftRepository",
    "SqlShiftRepository",
    "EmployeeRepository",
    "ShiftboardError",
    "RuleViolation",
    "InvalidShiftError",
    "MalformedPersistedData",
    "PersistenceError",
]
