"""Shift records and SQLAlchemy tables for the weekly schedule."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Mapping

from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase

from shiftboard.timeutils import is_valid_hhmm

from .errors import InvalidShiftError, MalformedPersistedData

DAYS_PER_WEEK = 7
DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


class ShiftType(str, Enum):
    DAY_SHIFT = "DAY_SHIFT"
    ON_CALL = "ON_CALL"
    MEETING = "MEETING"
    POST_CALL_REST = "POST_CALL_REST"

    @property
    def label(self) -> str:
        return SHIFT_LABELS[self]

    @classmethod
    def parse(cls, value: Any) -> "ShiftType":
        """Accept a ShiftType or its name (case-insensitive)."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise InvalidShiftError(f"Unknown shift type: {value!r}") from None


SHIFT_LABELS = {
    ShiftType.DAY_SHIFT: "Day",
    ShiftType.ON_CALL: "On-call",
    ShiftType.MEETING: "Meeting",
    ShiftType.POST_CALL_REST: "Post-call rest",
}


@dataclass(frozen=True)
class Shift:
    """One entry of an employee's recurring week. Instances are never mutated."""

    id: str
    employee_id: str
    day_index: int
    type: ShiftType
    start: str = ""
    end: str = ""

    @property
    def has_times(self) -> bool:
        return bool(self.start) and bool(self.end)

    def is_at(self, employee_id: str, day_index: int) -> bool:
        return self.employee_id == employee_id and self.day_index == day_index

    def with_changes(self, **changes: Any) -> "Shift":
        return replace(self, **changes)

    def to_record(self) -> Dict[str, Any]:
        """Serialise to the persisted snapshot shape."""
        return {
            "id": self.id,
            "employeeId": self.employee_id,
            "dayIndex": self.day_index,
            "type": self.type.value,
            "start": self.start,
            "end": self.end,
        }

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Shift":
        """Build a Shift from a persisted record, raising MalformedPersistedData on bad input."""
        if not isinstance(record, Mapping):
            raise MalformedPersistedData(f"Shift record must be an object, got {type(record).__name__}")
        try:
            shift = cls(
                id=str(record["id"]),
                employee_id=str(record["employeeId"]),
                day_index=int(record["dayIndex"]),
                type=ShiftType.parse(record["type"]),
                start=str(record.get("start") or ""),
                end=str(record.get("end") or ""),
            )
            validate_shift_fields(shift.day_index, shift.type, shift.start, shift.end)
            return shift
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedPersistedData(f"Invalid shift record {dict(record)!r}: {e}") from e

    def __repr__(self) -> str:
        return (
            f"<Shift(id={self.id}, emp={self.employee_id}, day={self.day_index}, "
            f"type={self.type.value}, {self.start or '--'}-{self.end or '--'})>"
        )


def validate_shift_fields(day_index: Any, shift_type: ShiftType, start: str, end: str) -> None:
    """
    Check the field constraints every stored shift must satisfy.

    Raises:
        InvalidShiftError: If the day is out of range or the times are malformed
    """
    if isinstance(day_index, bool) or not isinstance(day_index, int) or not 0 <= day_index < DAYS_PER_WEEK:
        raise InvalidShiftError(f"day_index must be an integer in 0..6, got {day_index!r}")
    if shift_type is ShiftType.POST_CALL_REST:
        if start or end:
            raise InvalidShiftError("POST_CALL_REST shifts carry no start/end times")
        return
    for name, value in (("start", start), ("end", end)):
        if not is_valid_hhmm(value):
            raise InvalidShiftError(f"{name} must be a zero-padded HH:MM time, got {value!r}")


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class Employee(Base):
    """Roster entry. Shifts reference it only by id."""

    __tablename__ = "employees"

    id = Column(String(64), primary_key=True)
    name = Column(String(200), nullable=False)
    role = Column(String(100), nullable=True)
    status = Column(String(20), nullable=False, default="active")  # active, inactive

    def __repr__(self) -> str:
        return f"<Employee(id={self.id}, name='{self.name}', status='{self.status}')>"


class KeyValueEntry(Base):
    """Serialized snapshot stored under a namespaced key."""

    __tablename__ = "kv_store"

    key = Column(String(200), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
    revision = Column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<KeyValueEntry(key='{self.key}', revision={self.revision})>"
