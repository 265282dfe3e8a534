"""Exceptions raised by the shift rule engine and its repositories."""

from __future__ import annotations


class ShiftboardError(Exception):
    """Base class for all shiftboard errors."""


class RuleViolation(ShiftboardError):
    """A mutation was rejected because it would break a scheduling rule."""

    def __init__(self, message: str, employee_id: str | None = None, day_index: int | None = None):
        super().__init__(message)
        self.employee_id = employee_id
        self.day_index = day_index


class InvalidShiftError(ShiftboardError, ValueError):
    """A shift candidate or patch carries malformed fields."""


class MalformedPersistedData(ShiftboardError):
    """A stored snapshot could not be decoded."""


class PersistenceError(ShiftboardError):
    """Saving a snapshot failed; the mutation is not durable."""
