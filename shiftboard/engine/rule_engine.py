"""Rule engine: the only writer of the shift snapshot."""

from __future__ import annotations

import uuid
from typing import Any, Callable, Mapping, Optional, Tuple

from shiftboard.config import ShiftboardConfig, load_config
from shiftboard.domain.errors import InvalidShiftError, RuleViolation
from shiftboard.domain.models import Shift, ShiftType, validate_shift_fields
from shiftboard.domain.repositories import ShiftRepository, Snapshot
from shiftboard.services.rules import (
    apply_on_call_coupling,
    is_day_locked,
    merge_overlapping_shifts,
    revert_post_call_rest,
    split_day_shifts_by_meetings,
)

_PATCH_FIELDS = {
    "employee_id": "employee_id",
    "employeeId": "employee_id",
    "day_index": "day_index",
    "dayIndex": "day_index",
    "type": "type",
    "start": "start",
    "end": "end",
}


def _new_id() -> str:
    return uuid.uuid4().hex


class RuleEngine:
    """
    Applies shift mutations and their coupling rules.

    Every call loads the current snapshot, derives a new one with the pure
    functions in shiftboard.services.rules and saves it in a single write, so
    readers never see a half-applied rule chain.

    update_shift is a plain field patch: it does not split, merge or couple.
    Only add_shift and delete_shift run the rules.
    """

    def __init__(
        self,
        repository: ShiftRepository,
        cfg: ShiftboardConfig | None = None,
        id_factory: Callable[[], str] = _new_id,
    ):
        self.repository = repository
        self.cfg = cfg or load_config()
        self._new_id = id_factory

    def snapshot(self) -> Snapshot:
        return self.repository.load()

    def build_candidate(
        self,
        employee_id: str,
        day_index: int,
        shift_type: ShiftType | str,
        start: str | None = None,
        end: str | None = None,
    ) -> Shift:
        """
        Validate a new shift and fill in default hours.

        Args:
            employee_id: Owning employee (not checked against the roster)
            day_index: 0 (Monday) to 6 (Sunday)
            shift_type: ShiftType or its name
            start: 'HH:MM', or None for the type's default
            end: 'HH:MM', or None for the type's default

        Returns:
            Shift with a fresh id

        Raises:
            InvalidShiftError: If any field is malformed
        """
        shift_type = ShiftType.parse(shift_type)
        if shift_type is ShiftType.POST_CALL_REST:
            start, end = "", ""
        else:
            defaults = self.cfg.hours_for(shift_type)
            start = defaults.start if start is None else start
            end = defaults.end if end is None else end
        validate_shift_fields(day_index, shift_type, start, end)
        return Shift(
            id=self._new_id(),
            employee_id=str(employee_id),
            day_index=day_index,
            type=shift_type,
            start=start,
            end=end,
        )

    def add_shift(
        self,
        employee_id: str,
        day_index: int,
        shift_type: ShiftType | str,
        start: str | None = None,
        end: str | None = None,
    ) -> Snapshot:
        """
        Add a shift and apply the coupling rules.

        Returns:
            The saved snapshot

        Raises:
            InvalidShiftError: If the candidate is malformed
            RuleViolation: If the day holds a post-call rest and the shift is not a meeting
            PersistenceError: If the snapshot could not be saved
        """
        candidate = self.build_candidate(employee_id, day_index, shift_type, start, end)
        current = self.repository.load()

        if candidate.type is not ShiftType.MEETING and is_day_locked(
            current, candidate.employee_id, candidate.day_index
        ):
            print(
                f"[WARN] Rejected {candidate.type.value} for employee {candidate.employee_id} "
                f"on day {candidate.day_index}: only meetings are allowed on post-call rest days"
            )
            raise RuleViolation(
                "Only meetings are allowed on days with post-call rest",
                employee_id=candidate.employee_id,
                day_index=candidate.day_index,
            )

        shifts = current + (candidate,)
        shifts = split_day_shifts_by_meetings(shifts, self._new_id)
        shifts = merge_overlapping_shifts(shifts)
        if candidate.type is ShiftType.ON_CALL:
            shifts = apply_on_call_coupling(shifts, candidate, self._new_id)

        return self.repository.save(shifts)

    def update_shift(self, shift_id: str, patch: Mapping[str, Any]) -> Optional[Shift]:
        """
        Patch fields of one shift without re-running any rule.

        Unknown ids are ignored (returns None). Patched values are validated.
        """
        changes = {}
        for key, value in patch.items():
            if key not in _PATCH_FIELDS:
                raise InvalidShiftError(f"Cannot update field {key!r}")
            changes[_PATCH_FIELDS[key]] = value
        if "type" in changes:
            changes["type"] = ShiftType.parse(changes["type"])
        if "employee_id" in changes:
            changes["employee_id"] = str(changes["employee_id"])

        current = self.repository.load()
        for i, shift in enumerate(current):
            if shift.id != shift_id:
                continue
            updated = shift.with_changes(**changes)
            validate_shift_fields(updated.day_index, updated.type, updated.start, updated.end)
            self.repository.save(current[:i] + (updated,) + current[i + 1:])
            return updated
        return None

    def delete_shift(self, shift_id: str) -> Optional[Shift]:
        """
        Remove a shift. Removing an on-call turns the next day's rest back
        into a day shift with the default day hours.

        Returns:
            The removed shift, or None if the id is unknown
        """
        current = self.repository.load()
        removed = next((s for s in current if s.id == shift_id), None)
        if removed is None:
            return None

        shifts: Tuple[Shift, ...] = tuple(s for s in current if s.id != shift_id)
        if removed.type is ShiftType.ON_CALL:
            day_hours = self.cfg.hours_for(ShiftType.DAY_SHIFT)
            shifts = revert_post_call_rest(shifts, removed, day_hours.start, day_hours.end)

        self.repository.save(shifts)
        return removed
