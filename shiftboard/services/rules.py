"""
Pure snapshot transformations behind the rule engine.

Every function takes a sequence of shifts and returns a new tuple; nothing
here touches a repository. Interval comparisons use overnight-corrected
minute spans, so an end at or before the start runs past midnight.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Sequence, Tuple

from shiftboard.domain.models import DAYS_PER_WEEK, Shift, ShiftType
from shiftboard.timeutils import MINUTES_PER_DAY, from_minutes, span, spans_overlap

IdFactory = Callable[[], str]


def next_day(day_index: int) -> int:
    """Day after day_index, Sunday wrapping to Monday."""
    return (day_index + 1) % DAYS_PER_WEEK


def is_day_locked(shifts: Sequence[Shift], employee_id: str, day_index: int) -> bool:
    """True when the employee already has a post-call rest on that day."""
    return any(
        s.type is ShiftType.POST_CALL_REST and s.is_at(employee_id, day_index)
        for s in shifts
    )


def _timed_overlap(a: Shift, b: Shift) -> bool:
    if not (a.has_times and b.has_times):
        return False
    return spans_overlap(span(a.start, a.end), span(b.start, b.end))


def _split_fragments(day_shift: Shift, meeting: Shift, new_id: IdFactory) -> List[Shift]:
    day_start, day_end = span(day_shift.start, day_shift.end)
    meeting_start, meeting_end = span(meeting.start, meeting.end)
    fragments = []
    if day_start < meeting_start:
        fragments.append(
            day_shift.with_changes(id=new_id(), start=from_minutes(day_start), end=from_minutes(meeting_start))
        )
    if meeting_end < day_end:
        fragments.append(
            day_shift.with_changes(id=new_id(), start=from_minutes(meeting_end), end=from_minutes(day_end))
        )
    return fragments


def _find_split(shifts: Sequence[Shift]) -> Optional[Tuple[int, Shift]]:
    for meeting in shifts:
        if meeting.type is not ShiftType.MEETING:
            continue
        for i, candidate in enumerate(shifts):
            if (
                candidate.type is ShiftType.DAY_SHIFT
                and candidate.is_at(meeting.employee_id, meeting.day_index)
                and _timed_overlap(candidate, meeting)
            ):
                return i, meeting
    return None


def split_day_shifts_by_meetings(shifts: Sequence[Shift], new_id: IdFactory) -> Tuple[Shift, ...]:
    """
    Cut every meeting out of the day shifts it overlaps.

    Each overlapping day shift is replaced, in place, by the part before the
    meeting and the part after it (either may be absent). Repeats until no day
    shift overlaps any meeting; every split removes covered minutes, so this
    terminates.

    Args:
        shifts: Current snapshot
        new_id: Factory for the ids of the fragments

    Returns:
        New snapshot
    """
    result = list(shifts)
    while True:
        found = _find_split(result)
        if found is None:
            return tuple(result)
        i, meeting = found
        result[i:i + 1] = _split_fragments(result[i], meeting, new_id)


def _mergeable(a: Shift, b: Shift) -> bool:
    return (
        a.employee_id == b.employee_id
        and a.day_index == b.day_index
        and a.type is b.type
        and a.type is not ShiftType.POST_CALL_REST
        and _timed_overlap(a, b)
    )


def _union(a: Shift, b: Shift) -> Shift:
    a_start, a_end = span(a.start, a.end)
    b_start, b_end = span(b.start, b.end)
    start = min(a_start, b_start)
    end = min(max(a_end, b_end), start + MINUTES_PER_DAY)
    return a.with_changes(start=from_minutes(start), end=from_minutes(end))


def _find_mergeable_pair(shifts: Sequence[Shift]) -> Optional[Tuple[int, int]]:
    for i in range(len(shifts)):
        for j in range(i + 1, len(shifts)):
            if _mergeable(shifts[i], shifts[j]):
                return i, j
    return None


def merge_overlapping_shifts(shifts: Sequence[Shift]) -> Tuple[Shift, ...]:
    """
    Unify overlapping shifts of the same employee, day and type.

    The earlier record absorbs the later one, keeping its id and position and
    taking the earliest start and latest end. Post-call rests are never merged.
    Each merge removes one record, so at most len(shifts) - 1 rounds run.
    """
    merged = list(shifts)
    for _ in range(len(shifts)):
        pair = _find_mergeable_pair(merged)
        if pair is None:
            break
        i, j = pair
        merged[i] = _union(merged[i], merged[j])
        del merged[j]
    return tuple(merged)


def apply_on_call_coupling(shifts: Sequence[Shift], on_call: Shift, new_id: IdFactory) -> Tuple[Shift, ...]:
    """
    Reserve the day after an on-call shift for rest.

    The first day shift on the following day becomes a post-call rest. With
    no day shift there, a rest placeholder is appended for this on-call,
    even when another on-call already left one on that day.
    """
    rest_day = next_day(on_call.day_index)
    result = list(shifts)
    for i, s in enumerate(result):
        if s.type is ShiftType.DAY_SHIFT and s.is_at(on_call.employee_id, rest_day):
            result[i] = s.with_changes(type=ShiftType.POST_CALL_REST, start="", end="")
            return tuple(result)
    result.append(
        Shift(
            id=new_id(),
            employee_id=on_call.employee_id,
            day_index=rest_day,
            type=ShiftType.POST_CALL_REST,
        )
    )
    return tuple(result)


def revert_post_call_rest(
    shifts: Sequence[Shift],
    on_call: Shift,
    day_start: str,
    day_end: str,
) -> Tuple[Shift, ...]:
    """Turn the rest following a removed on-call shift back into a day shift with the given hours."""
    rest_day = next_day(on_call.day_index)
    result = list(shifts)
    for i, s in enumerate(result):
        if s.type is ShiftType.POST_CALL_REST and s.is_at(on_call.employee_id, rest_day):
            result[i] = s.with_changes(type=ShiftType.DAY_SHIFT, start=day_start, end=day_end)
            break
    return tuple(result)
