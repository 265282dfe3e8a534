"""Tests for the pure snapshot transformations."""

import itertools

import pytest

from shiftboard.domain.models import Shift, ShiftType
from shiftboard.services.rules import (
    apply_on_call_coupling,
    is_day_locked,
    merge_overlapping_shifts,
    next_day,
    revert_post_call_rest,
    split_day_shifts_by_meetings,
)
from shiftboard.timeutils import span, spans_overlap

DAY = ShiftType.DAY_SHIFT
MEETING = ShiftType.MEETING
ON_CALL = ShiftType.ON_CALL
REST = ShiftType.POST_CALL_REST


def _shift(id, type, start="", end="", day=0, emp="e1"):
    return Shift(id=id, employee_id=emp, day_index=day, type=type, start=start, end=end)


@pytest.fixture
def new_id():
    counter = itertools.count(1)
    return lambda: f"n{next(counter)}"


def _times(shifts, type):
    return sorted((s.start, s.end) for s in shifts if s.type is type)


def test_next_day_wraps_sunday_to_monday():
    assert next_day(0) == 1
    assert next_day(6) == 0


def test_is_day_locked():
    shifts = [_shift("a", REST, day=2)]
    assert is_day_locked(shifts, "e1", 2)
    assert not is_day_locked(shifts, "e1", 3)
    assert not is_day_locked(shifts, "e2", 2)


def test_meeting_splits_day_shift(new_id):
    shifts = [_shift("d", DAY, "09:00", "17:00"), _shift("m", MEETING, "10:00", "11:00")]
    result = split_day_shifts_by_meetings(shifts, new_id)
    assert _times(result, DAY) == [("09:00", "10:00"), ("11:00", "17:00")]
    assert [s for s in result if s.type is MEETING] == [shifts[1]]
    assert "d" not in {s.id for s in result}


def test_meeting_at_start_leaves_single_fragment(new_id):
    shifts = [_shift("d", DAY, "09:00", "17:00"), _shift("m", MEETING, "08:00", "10:00")]
    result = split_day_shifts_by_meetings(shifts, new_id)
    assert _times(result, DAY) == [("10:00", "17:00")]


def test_meeting_covering_day_shift_removes_it(new_id):
    shifts = [_shift("d", DAY, "10:00", "11:00"), _shift("m", MEETING, "09:00", "12:00")]
    result = split_day_shifts_by_meetings(shifts, new_id)
    assert _times(result, DAY) == []


def test_two_meetings_split_day_shift_three_ways(new_id):
    shifts = [
        _shift("d", DAY, "09:00", "17:00"),
        _shift("m1", MEETING, "10:00", "11:00"),
        _shift("m2", MEETING, "14:00", "15:00"),
    ]
    result = split_day_shifts_by_meetings(shifts, new_id)
    assert _times(result, DAY) == [("09:00", "10:00"), ("11:00", "14:00"), ("15:00", "17:00")]


def test_meeting_on_other_day_or_employee_is_ignored(new_id):
    shifts = [
        _shift("d", DAY, "09:00", "17:00"),
        _shift("m1", MEETING, "10:00", "11:00", day=1),
        _shift("m2", MEETING, "10:00", "11:00", emp="e2"),
    ]
    assert split_day_shifts_by_meetings(shifts, new_id) == tuple(shifts)


def test_meeting_inside_overnight_day_shift(new_id):
    shifts = [_shift("d", DAY, "22:00", "06:00"), _shift("m", MEETING, "23:00", "23:30")]
    result = split_day_shifts_by_meetings(shifts, new_id)
    assert _times(result, DAY) == [("22:00", "23:00"), ("23:30", "06:00")]


def test_merge_overlapping_same_type():
    shifts = [_shift("a", DAY, "09:00", "12:00"), _shift("b", DAY, "11:00", "15:00")]
    result = merge_overlapping_shifts(shifts)
    assert result == (_shift("a", DAY, "09:00", "15:00"),)


def test_merge_chains_to_fixpoint():
    shifts = [
        _shift("a", DAY, "09:00", "10:00"),
        _shift("b", DAY, "12:00", "14:00"),
        _shift("c", DAY, "09:30", "12:30"),
    ]
    result = merge_overlapping_shifts(shifts)
    assert len(result) == 1
    assert (result[0].id, result[0].start, result[0].end) == ("a", "09:00", "14:00")


def test_merge_keeps_touching_and_different_types_apart():
    shifts = [
        _shift("a", DAY, "09:00", "10:00"),
        _shift("b", DAY, "10:00", "11:00"),
        _shift("c", MEETING, "09:30", "10:30"),
        _shift("d", DAY, "09:00", "10:00", day=1),
    ]
    assert merge_overlapping_shifts(shifts) == tuple(shifts)


def test_merge_never_touches_rest():
    shifts = [_shift("a", REST), _shift("b", REST)]
    assert merge_overlapping_shifts(shifts) == tuple(shifts)


def test_merge_compares_minutes_not_strings():
    shifts = [_shift("a", ON_CALL, "20:00", "08:00"), _shift("b", ON_CALL, "21:00", "09:00")]
    result = merge_overlapping_shifts(shifts)
    assert result == (_shift("a", ON_CALL, "20:00", "09:00"),)


def test_merge_is_idempotent():
    shifts = [
        _shift("a", DAY, "09:00", "12:00"),
        _shift("b", DAY, "11:00", "15:00"),
        _shift("c", MEETING, "10:00", "11:00"),
        _shift("d", MEETING, "10:30", "12:00"),
        _shift("e", ON_CALL, "20:00", "08:00", day=3),
    ]
    once = merge_overlapping_shifts(shifts)
    assert merge_overlapping_shifts(once) == once


def test_merge_leaves_no_overlapping_pairs():
    shifts = [
        _shift(str(i), DAY, f"{h:02d}:00", f"{h + 3:02d}:00")
        for i, h in enumerate([6, 8, 13, 15, 17, 2])
    ]
    result = merge_overlapping_shifts(shifts)
    for i, a in enumerate(result):
        for b in result[i + 1:]:
            assert not spans_overlap(span(a.start, a.end), span(b.start, b.end))


def test_on_call_retypes_next_day_shift(new_id):
    on_call = _shift("oc", ON_CALL, "20:00", "08:00", day=0)
    day_shift = _shift("d", DAY, "09:00", "17:00", day=1)
    result = apply_on_call_coupling([on_call, day_shift], on_call, new_id)
    assert result[1] == _shift("d", REST, day=1)


def test_on_call_creates_rest_when_next_day_empty(new_id):
    on_call = _shift("oc", ON_CALL, "20:00", "08:00", day=6)
    result = apply_on_call_coupling([on_call], on_call, new_id)
    assert result[1] == _shift("n1", REST, day=0)


def test_second_on_call_appends_its_own_rest(new_id):
    on_call = _shift("oc", ON_CALL, "20:00", "08:00", day=0)
    rest = _shift("r", REST, day=1)
    result = apply_on_call_coupling([on_call, rest], on_call, new_id)
    assert result == (on_call, rest, _shift("n1", REST, day=1))


def test_on_call_coexists_with_next_day_meeting(new_id):
    on_call = _shift("oc", ON_CALL, "20:00", "08:00", day=0)
    meeting = _shift("m", MEETING, "10:00", "11:00", day=1)
    result = apply_on_call_coupling([on_call, meeting], on_call, new_id)
    assert result[:2] == (on_call, meeting)
    assert result[2].type is REST and result[2].day_index == 1


def test_revert_post_call_rest():
    on_call = _shift("oc", ON_CALL, "20:00", "08:00", day=0)
    rest = _shift("r", REST, day=1)
    result = revert_post_call_rest([rest], on_call, "09:00", "17:00")
    assert result == (_shift("r", DAY, "09:00", "17:00", day=1),)


def test_revert_without_rest_is_noop():
    on_call = _shift("oc", ON_CALL, "20:00", "08:00", day=0)
    other = _shift("d", DAY, "09:00", "17:00", day=1)
    assert revert_post_call_rest([other], on_call, "09:00", "17:00") == (other,)
