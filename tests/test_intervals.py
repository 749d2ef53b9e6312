"""
Tests for the interval algebra (clip, subtract, merge).
"""

import pendulum
import pytest

from bookingavailability.domain.intervals import (
    clip,
    merge_adjacent_or_overlapping,
    subtract_all,
    total_minutes,
)
from bookingavailability.domain.models import TimeRange


def _tr(start: str, end: str, day: str = "2024-11-25") -> TimeRange:
    return TimeRange(
        start=pendulum.parse(f"{day} {start}", tz="UTC"),
        end=pendulum.parse(f"{day} {end}", tz="UTC"),
    )


WORKING_DAY = _tr("09:00", "17:00")


class TestClip:
    def test_clip_inside_bounds_is_unchanged(self):
        assert clip(_tr("10:00", "11:00"), WORKING_DAY) == _tr("10:00", "11:00")

    def test_clip_trims_both_edges(self):
        assert clip(_tr("08:00", "18:00"), WORKING_DAY) == WORKING_DAY

    def test_clip_trims_start(self):
        assert clip(_tr("08:30", "09:30"), WORKING_DAY) == _tr("09:00", "09:30")

    def test_clip_outside_bounds_is_discarded(self):
        assert clip(_tr("17:30", "18:00"), WORKING_DAY) is None

    def test_clip_touching_bound_is_discarded(self):
        """A period ending exactly at opening leaves nothing behind."""
        assert clip(_tr("08:00", "09:00"), WORKING_DAY) is None


class TestSubtractAll:
    def test_no_busy_periods(self):
        assert subtract_all(WORKING_DAY, []) == [WORKING_DAY]

    def test_subtract_two_periods(self):
        """Working 09-17 minus 10-11 and 14-15."""
        result = subtract_all(WORKING_DAY, [_tr("10:00", "11:00"), _tr("14:00", "15:00")])

        assert result == [_tr("09:00", "10:00"), _tr("11:00", "14:00"), _tr("15:00", "17:00")]

    def test_busy_at_edges_leaves_no_empty_pieces(self):
        result = subtract_all(WORKING_DAY, [_tr("09:00", "10:00"), _tr("16:00", "17:00")])

        assert result == [_tr("10:00", "16:00")]

    def test_busy_covering_everything(self):
        assert subtract_all(WORKING_DAY, [_tr("09:00", "17:00")]) == []

    def test_overlapping_busy_periods(self):
        result = subtract_all(WORKING_DAY, [_tr("10:00", "12:00"), _tr("11:00", "13:00")])

        assert result == [_tr("09:00", "10:00"), _tr("13:00", "17:00")]

    def test_unsorted_busy_periods(self):
        result = subtract_all(WORKING_DAY, [_tr("14:00", "15:00"), _tr("10:00", "11:00")])

        assert sorted(result) == [_tr("09:00", "10:00"), _tr("11:00", "14:00"), _tr("15:00", "17:00")]

    def test_inputs_are_not_mutated(self):
        busy = [_tr("10:00", "11:00")]

        subtract_all(WORKING_DAY, busy)

        assert busy == [_tr("10:00", "11:00")]

    @pytest.mark.parametrize(
        "busy",
        [
            [],
            [_tr("10:00", "11:00")],
            [_tr("10:00", "11:00"), _tr("10:30", "12:00"), _tr("16:00", "17:00")],
            [_tr("09:00", "09:15"), _tr("09:15", "09:30"), _tr("12:00", "12:01")],
            [_tr("09:00", "17:00"), _tr("11:00", "12:00")],
        ],
    )
    def test_free_and_busy_cover_the_base_exactly(self, busy):
        """Free pieces plus clipped busy time tile the base with no gaps or double counting."""
        free = subtract_all(WORKING_DAY, busy)
        clipped_busy = merge_adjacent_or_overlapping(
            c for c in (clip(b, WORKING_DAY) for b in busy) if c is not None
        )

        assert not any(f.overlaps(b) for f in free for b in clipped_busy)
        assert merge_adjacent_or_overlapping(free + clipped_busy) == [WORKING_DAY]
        assert total_minutes(free) + total_minutes(clipped_busy) == WORKING_DAY.duration_minutes()


class TestMerge:
    def test_empty(self):
        assert merge_adjacent_or_overlapping([]) == []

    def test_adjacent_ranges_merge(self):
        """[09:00,10:00) and [10:00,11:00) become [09:00,11:00)."""
        result = merge_adjacent_or_overlapping([_tr("09:00", "10:00"), _tr("10:00", "11:00")])

        assert result == [_tr("09:00", "11:00")]

    def test_overlapping_ranges_merge(self):
        result = merge_adjacent_or_overlapping([_tr("09:00", "10:30"), _tr("10:00", "11:00")])

        assert result == [_tr("09:00", "11:00")]

    def test_contained_range_is_absorbed(self):
        result = merge_adjacent_or_overlapping([_tr("09:00", "12:00"), _tr("10:00", "11:00")])

        assert result == [_tr("09:00", "12:00")]

    def test_gap_keeps_ranges_apart(self):
        result = merge_adjacent_or_overlapping([_tr("11:00", "12:00"), _tr("09:00", "10:00")])

        assert result == [_tr("09:00", "10:00"), _tr("11:00", "12:00")]

    @pytest.mark.parametrize(
        "ranges",
        [
            [_tr("09:00", "10:00"), _tr("10:00", "11:00"), _tr("13:00", "14:00")],
            [_tr("15:00", "16:00"), _tr("09:00", "12:00"), _tr("11:00", "15:00")],
            [_tr("09:00", "09:30"), _tr("10:00", "10:30"), _tr("11:00", "11:30")],
            [_tr("09:00", "10:00")],
        ],
    )
    def test_merge_is_idempotent(self, ranges):
        once = merge_adjacent_or_overlapping(ranges)

        assert merge_adjacent_or_overlapping(once) == once
