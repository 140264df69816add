"""
Tests for slot merging and raw conflict lookup.
"""

import pendulum
import pytest

from eventslots.domain.exceptions import InvalidFormat
from eventslots.domain.intervals import find_conflicts, merge_slots
from eventslots.domain.models import LabeledInterval, TimeSlot
from eventslots.domain.slot_generator import generate_slots


def _slot(start: int, end: int, available: bool = True, index=None) -> TimeSlot:
    return TimeSlot(start=start, end=end, available=available, index=index)


class TestMergeSlots:
    """Tests for merge_slots."""

    def test_merge_runs_with_same_availability(self):
        """Test that adjacent slots with equal flags collapse."""
        slots = [
            _slot(480, 495, True, 0),
            _slot(495, 510, True, 1),
            _slot(510, 525, False, 2),
            _slot(525, 540, False, 3),
            _slot(540, 555, True, 4),
        ]

        merged = merge_slots(slots)

        assert merged == [
            _slot(480, 510, True, 0),
            _slot(510, 540, False, 2),
            _slot(540, 555, True, 4),
        ]

    def test_non_adjacent_slots_stay_separate(self):
        """Test that a gap prevents merging."""
        slots = [_slot(480, 495), _slot(510, 525)]

        assert merge_slots(slots) == slots

    def test_empty(self):
        """Test that nothing merges to nothing."""
        assert merge_slots([]) == []

    def test_free_day_merges_to_one_slot(self):
        """Test that a fully available grid becomes one window."""
        now = pendulum.datetime(2025, 9, 14, 9, 0, tz="America/Chicago")

        merged = merge_slots(generate_slots("2025-09-15", now=now))

        assert len(merged) == 1
        assert str(merged[0]) == "08:00 - 23:00"

    def test_idempotent(self):
        """Test that merging a merged sequence changes nothing."""
        now = pendulum.datetime(2025, 9, 15, 13, 10, tz="America/Chicago")
        slots = generate_slots("2025-09-15", now=now)

        once = merge_slots(slots)

        assert merge_slots(once) == once
        assert [str(slot) for slot in once] == ["08:00 - 13:15", "13:15 - 23:00"]
        assert [slot.available for slot in once] == [False, True]


class TestFindConflicts:
    """Tests for find_conflicts."""

    def test_returns_overlapping_intervals(self):
        """Test the raw half-open overlap rule without padding."""
        existing = [
            LabeledInterval("09:00", "10:00", booking_id=1),
            LabeledInterval("11:00", "13:00", booking_id=2),
            LabeledInterval("11:30", "11:45", booking_id=3),
            LabeledInterval("12:00", "13:00", booking_id=4),
        ]

        conflicts = find_conflicts(LabeledInterval("10:00", "12:00"), existing)

        assert [c.booking_id for c in conflicts] == [2, 3]
        assert conflicts[0] is existing[1]

    def test_no_buffer_is_applied(self):
        """Test that intervals inside the buffer distance do not count."""
        existing = [LabeledInterval("12:05", "13:00")]

        assert find_conflicts(LabeledInterval("11:00", "12:00"), existing) == []

    def test_booking_id_is_optional(self):
        """Test unlabeled intervals."""
        conflicts = find_conflicts(LabeledInterval("10:00", "11:00"), [LabeledInterval("10:30", "12:00")])

        assert conflicts == [LabeledInterval("10:30", "12:00")]
        assert conflicts[0].booking_id is None

    def test_malformed_interval_raises(self):
        """Test that malformed times are rejected."""
        with pytest.raises(InvalidFormat):
            find_conflicts(LabeledInterval("10:00", "11:00"), [LabeledInterval("10:30", "noon")])
