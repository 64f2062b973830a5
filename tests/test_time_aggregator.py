"""
Tests for the time aggregator.
"""

import random
from collections import Counter

import pytest

from meetpoint.domain.exceptions import ValidationError
from meetpoint.domain.models import (
    BestEffortRecommendation,
    Participant,
    TimeRange,
    TimeSlot,
    UniversalRecommendation,
)
from meetpoint.domain.time_aggregator import TimeAggregator, compute_time_recommendation


def _participant(name, *slots):
    return Participant(name=name, availability=[TimeSlot(d, t) for d, t in slots])


class TestTimeAggregator:
    """Tests for TimeAggregator."""

    def test_everyone_shares_one_slot(self):
        """Test the three-person scenario with a single common slot."""
        participants = [
            _participant("a", (0, 4)),
            _participant("b", (0, 4), (0, 5)),
            _participant("c", (0, 4)),
        ]

        result = compute_time_recommendation(participants, 3)

        assert isinstance(result, UniversalRecommendation)
        assert result.universal is True
        assert result.ranges == (
            TimeRange(day_index=0, start_time_index=4, end_time_index=4, attendee_count=3),
        )
        assert result.summary == "1 time range(s) where everyone is available"

    def test_no_overlap_surfaces_every_tied_slot(self):
        """Test two people with disjoint availability."""
        participants = [
            _participant("a", (0, 1)),
            _participant("b", (1, 3)),
        ]

        result = compute_time_recommendation(participants, 2)

        assert isinstance(result, BestEffortRecommendation)
        assert result.universal is False
        assert result.ranges == (
            TimeRange(0, 1, 1, 1),
            TimeRange(1, 3, 3, 1),
        )
        assert result.summary == "Best option: 1 out of 2 participants available"

    def test_no_participants_returns_none(self):
        assert compute_time_recommendation([], 0) is None

    def test_no_availability_returns_none(self):
        participants = [_participant("a"), _participant("b")]

        assert compute_time_recommendation(participants, 2) is None

    def test_best_effort_ignored_when_someone_universal(self):
        """Test that slots below the universal count are dropped."""
        participants = [
            _participant("a", (0, 0), (0, 1)),
            _participant("b", (0, 0)),
        ]

        result = compute_time_recommendation(participants, 2)

        assert isinstance(result, UniversalRecommendation)
        assert result.ranges == (TimeRange(0, 0, 0, 2),)

    def test_best_effort_ties_across_days(self):
        participants = [
            _participant("a", (0, 1), (1, 1)),
            _participant("b", (0, 1), (1, 1)),
            _participant("c", (2, 0)),
        ]

        result = compute_time_recommendation(participants, 3)

        assert isinstance(result, BestEffortRecommendation)
        assert result.max_count == 2
        assert result.ranges == (TimeRange(0, 1, 1, 2), TimeRange(1, 1, 1, 2))

    def test_total_larger_than_respondents(self):
        """Test that a slot shared by every respondent is not universal if people are missing."""
        participants = [
            _participant("a", (0, 2), (0, 3)),
            _participant("b", (0, 2), (0, 3)),
            _participant("c", (0, 2), (0, 3)),
        ]

        result = compute_time_recommendation(participants, 4)

        assert isinstance(result, BestEffortRecommendation)
        assert result.ranges == (TimeRange(0, 2, 3, 3),)
        assert result.summary == "Best option: 3 out of 4 participants available"

    def test_total_smaller_than_respondents_raises_error(self):
        participants = [_participant("a", (0, 0)), _participant("b", (0, 0))]

        with pytest.raises(ValidationError, match="total_participant_count"):
            compute_time_recommendation(participants, 1)

    def test_tally_slots(self):
        participants = [
            _participant("a", (0, 0), (0, 1)),
            _participant("b", (0, 1)),
        ]

        assert TimeAggregator.tally_slots(participants) == {
            TimeSlot(0, 0): 1,
            TimeSlot(0, 1): 2,
        }


class TestGrouping:
    """Tests for contiguous range grouping."""

    def test_group_contiguous_slots(self):
        slots = [TimeSlot(1, 0), TimeSlot(0, 7), TimeSlot(0, 5), TimeSlot(0, 4)]

        ranges = TimeAggregator.group_contiguous_slots(slots, attendee_count=2)

        assert ranges == [
            TimeRange(0, 4, 5, 2),
            TimeRange(0, 7, 7, 2),
            TimeRange(1, 0, 0, 2),
        ]

    def test_runs_do_not_cross_days(self):
        slots = [TimeSlot(0, 16), TimeSlot(1, 0), TimeSlot(1, 1)]

        ranges = TimeAggregator.group_contiguous_slots(slots, attendee_count=1)

        assert ranges == [TimeRange(0, 16, 16, 1), TimeRange(1, 0, 1, 1)]

    def test_empty_input(self):
        assert TimeAggregator.group_contiguous_slots([], attendee_count=1) == []

    def test_merge_ranges_joins_adjacent(self):
        ranges = [TimeRange(0, 3, 4, 2), TimeRange(0, 0, 2, 2), TimeRange(0, 6, 6, 2)]

        assert TimeAggregator.merge_ranges(ranges) == [
            TimeRange(0, 0, 4, 2),
            TimeRange(0, 6, 6, 2),
        ]

    def test_merge_ranges_keeps_different_counts_apart(self):
        ranges = [TimeRange(0, 0, 1, 2), TimeRange(0, 2, 3, 3)]

        assert TimeAggregator.merge_ranges(ranges) == ranges


def _random_participants(seed: int, with_common_slot: bool):
    rng = random.Random(seed)
    count = rng.randint(1, 6)
    participants = []

    for index in range(count):
        slots = {
            (rng.randrange(3), rng.randrange(10))
            for _ in range(rng.randint(0, 12))
        }
        if with_common_slot:
            slots.add((1, 5))
        participants.append(_participant(f"p{index}", *slots))

    return participants


def _brute_force_counts(participants):
    counts = Counter()
    for participant in participants:
        for slot in participant.availability:
            counts[slot] += 1
    return counts


class TestAggregatorProperties:
    """Properties checked against a brute-force recount."""

    @pytest.mark.parametrize("seed", range(25))
    def test_common_slot_is_always_universal(self, seed):
        participants = _random_participants(seed, with_common_slot=True)
        total = len(participants)

        result = compute_time_recommendation(participants, total)

        assert result.universal is True
        assert all(r.attendee_count == total for r in result.ranges)
        assert any(TimeSlot(1, 5) in r.slots() for r in result.ranges)

    @pytest.mark.parametrize("seed", range(25))
    def test_ranges_match_recount(self, seed):
        participants = _random_participants(seed, with_common_slot=False)
        total = len(participants)
        counts = _brute_force_counts(participants)

        result = compute_time_recommendation(participants, total)

        if not counts:
            assert result is None
            return

        expected_count = total if total in counts.values() else max(counts.values())
        assert result.universal is (expected_count == total)

        covered = {slot for r in result.ranges for slot in r.slots()}
        assert covered == {slot for slot, c in counts.items() if c == expected_count}
        for time_range in result.ranges:
            assert time_range.attendee_count == expected_count
            for slot in time_range.slots():
                assert counts[slot] == expected_count

    @pytest.mark.parametrize("seed", range(25))
    def test_grouping_is_maximal_and_idempotent(self, seed):
        participants = _random_participants(seed, with_common_slot=False)

        result = compute_time_recommendation(participants, len(participants))
        if result is None:
            return

        ranges = list(result.ranges)
        assert TimeAggregator.merge_ranges(ranges) == ranges

        for left, right in zip(ranges, ranges[1:]):
            assert not (
                left.day_index == right.day_index
                and right.start_time_index <= left.end_time_index + 1
            )
