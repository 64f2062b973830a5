"""
Aggregation of participant availability into time recommendations.

Pure domain logic: no I/O, no shared state. Operates entirely on
``(day_index, time_index)`` coordinates; translating them to wallclock
times is left to ``MeetingSchedule``.
"""

from collections import Counter
from typing import Dict, Iterable, List, Optional, Sequence

from .exceptions import ValidationError
from .models import (
    BestEffortRecommendation,
    Participant,
    TimeRange,
    TimeRecommendation,
    TimeSlot,
    UniversalRecommendation,
)


class TimeAggregator:
    """
    Turns per-participant availability into a ranked time recommendation.

    Algorithm:
    1. Tally how many participants are free in each slot
    2. Universal pool: slots where everyone is free
    3. Best-effort pool (only when the universal pool is empty): all slots
       tied for the highest count
    4. Group the chosen pool into maximal runs of consecutive slots
    """

    def compute(
        self,
        participants: Sequence[Participant],
        total_participant_count: int
    ) -> Optional[TimeRecommendation]:
        """
        Compute the time recommendation for a meeting.

        Args:
            participants: Submitted responses
            total_participant_count: Number of people who must be free for a
                slot to count as universal

        Returns:
            UniversalRecommendation, BestEffortRecommendation, or None when
            nobody has marked any availability

        Raises:
            ValidationError: If the participant count is inconsistent
        """
        if not participants:
            return None

        self._validate_total(total_participant_count, len(participants))

        # Step 1: Count participants per slot
        counts = self.tally_slots(participants)

        if not counts:
            return None

        # Step 2: Everyone free
        universal_pool = [
            slot for slot, count in counts.items()
            if count == total_participant_count
        ]

        if universal_pool:
            return UniversalRecommendation(
                ranges=tuple(self.group_contiguous_slots(universal_pool, total_participant_count)),
                total_participants=total_participant_count,
            )

        # Step 3: Everything left ties for the maximum
        max_count = max(counts.values())
        best_effort_pool = [
            slot for slot, count in counts.items()
            if count == max_count
        ]

        return BestEffortRecommendation(
            ranges=tuple(self.group_contiguous_slots(best_effort_pool, max_count)),
            max_count=max_count,
            total_participants=total_participant_count,
        )

    @staticmethod
    def tally_slots(participants: Iterable[Participant]) -> Dict[TimeSlot, int]:
        """Map each slot to the number of participants free in it."""
        counts: Counter = Counter()
        for participant in participants:
            counts.update(participant.availability)
        return dict(counts)

    @staticmethod
    def group_contiguous_slots(
        slots: Iterable[TimeSlot],
        attendee_count: int
    ) -> List[TimeRange]:
        """
        Group slots into maximal runs of consecutive time indexes per day.

        Example:
        Slots: (0,4), (0,5), (0,7), (1,0)
        Result: [day 0 4-5, day 0 7-7, day 1 0-0]
        """
        ranges: List[TimeRange] = []

        for slot in sorted(set(slots)):
            if ranges:
                last = ranges[-1]
                if (
                    slot.day_index == last.day_index
                    and slot.time_index == last.end_time_index + 1
                ):
                    ranges[-1] = TimeRange(
                        day_index=last.day_index,
                        start_time_index=last.start_time_index,
                        end_time_index=slot.time_index,
                        attendee_count=attendee_count,
                    )
                    continue

            ranges.append(
                TimeRange(
                    day_index=slot.day_index,
                    start_time_index=slot.time_index,
                    end_time_index=slot.time_index,
                    attendee_count=attendee_count,
                )
            )

        return ranges

    @staticmethod
    def merge_ranges(ranges: Iterable[TimeRange]) -> List[TimeRange]:
        """
        Merge adjacent ranges on the same day with the same attendance.

        Running this over the aggregator's output returns it unchanged.
        """
        sorted_ranges = sorted(
            ranges,
            key=lambda r: (r.day_index, r.start_time_index, r.end_time_index)
        )
        merged: List[TimeRange] = []

        for current in sorted_ranges:
            if merged:
                last = merged[-1]
                if (
                    current.day_index == last.day_index
                    and current.attendee_count == last.attendee_count
                    and current.start_time_index <= last.end_time_index + 1
                ):
                    merged[-1] = TimeRange(
                        day_index=last.day_index,
                        start_time_index=last.start_time_index,
                        end_time_index=max(last.end_time_index, current.end_time_index),
                        attendee_count=last.attendee_count,
                    )
                    continue
            merged.append(current)

        return merged

    @staticmethod
    def _validate_total(total_participant_count: int, participant_count: int) -> None:
        if isinstance(total_participant_count, bool) or not isinstance(total_participant_count, int):
            raise ValidationError(
                "total_participant_count", total_participant_count, "must be an integer"
            )
        if total_participant_count < participant_count:
            raise ValidationError(
                "total_participant_count",
                total_participant_count,
                f"must be at least the {participant_count} participants supplied",
            )


def compute_time_recommendation(
    participants: Sequence[Participant],
    total_participant_count: int
) -> Optional[TimeRecommendation]:
    """Module-level shortcut for ``TimeAggregator().compute``."""
    return TimeAggregator().compute(participants, total_participant_count)
