"""
Domain models for availability aggregation and location ranking.
"""

import math
from dataclasses import dataclass, field
from datetime import date
from typing import FrozenSet, Iterable, List, Optional, Tuple, Union

import pendulum
from pendulum import DateTime

from .exceptions import ValidationError

SLOT_MINUTES = 30
METERS_PER_MILE = 1609.344


def _require_index(field_name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(field_name, value, "must be an integer")
    if value < 0:
        raise ValidationError(field_name, value, "must not be negative")


def _require_coordinate(field_name: str, value: float, bound: float) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(field_name, value, "must be a number")
    if not math.isfinite(value):
        raise ValidationError(field_name, value, "must be finite")
    if not -bound <= value <= bound:
        raise ValidationError(field_name, value, f"must be between {-bound:g} and {bound:g}")


@dataclass(frozen=True, order=True)
class TimeSlot:
    """
    One 30-minute cell of a meeting's availability grid.

    Ordered by day first, then by time within the day.
    """
    day_index: int
    time_index: int

    def __post_init__(self):
        _require_index("day_index", self.day_index)
        _require_index("time_index", self.time_index)


@dataclass(frozen=True)
class GeoPoint:
    """A latitude/longitude pair in decimal degrees."""
    latitude: float
    longitude: float

    def __post_init__(self):
        _require_coordinate("latitude", self.latitude, 90.0)
        _require_coordinate("longitude", self.longitude, 180.0)


@dataclass(frozen=True)
class Participant:
    """
    A submitted response: who, when they are free, and where they start from.

    ``availability`` accepts any iterable of slots and is stored as a frozenset.
    """
    name: str
    availability: FrozenSet[TimeSlot] = field(default_factory=frozenset)
    location: Optional[GeoPoint] = None

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValidationError("name", self.name, "must be a non-empty string")

        slots = frozenset(self.availability)
        for slot in slots:
            if not isinstance(slot, TimeSlot):
                raise ValidationError("availability", slot, "must contain TimeSlot values")
        object.__setattr__(self, "availability", slots)

        if self.location is not None and not isinstance(self.location, GeoPoint):
            raise ValidationError("location", self.location, "must be a GeoPoint")


@dataclass(frozen=True)
class CandidateLocation:
    """A catalog entry that may be recommended as the meeting place."""
    identifier: str
    display_name: str
    abbreviation: str
    coordinates: GeoPoint


@dataclass(frozen=True)
class TimeRange:
    """
    A run of consecutive slots on one day, all with the same attendance.

    Invariant: ``end_time_index`` (inclusive) is not before ``start_time_index``.
    """
    day_index: int
    start_time_index: int
    end_time_index: int
    attendee_count: int

    def __post_init__(self):
        _require_index("day_index", self.day_index)
        _require_index("start_time_index", self.start_time_index)
        _require_index("end_time_index", self.end_time_index)
        _require_index("attendee_count", self.attendee_count)
        if self.end_time_index < self.start_time_index:
            raise ValidationError(
                "end_time_index",
                self.end_time_index,
                f"must not be before start_time_index {self.start_time_index}",
            )

    def slot_count(self) -> int:
        """Return the number of slots covered by the range."""
        return self.end_time_index - self.start_time_index + 1

    def slots(self) -> List[TimeSlot]:
        """Expand the range back into its individual slots."""
        return [
            TimeSlot(self.day_index, time_index)
            for time_index in range(self.start_time_index, self.end_time_index + 1)
        ]

    def __str__(self) -> str:
        return (
            f"day {self.day_index}, slots {self.start_time_index}-{self.end_time_index} "
            f"({self.attendee_count} available)"
        )


@dataclass(frozen=True)
class UniversalRecommendation:
    """Every participant is free during each of the ranges."""
    ranges: Tuple[TimeRange, ...]
    total_participants: int

    @property
    def universal(self) -> bool:
        return True

    @property
    def summary(self) -> str:
        return f"{len(self.ranges)} time range(s) where everyone is available"


@dataclass(frozen=True)
class BestEffortRecommendation:
    """No slot suits everyone; the ranges hold the slots tied for most attendees."""
    ranges: Tuple[TimeRange, ...]
    max_count: int
    total_participants: int

    @property
    def universal(self) -> bool:
        return False

    @property
    def summary(self) -> str:
        return (
            f"Best option: {self.max_count} out of {self.total_participants} "
            f"participants available"
        )


TimeRecommendation = Union[UniversalRecommendation, BestEffortRecommendation]


@dataclass(frozen=True)
class LocationScore:
    """Travel statistics for one candidate location."""
    candidate: CandidateLocation
    mean_distance_meters: float
    max_distance_meters: float

    @property
    def fairness_score(self) -> float:
        """
        Gap between the worst-off participant and the average, in meters.

        Lower means the travel burden is spread more evenly. Rounding noise
        below zero is reported as zero.
        """
        return max(0.0, self.max_distance_meters - self.mean_distance_meters)


@dataclass(frozen=True)
class LocationConstraint:
    """Restrict recommendations to candidates within a radius of a center point."""
    center: GeoPoint
    radius_miles: float = 4.0

    def __post_init__(self):
        if isinstance(self.radius_miles, bool) or not isinstance(self.radius_miles, (int, float)):
            raise ValidationError("radius_miles", self.radius_miles, "must be a number")
        if not math.isfinite(self.radius_miles) or self.radius_miles <= 0:
            raise ValidationError("radius_miles", self.radius_miles, "must be positive")

    @property
    def radius_meters(self) -> float:
        return self.radius_miles * METERS_PER_MILE


def _parse_clock(field_name: str, value: str) -> Tuple[int, int]:
    """Parse an ``HH:MM`` string into hour and minute."""
    try:
        hour_text, minute_text = value.split(":")
        hour, minute = int(hour_text), int(minute_text)
    except (AttributeError, ValueError):
        raise ValidationError(field_name, value, "must be formatted as HH:MM") from None

    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise ValidationError(field_name, value, "is not a valid time of day")
    return hour, minute


@dataclass
class MeetingSchedule:
    """
    The organizer's grid: which days, and which daily window.

    Translates ``(day_index, time_index)`` coordinates back to wallclock
    times. Slot starts run from ``start_time`` to ``end_time`` inclusive in
    30-minute steps, so a 09:00-17:00 window has 17 rows.
    """
    available_days: List[date]
    start_time: str
    end_time: str
    timezone: str = "America/New_York"

    def __post_init__(self):
        if not self.available_days:
            raise ValidationError("available_days", self.available_days, "must not be empty")
        start = _parse_clock("start_time", self.start_time)
        end = _parse_clock("end_time", self.end_time)
        if end < start:
            raise ValidationError("end_time", self.end_time, f"must not be before {self.start_time}")

    def _start_minutes(self) -> int:
        hour, minute = _parse_clock("start_time", self.start_time)
        return hour * 60 + minute

    def _end_minutes(self) -> int:
        hour, minute = _parse_clock("end_time", self.end_time)
        return hour * 60 + minute

    def day_count(self) -> int:
        return len(self.available_days)

    def slot_count(self) -> int:
        """Return the number of slots per day."""
        return (self._end_minutes() - self._start_minutes()) // SLOT_MINUTES + 1

    def contains(self, slot: TimeSlot) -> bool:
        """Check whether a slot lies inside the grid."""
        return slot.day_index < self.day_count() and slot.time_index < self.slot_count()

    def slot_start(self, slot: TimeSlot) -> DateTime:
        """Return the wallclock start of a slot in the meeting's timezone."""
        if not self.contains(slot):
            raise ValidationError("slot", slot, "lies outside the meeting grid")

        day = self.available_days[slot.day_index]
        midnight = pendulum.datetime(day.year, day.month, day.day, tz=self.timezone)
        return midnight.add(minutes=self._start_minutes() + slot.time_index * SLOT_MINUTES)

    def slot_end(self, slot: TimeSlot) -> DateTime:
        """Return the wallclock end of a slot."""
        return self.slot_start(slot).add(minutes=SLOT_MINUTES)

    def format_range(self, time_range: TimeRange) -> str:
        """
        Format a range for display.
        Format: Mon, Nov 25 | 09:00 - 10:30 (3 available)
        """
        start = self.slot_start(TimeSlot(time_range.day_index, time_range.start_time_index))
        end = self.slot_end(TimeSlot(time_range.day_index, time_range.end_time_index))

        return (
            f"{start.format('ddd, MMM D')} | {start.format('HH:mm')} - {end.format('HH:mm')} "
            f"({time_range.attendee_count} available)"
        )

    def is_expired(self, now: Optional[DateTime] = None) -> bool:
        """A meeting expires once the window on its latest day has closed."""
        now = now or pendulum.now(self.timezone)
        latest = max(self.available_days)
        closes_at = pendulum.datetime(
            latest.year, latest.month, latest.day, tz=self.timezone
        ).add(minutes=self._end_minutes())
        return now > closes_at


def collect_locations(participants: Iterable[Participant]) -> List[GeoPoint]:
    """Collect the locations of participants that supplied one."""
    return [p.location for p in participants if p.location is not None]
