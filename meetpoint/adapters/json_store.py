"""
File-backed meeting source reading exported meeting snapshots from JSON.
"""

import json
import logging
from datetime import date
from pathlib import Path
from typing import Dict, List, Optional

import pendulum
from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError, field_validator

from ..domain.exceptions import MeetingNotFoundError, ValidationError
from ..domain.models import GeoPoint, LocationConstraint, MeetingSchedule, Participant, TimeSlot
from ..services.recommendation import MeetingSnapshot

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "America/New_York"


class _Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class CoordinatesRecord(_Record):
    lat: float
    lng: float

    def to_point(self) -> GeoPoint:
        return GeoPoint(latitude=self.lat, longitude=self.lng)


class PlaceRecord(_Record):
    """A chosen building or pin: ``{buildingName, buildingAbbr, coordinates}``."""
    building_name: Optional[str] = Field(default=None, alias="buildingName")
    building_abbr: Optional[str] = Field(default=None, alias="buildingAbbr")
    coordinates: Optional[CoordinatesRecord] = None


class SlotRecord(_Record):
    day_index: int = Field(alias="dayIndex")
    time_index: int = Field(alias="timeIndex")


class ParticipantRecord(_Record):
    name: str
    availability: List[SlotRecord] = Field(default_factory=list)
    location: Optional[PlaceRecord] = None

    def to_participant(self) -> Participant:
        location = None
        if self.location is not None and self.location.coordinates is not None:
            location = self.location.coordinates.to_point()

        return Participant(
            name=self.name.strip(),
            availability=[TimeSlot(s.day_index, s.time_index) for s in self.availability],
            location=location,
        )


class TimeWindowRecord(_Record):
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")


class LocationConstraintRecord(_Record):
    enabled: bool = False
    center: Optional[CoordinatesRecord] = None
    radius: float = 4.0  # miles


class MeetingRecord(_Record):
    """One meeting as exported: meeting fields with participants embedded."""
    id: str
    name: str
    available_days: List[date] = Field(alias="availableDays")
    time_range: TimeWindowRecord = Field(alias="timeRange")
    timezone: Optional[str] = None  # None: the store's default timezone
    creator_location: Optional[PlaceRecord] = Field(default=None, alias="creatorLocation")
    location_constraint: Optional[LocationConstraintRecord] = Field(
        default=None, alias="locationConstraint"
    )
    participants: List[ParticipantRecord] = Field(default_factory=list)

    @field_validator("available_days", mode="before")
    @classmethod
    def parse_days(cls, value):
        """Accept plain dates as well as full ISO timestamps."""
        if not isinstance(value, list):
            return value
        return [
            pendulum.parse(item).date() if isinstance(item, str) and len(item) > 10 else item
            for item in value
        ]

    def to_snapshot(self, default_timezone: str = DEFAULT_TIMEZONE) -> MeetingSnapshot:
        schedule = MeetingSchedule(
            available_days=self.available_days,
            start_time=self.time_range.start_time,
            end_time=self.time_range.end_time,
            timezone=self.timezone or default_timezone,
        )

        participants = [record.to_participant() for record in self.participants]
        for participant in participants:
            for slot in participant.availability:
                if not schedule.contains(slot):
                    raise ValidationError(
                        "availability", slot, f"outside the grid of meeting {self.id}"
                    )

        creator_location = None
        if self.creator_location is not None and self.creator_location.coordinates is not None:
            creator_location = self.creator_location.coordinates.to_point()

        constraint = None
        if self.location_constraint is not None and self.location_constraint.enabled:
            if self.location_constraint.center is None:
                raise ValidationError(
                    "locationConstraint.center", None, "required when the constraint is enabled"
                )
            constraint = LocationConstraint(
                center=self.location_constraint.center.to_point(),
                radius_miles=self.location_constraint.radius,
            )

        return MeetingSnapshot(
            meeting_id=self.id,
            name=self.name,
            schedule=schedule,
            participants=participants,
            creator_location=creator_location,
            location_constraint=constraint,
        )


class JsonMeetingStore:
    """
    Meeting source backed by a JSON export.

    The file holds either a single meeting object or a list of them, with
    unique ids. Meetings without a ``timezone`` use ``default_timezone``.
    The file is read once, on construction.
    """

    def __init__(self, path: Path, default_timezone: str = DEFAULT_TIMEZONE):
        self.path = path
        self.default_timezone = default_timezone
        self._records: Dict[str, MeetingRecord] = self._load()

    def _load(self) -> Dict[str, MeetingRecord]:
        if not self.path.exists():
            raise FileNotFoundError(f"Meeting file not found: {self.path}")

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON in {self.path}: {exc}") from exc

        items = data if isinstance(data, list) else [data]
        records: Dict[str, MeetingRecord] = {}

        for item in items:
            try:
                record = MeetingRecord.model_validate(item)
            except PydanticValidationError as exc:
                raise ValueError(f"Invalid meeting in {self.path}: {exc}") from exc
            if record.id in records:
                raise ValueError(f"Duplicate meeting id detected in {self.path}: {record.id}")
            records[record.id] = record

        logger.debug("Loaded %d meeting(s) from %s", len(records), self.path)
        return records

    def meeting_ids(self) -> List[str]:
        """Return the ids of all meetings in the file, in file order."""
        return list(self._records)

    async def get_snapshot(self, meeting_id: str) -> MeetingSnapshot:
        """
        Build the snapshot for one meeting.

        Raises:
            MeetingNotFoundError: If the file has no such meeting
            ValidationError: If a slot or coordinate is out of range
        """
        record = self._records.get(meeting_id)
        if record is None:
            raise MeetingNotFoundError(f"Meeting not found: {meeting_id}")
        return record.to_snapshot(default_timezone=self.default_timezone)
