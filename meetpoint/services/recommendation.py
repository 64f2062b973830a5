"""
Application service that turns a meeting snapshot into recommendations.

The service fetches a consistent snapshot through a data-source adapter and
hands it to the pure domain engine (``TimeAggregator`` and
``LocationRanker``). Callers re-run it after every new submission; it keeps
no state between calls.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Sequence

from ..domain.geo import filter_catalog, geographic_center
from ..domain.location_ranker import DEFAULT_TOP_K, LocationRanker
from ..domain.models import (
    CandidateLocation,
    GeoPoint,
    LocationConstraint,
    LocationScore,
    MeetingSchedule,
    Participant,
    TimeRecommendation,
    collect_locations,
)
from ..domain.time_aggregator import TimeAggregator

logger = logging.getLogger(__name__)


@dataclass
class MeetingSnapshot:
    """Everything the engine needs about one meeting, fetched at one point in time."""
    meeting_id: str
    name: str
    schedule: MeetingSchedule
    participants: List[Participant] = field(default_factory=list)
    creator_location: Optional[GeoPoint] = None
    location_constraint: Optional[LocationConstraint] = None

    def location_points(self) -> List[GeoPoint]:
        """Creator's location first (if set), then every participant that gave one."""
        points: List[GeoPoint] = []
        if self.creator_location is not None:
            points.append(self.creator_location)
        points.extend(collect_locations(self.participants))
        return points


@dataclass
class MeetingRecommendation:
    """The engine's output for one snapshot."""
    time: Optional[TimeRecommendation]
    locations: List[LocationScore]
    center: Optional[GeoPoint]
    meeting: MeetingSnapshot


class MeetingSourceProtocol(Protocol):
    """Protocol describing the data source behaviour needed by the service."""

    async def get_snapshot(self, meeting_id: str) -> MeetingSnapshot:
        """Return the current snapshot of a meeting."""


class RecommendationService:
    """
    Orchestrates snapshot retrieval and the two recommendation engines.

    Any object implementing ``MeetingSourceProtocol`` can serve as the source.
    """

    def __init__(
        self,
        source: MeetingSourceProtocol,
        catalog: Sequence[CandidateLocation],
        top_k: Optional[int] = DEFAULT_TOP_K,
    ) -> None:
        self._source = source
        self._catalog = list(catalog)
        self._top_k = top_k
        self._aggregator = TimeAggregator()

    async def recommend(self, meeting_id: str) -> MeetingRecommendation:
        """Fetch the meeting's snapshot and compute its recommendations."""
        snapshot = await self._source.get_snapshot(meeting_id)
        return self.build_recommendation(snapshot)

    def build_recommendation(self, snapshot: MeetingSnapshot) -> MeetingRecommendation:
        """Compute recommendations for an already-fetched snapshot."""
        participants = snapshot.participants

        time = self._aggregator.compute(participants, len(participants))
        if time is None:
            logger.info("Meeting %s: no time recommendation available", snapshot.meeting_id)
        else:
            logger.info("Meeting %s: %s", snapshot.meeting_id, time.summary)

        points = snapshot.location_points()
        catalog = self._catalog_for(snapshot.location_constraint)
        ranker = LocationRanker(catalog, top_k=self._top_k)
        locations = ranker.rank(points)

        logger.debug(
            "Meeting %s: ranked %d of %d candidates against %d locations",
            snapshot.meeting_id,
            len(locations),
            len(catalog),
            len(points),
        )

        return MeetingRecommendation(
            time=time,
            locations=locations,
            center=geographic_center(points),
            meeting=snapshot,
        )

    def _catalog_for(self, constraint: Optional[LocationConstraint]) -> List[CandidateLocation]:
        if constraint is None:
            return self._catalog

        filtered = filter_catalog(self._catalog, constraint)
        if not filtered:
            logger.warning(
                "No candidate location within %.1f miles of the meeting's center",
                constraint.radius_miles,
            )
        return filtered
