"""
Domain layer - Pure business logic without external dependencies.
"""

from .exceptions import CatalogError, MeetingNotFoundError, MeetpointError, ValidationError
from .geo import filter_catalog, geographic_center, haversine_distance
from .location_ranker import LocationRanker, rank_locations
from .models import (
    BestEffortRecommendation,
    CandidateLocation,
    GeoPoint,
    LocationConstraint,
    LocationScore,
    MeetingSchedule,
    Participant,
    TimeRange,
    TimeRecommendation,
    TimeSlot,
    UniversalRecommendation,
)
from .time_aggregator import TimeAggregator, compute_time_recommendation

__all__ = [
    "BestEffortRecommendation",
    "CandidateLocation",
    "CatalogError",
    "GeoPoint",
    "LocationConstraint",
    "LocationRanker",
    "LocationScore",
    "MeetingNotFoundError",
    "MeetingSchedule",
    "MeetpointError",
    "Participant",
    "TimeAggregator",
    "TimeRange",
    "TimeRecommendation",
    "TimeSlot",
    "UniversalRecommendation",
    "ValidationError",
    "compute_time_recommendation",
    "filter_catalog",
    "geographic_center",
    "haversine_distance",
    "rank_locations",
]
