"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .recommendation import (
    MeetingRecommendation,
    MeetingSnapshot,
    MeetingSourceProtocol,
    RecommendationService,
)

__all__ = [
    "MeetingRecommendation",
    "MeetingSnapshot",
    "MeetingSourceProtocol",
    "RecommendationService",
]
