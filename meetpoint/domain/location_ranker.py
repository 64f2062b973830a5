"""
Ranking of candidate meeting places by travel distance.
"""

from typing import Iterable, List, Optional, Sequence

from .exceptions import ValidationError
from .geo import haversine_distance
from .models import CandidateLocation, GeoPoint, LocationScore

DEFAULT_TOP_K = 5


class LocationRanker:
    """
    Scores every catalog entry against the participants' starting points.

    Candidates are ordered by mean distance, ascending. The fairness score
    (max minus mean) is reported alongside but is not a sort key: a spot
    equidistant from everyone can rank below a closer, lopsided one.
    Exact ties in mean distance keep catalog order.
    """

    def __init__(self, catalog: Sequence[CandidateLocation], top_k: Optional[int] = DEFAULT_TOP_K):
        if top_k is not None:
            if isinstance(top_k, bool) or not isinstance(top_k, int) or top_k < 1:
                raise ValidationError("top_k", top_k, "must be a positive integer or None")
        self.catalog = list(catalog)
        self.top_k = top_k

    def rank(self, points: Iterable[GeoPoint]) -> List[LocationScore]:
        """
        Rank the catalog against the given points.

        Returns the best ``top_k`` candidates (all of them when ``top_k`` is
        None), or an empty list when there are no points.
        """
        point_list = list(points)
        for point in point_list:
            if not isinstance(point, GeoPoint):
                raise ValidationError("points", point, "must contain GeoPoint values")

        if not point_list:
            return []

        scores = [self.score(candidate, point_list) for candidate in self.catalog]
        scores.sort(key=lambda s: s.mean_distance_meters)

        if self.top_k is None:
            return scores
        return scores[:self.top_k]

    @staticmethod
    def score(candidate: CandidateLocation, points: Sequence[GeoPoint]) -> LocationScore:
        """Mean and worst-case distance from one candidate to every point."""
        distances = [haversine_distance(candidate.coordinates, point) for point in points]

        return LocationScore(
            candidate=candidate,
            mean_distance_meters=sum(distances) / len(distances),
            max_distance_meters=max(distances),
        )


def rank_locations(
    points: Iterable[GeoPoint],
    catalog: Sequence[CandidateLocation],
    top_k: Optional[int] = DEFAULT_TOP_K
) -> List[LocationScore]:
    """Module-level shortcut for ``LocationRanker(catalog, top_k).rank(points)``."""
    return LocationRanker(catalog, top_k=top_k).rank(points)
