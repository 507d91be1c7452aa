"""Scoring of a single ordering against the cost matrix.

Everything here is a pure function of its arguments, so workers call it
without any synchronisation.
"""

from __future__ import annotations

from enum import Enum
from typing import Sequence

from ...models.domain import CostMatrix, Itinerary, Ordering, TourMetrics
from .errors import MissingItineraryError


class CostModel(str, Enum):
    """How an ordering is ranked.

    ``BOUNDARY`` adds the time for every other waypoint to reach the first one
    and for the last one to reach every other waypoint. ``PATH_ONLY`` ranks by
    the consecutive path duration alone.
    """

    BOUNDARY = "boundary"
    PATH_ONLY = "path_only"


def lookup_itinerary(cost_matrix: CostMatrix, origin: str, destination: str) -> Itinerary:
    try:
        return cost_matrix[origin][destination]
    except KeyError:
        raise MissingItineraryError(origin, destination) from None


def tour_itineraries(ordering: Ordering, cost_matrix: CostMatrix) -> tuple[Itinerary, ...]:
    return tuple(
        lookup_itinerary(cost_matrix, origin, destination)
        for origin, destination in zip(ordering, ordering[1:])
    )


def evaluate_ordering(
    ordering: Ordering,
    cost_matrix: CostMatrix,
    waypoint_names: Sequence[str] | None = None,
    cost_model: CostModel = CostModel.BOUNDARY,
) -> TourMetrics:
    """Compute the tour metrics of ``ordering``.

    ``waypoint_names`` is the full waypoint set used for the boundary terms;
    it defaults to the ordering itself, which is the same set for a full
    permutation.
    """
    if not ordering:
        raise ValueError("Cannot evaluate an empty ordering.")

    path_duration = 0.0
    path_distance = 0.0
    walk_distance = 0.0
    for origin, destination in zip(ordering, ordering[1:]):
        itinerary = lookup_itinerary(cost_matrix, origin, destination)
        path_duration += itinerary.duration
        path_distance += itinerary.leg_distance
        walk_distance += itinerary.walk_distance

    if CostModel(cost_model) is CostModel.PATH_ONLY:
        return TourMetrics(
            path_duration=path_duration,
            path_distance=path_distance,
            walk_distance=walk_distance,
        )

    names = ordering if waypoint_names is None else waypoint_names
    first = ordering[0]
    last = ordering[-1]
    start_duration = 0.0
    end_duration = 0.0
    for name in names:
        if name != first:
            start_duration += lookup_itinerary(cost_matrix, name, first).duration
        if name != last:
            end_duration += lookup_itinerary(cost_matrix, last, name).duration

    return TourMetrics(
        path_duration=path_duration,
        path_distance=path_distance,
        walk_distance=walk_distance,
        start_duration=start_duration,
        end_duration=end_duration,
    )


def missing_pairs(names: Sequence[str], cost_matrix: CostMatrix) -> list[tuple[str, str]]:
    """Ordered pairs of distinct waypoints with no itinerary, in waypoint order."""
    missing: list[tuple[str, str]] = []
    for origin in names:
        row = cost_matrix.get(origin, {})
        for destination in names:
            if origin != destination and destination not in row:
                missing.append((origin, destination))
    return missing


def validate_cost_matrix(names: Sequence[str], cost_matrix: CostMatrix) -> None:
    """Raise :class:`MissingItineraryError` unless every ordered pair is present."""
    missing = missing_pairs(names, cost_matrix)
    if missing:
        origin, destination = missing[0]
        raise MissingItineraryError(origin, destination, missing_count=len(missing))
