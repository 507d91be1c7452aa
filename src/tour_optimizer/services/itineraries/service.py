"""Cost matrix construction from the Digitransit APIs, with a file cache."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Sequence

from ...models.domain import Coordinates, CostMatrix, Itinerary
from ...persistence.filesystem import FileStorage
from ..digitransit.client import DigitransitClient
from ..search.service import check_waypoints

logger = logging.getLogger(__name__)


def fastest_itinerary(candidates: Sequence[Itinerary]) -> Itinerary | None:
    """Pick the minimum-duration candidate; the first one wins ties."""
    if not candidates:
        return None
    return min(candidates, key=lambda itinerary: itinerary.duration)


def resolve_coordinates(names: Sequence[str], client: DigitransitClient) -> dict[str, Coordinates]:
    return {name: client.geocode(name) for name in names}


def build_cost_matrix(names: Sequence[str], client: DigitransitClient) -> CostMatrix:
    """Geocode every waypoint and plan every ordered pair of distinct waypoints."""
    check_waypoints(names)
    coordinates = resolve_coordinates(names, client)
    logger.debug(f"Resolved coordinates: {coordinates}")

    matrix: CostMatrix = {}
    pair_count = len(names) * (len(names) - 1)
    fetched = 0
    for origin in names:
        for destination in names:
            if origin == destination:
                continue
            logger.info(f"Getting itineraries from {origin} to {destination}")
            candidates = client.plan(coordinates[origin], coordinates[destination])
            fastest = fastest_itinerary(candidates)
            if fastest is None:
                raise ValueError(f"Digitransit returned no itinerary from '{origin}' to '{destination}'.")
            matrix.setdefault(origin, {})[destination] = fastest
            fetched += 1
            logger.debug(f"Fetched {fetched}/{pair_count} itineraries")
    return matrix


def load_or_build_cost_matrix(
    names: Sequence[str],
    storage: FileStorage | None = None,
    client_factory: Callable[[], DigitransitClient] = DigitransitClient,
    *,
    refresh: bool = False,
    cache_path: Path | str | None = None,
) -> CostMatrix:
    """Return the cached cost matrix, or build and persist it before returning.

    A cached matrix is returned as is; completeness is checked by the search.
    """
    storage = storage or FileStorage()
    if not refresh:
        cached = storage.load_cost_matrix(cache_path)
        if cached is not None:
            return cached

    matrix = build_cost_matrix(names, client_factory())
    storage.save_cost_matrix(matrix, cache_path)
    return matrix
