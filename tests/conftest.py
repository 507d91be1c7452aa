from typing import Callable

import pytest

from tour_optimizer.models.domain import CostMatrix, Itinerary, Leg


def _itinerary(duration: float, distance: float = 0.0, walk_distance: float = 0.0) -> Itinerary:
    legs = (Leg(mode="BUS", duration=duration, distance=distance, trip="55"),) if distance else ()
    return Itinerary(legs=legs, duration=duration, walk_distance=walk_distance)


def _build_matrix(
    names: list[str],
    durations: dict[tuple[str, str], float],
    *,
    symmetric: bool = True,
    distances: dict[tuple[str, str], float] | None = None,
    walk_distances: dict[tuple[str, str], float] | None = None,
) -> CostMatrix:
    distances = distances or {}
    walk_distances = walk_distances or {}

    def _lookup(table: dict[tuple[str, str], float], origin: str, destination: str) -> float | None:
        if (origin, destination) in table:
            return table[(origin, destination)]
        if symmetric and (destination, origin) in table:
            return table[(destination, origin)]
        return None

    matrix: CostMatrix = {}
    for origin in names:
        for destination in names:
            if origin == destination:
                continue
            duration = _lookup(durations, origin, destination)
            if duration is None:
                continue
            matrix.setdefault(origin, {})[destination] = _itinerary(
                duration,
                distance=_lookup(distances, origin, destination) or 0.0,
                walk_distance=_lookup(walk_distances, origin, destination) or 0.0,
            )
    return matrix


@pytest.fixture
def make_itinerary() -> Callable[..., Itinerary]:
    return _itinerary


@pytest.fixture
def build_matrix() -> Callable[..., CostMatrix]:
    return _build_matrix


@pytest.fixture
def three_stop_matrix() -> CostMatrix:
    """A<->B 600 s, B<->C 300 s, A<->C 1200 s."""
    return _build_matrix(
        ["A", "B", "C"],
        {("A", "B"): 600.0, ("B", "C"): 300.0, ("A", "C"): 1200.0},
    )


@pytest.fixture
def four_stop_matrix() -> CostMatrix:
    """Asymmetric durations with distances and walking, so orderings differ."""
    names = ["A", "B", "C", "D"]
    durations = {}
    distances = {}
    walk_distances = {}
    for i, origin in enumerate(names):
        for j, destination in enumerate(names):
            if origin == destination:
                continue
            durations[(origin, destination)] = float(100 * (i + 1) + 37 * (j + 1) + 11 * ((i * j) % 3))
            distances[(origin, destination)] = float(1000 + 250 * abs(i - j))
            walk_distances[(origin, destination)] = float(50 * (i + j))
    return _build_matrix(
        names,
        durations,
        symmetric=False,
        distances=distances,
        walk_distances=walk_distances,
    )
