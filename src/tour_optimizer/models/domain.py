"""Domain models for waypoints, itineraries and tour solutions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple


@dataclass(frozen=True, slots=True)
class Coordinates:
    lat: float
    lon: float


@dataclass(frozen=True, slots=True)
class Waypoint:
    """A named location. Coordinates are only needed to build the cost matrix."""

    name: str
    coordinates: Optional[Coordinates] = None


@dataclass(frozen=True, slots=True)
class Leg:
    """One segment of an itinerary; ``trip`` is the line short name for transit legs."""

    mode: str
    duration: float
    distance: float
    trip: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Itinerary:
    """Best known way to travel between two waypoints.

    ``duration`` comes from the routing service and may include waiting and
    transfer time, so it is not the sum of the leg durations.
    """

    legs: Tuple[Leg, ...]
    duration: float
    walk_distance: float

    @property
    def leg_distance(self) -> float:
        return sum(leg.distance for leg in self.legs)


# origin name -> destination name -> itinerary
CostMatrix = Dict[str, Dict[str, Itinerary]]

Ordering = Tuple[str, ...]


@dataclass(frozen=True, slots=True)
class TourMetrics:
    path_duration: float
    path_distance: float
    walk_distance: float
    start_duration: float = 0.0
    end_duration: float = 0.0

    @property
    def boundary_duration(self) -> float:
        return self.start_duration + self.end_duration

    @property
    def comparison_metric(self) -> float:
        return self.path_duration + self.start_duration + self.end_duration


@dataclass(frozen=True, slots=True)
class SolutionSnapshot:
    """An ordering together with the itineraries of its consecutive pairs."""

    ordering: Ordering
    itineraries: Tuple[Itinerary, ...]
    metrics: TourMetrics

    @property
    def metric(self) -> float:
        return self.metrics.comparison_metric


@dataclass(slots=True)
class TourResult:
    best: Optional[SolutionSnapshot]
    worst: Optional[SolutionSnapshot]
    evaluated: int
    total: int
    cost_model: str
    elapsed_seconds: float = 0.0
    cancelled: bool = False
    metadata: dict = field(default_factory=dict)
