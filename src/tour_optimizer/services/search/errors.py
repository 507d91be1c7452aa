"""Precondition errors raised before a tour search starts."""

from __future__ import annotations


class TourPreconditionError(ValueError):
    """The waypoint set or cost matrix cannot be searched."""


class EmptyWaypointSetError(TourPreconditionError):
    def __init__(self) -> None:
        super().__init__("At least one waypoint is required to search for a tour.")


class DuplicateWaypointError(TourPreconditionError):
    def __init__(self, names: list[str]) -> None:
        self.names = names
        super().__init__(f"Waypoint names must be unique; duplicated: {', '.join(names)}")


class WaypointLimitError(TourPreconditionError):
    def __init__(self, count: int, limit: int) -> None:
        self.count = count
        self.limit = limit
        super().__init__(
            f"{count} waypoints exceed the exhaustive search limit of {limit} "
            f"({count}! orderings). Reduce the waypoint set or raise TOUR_MAX_WAYPOINTS."
        )


class MissingItineraryError(TourPreconditionError):
    def __init__(self, origin: str, destination: str, missing_count: int = 1) -> None:
        self.origin = origin
        self.destination = destination
        self.missing_count = missing_count
        message = f"Cost matrix has no itinerary from '{origin}' to '{destination}'"
        if missing_count > 1:
            message += f" ({missing_count} pairs missing in total)"
        super().__init__(message + ".")
