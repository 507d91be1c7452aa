"""Exhaustive tour search."""

from .errors import (
    DuplicateWaypointError,
    EmptyWaypointSetError,
    MissingItineraryError,
    TourPreconditionError,
    WaypointLimitError,
)
from .evaluator import CostModel, evaluate_ordering, validate_cost_matrix
from .progress import ProgressReporter, ProgressUpdate
from .service import check_preconditions, check_waypoints, find_best_tour
from .tracker import BestSolutionTracker

__all__ = [
    "BestSolutionTracker",
    "CostModel",
    "DuplicateWaypointError",
    "EmptyWaypointSetError",
    "MissingItineraryError",
    "ProgressReporter",
    "ProgressUpdate",
    "TourPreconditionError",
    "WaypointLimitError",
    "check_preconditions",
    "check_waypoints",
    "evaluate_ordering",
    "find_best_tour",
    "validate_cost_matrix",
]
