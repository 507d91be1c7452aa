"""Thread-safe running best (or worst) solution over concurrent offers."""

from __future__ import annotations

import threading
from typing import Callable, Literal, Sequence, Union

from ...models.domain import Itinerary, Ordering, SolutionSnapshot, TourMetrics

Objective = Literal["min", "max"]
ItinerarySource = Union[Sequence[Itinerary], Callable[[], Sequence[Itinerary]]]


class BestSolutionTracker:
    """Linearizable best-so-far register.

    The metric and the ordering that produced it live in one immutable
    :class:`SolutionSnapshot`, compared and replaced inside a single critical
    section. Readers take the published reference and never see a metric
    paired with another ordering's itineraries.

    Ties keep the snapshot that acquired the lock first. With several workers
    offering equal metrics concurrently, which of them wins is not defined.
    """

    def __init__(self, objective: Objective = "min") -> None:
        if objective not in ("min", "max"):
            raise ValueError(f"Unknown objective '{objective}'.")
        self.objective = objective
        self._lock = threading.Lock()
        self._best: SolutionSnapshot | None = None
        self._improvements = 0

    def _improves(self, candidate: float, current: SolutionSnapshot | None) -> bool:
        if current is None:
            return True
        if self.objective == "min":
            return candidate < current.metric
        return candidate > current.metric

    def offer(self, ordering: Ordering, metrics: TourMetrics, itineraries: ItinerarySource) -> bool:
        """Record ``ordering`` if it strictly improves on the current best.

        ``itineraries`` may be a callable so the snapshot is only built for
        candidates that pass the unlocked pre-check. The pre-check is safe
        because the published metric only ever moves in the improving
        direction.
        """
        metric = metrics.comparison_metric
        if not self._improves(metric, self._best):
            return False

        legs = itineraries() if callable(itineraries) else itineraries
        snapshot = SolutionSnapshot(ordering=tuple(ordering), itineraries=tuple(legs), metrics=metrics)

        with self._lock:
            if not self._improves(metric, self._best):
                return False
            self._best = snapshot
            self._improvements += 1
            return True

    def current_best(self) -> SolutionSnapshot | None:
        return self._best

    @property
    def improvements(self) -> int:
        return self._improvements
