"""Parallel exhaustive search for the best waypoint ordering."""

from __future__ import annotations

import logging
import os
import threading
import time
from collections import Counter
from functools import partial
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Optional, Sequence, Union

from ...config import settings
from ...models.domain import CostMatrix, SolutionSnapshot, TourResult, Waypoint
from .errors import DuplicateWaypointError, EmptyWaypointSetError, WaypointLimitError
from .evaluator import CostModel, evaluate_ordering, tour_itineraries, validate_cost_matrix
from .permutations import SharedOrderings
from .progress import ProgressReporter, ProgressSink
from .tracker import BestSolutionTracker

logger = logging.getLogger(__name__)

WaypointLike = Union[str, Waypoint]


def _waypoint_names(waypoints: Sequence[WaypointLike]) -> list[str]:
    return [waypoint.name if isinstance(waypoint, Waypoint) else str(waypoint) for waypoint in waypoints]


def check_waypoints(names: Sequence[str], max_waypoints: int | None = None) -> None:
    """Reject empty, duplicated or oversized waypoint sets."""
    if not names:
        raise EmptyWaypointSetError()
    duplicates = sorted(name for name, count in Counter(names).items() if count > 1)
    if duplicates:
        raise DuplicateWaypointError(duplicates)
    limit = max_waypoints if max_waypoints is not None else settings.max_waypoints
    if len(names) > limit:
        raise WaypointLimitError(len(names), limit)


def check_preconditions(
    names: Sequence[str],
    cost_matrix: CostMatrix,
    max_waypoints: int | None = None,
) -> None:
    """Validate a search input once, before any worker starts."""
    check_waypoints(names, max_waypoints)
    validate_cost_matrix(names, cost_matrix)


def _default_workers() -> int:
    return settings.search_max_workers or os.cpu_count() or 1


def find_best_tour(
    waypoints: Sequence[WaypointLike],
    cost_matrix: CostMatrix,
    *,
    cost_model: CostModel | str | None = None,
    max_workers: int | None = None,
    batch_size: int | None = None,
    progress_interval: int | None = None,
    on_progress: Optional[ProgressSink] = None,
    on_improvement: Optional[Callable[[SolutionSnapshot], None]] = None,
    track_worst: bool = True,
    stop_event: Optional[threading.Event] = None,
    best_tracker: Optional[BestSolutionTracker] = None,
    max_waypoints: int | None = None,
) -> TourResult:
    """Evaluate every ordering of ``waypoints`` and return the best (and worst) tour.

    The cost matrix is only read. Setting ``stop_event`` makes the workers stop
    between orderings; the result then carries ``cancelled=True`` and the
    best ordering seen so far.
    """
    names = _waypoint_names(waypoints)
    check_preconditions(names, cost_matrix, max_waypoints=max_waypoints)

    model = CostModel(cost_model or settings.cost_model)
    workers = max_workers or _default_workers()
    orderings = SharedOrderings(names, batch_size=batch_size or settings.search_batch_size)
    progress = ProgressReporter(
        total=orderings.total,
        interval=progress_interval or settings.progress_interval,
        sink=on_progress,
    )
    best = best_tracker or BestSolutionTracker("min")
    if best.objective != "min":
        raise ValueError("best_tracker must minimise the comparison metric.")
    worst = BestSolutionTracker("max") if track_worst else None
    # Internal abort flag; the caller's stop_event is only read.
    abort = threading.Event()

    def stopped() -> bool:
        return abort.is_set() or (stop_event is not None and stop_event.is_set())

    def worker() -> int:
        evaluated = 0
        while not stopped():
            batch = orderings.next_batch()
            if not batch:
                break
            for ordering in batch:
                if stopped():
                    break
                metrics = evaluate_ordering(ordering, cost_matrix, names, model)
                itineraries = partial(tour_itineraries, ordering, cost_matrix)
                if best.offer(ordering, metrics, itineraries) and on_improvement is not None:
                    snapshot = best.current_best()
                    if snapshot is not None:
                        on_improvement(snapshot)
                if worst is not None:
                    worst.offer(ordering, metrics, itineraries)
                progress.increment()
                evaluated += 1
        return evaluated

    logger.info(
        f"Searching {orderings.total} orderings of {len(names)} waypoints "
        f"with {workers} workers (cost model: {model.value})"
    )
    start_time = time.perf_counter()
    evaluated = 0
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="tour-search") as executor:
        futures = [executor.submit(worker) for _ in range(workers)]
        try:
            for future in as_completed(futures):
                evaluated += future.result()
        except BaseException:
            # Also covers KeyboardInterrupt, so the executor does not wait for a full search.
            abort.set()
            raise
    elapsed = time.perf_counter() - start_time
    progress.finish()

    cancelled = evaluated < orderings.total
    if cancelled:
        logger.warning(f"Search stopped after {evaluated} of {orderings.total} orderings")
    else:
        logger.info(f"Evaluated {evaluated} orderings in {elapsed:.2f}s ({best.improvements} improvements)")

    return TourResult(
        best=best.current_best(),
        worst=worst.current_best() if worst is not None else None,
        evaluated=evaluated,
        total=orderings.total,
        cost_model=model.value,
        elapsed_seconds=elapsed,
        cancelled=cancelled,
        metadata={"workers": workers, "improvements": best.improvements},
    )
