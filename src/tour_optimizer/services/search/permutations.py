"""Enumeration of waypoint orderings for the exhaustive search."""

from __future__ import annotations

import itertools
import math
import threading
from typing import Iterator, Sequence

from ...models.domain import Ordering


def ordering_count(waypoint_count: int) -> int:
    """Number of orderings of ``waypoint_count`` waypoints (``n!``)."""
    if waypoint_count < 0:
        raise ValueError("Waypoint count cannot be negative.")
    return math.factorial(waypoint_count)


def iter_orderings(names: Sequence[str]) -> Iterator[Ordering]:
    """Lazily yield every ordering of ``names`` exactly once (lexicographic by input position)."""
    return itertools.permutations(tuple(names))


class SharedOrderings:
    """Thread-safe fan-out over :func:`iter_orderings`.

    Every ordering is handed to exactly one caller of :meth:`next_batch`.
    Once drained the instance stays empty; create a new one to enumerate again.
    """

    def __init__(self, names: Sequence[str], batch_size: int = 256) -> None:
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1.")
        self.total = ordering_count(len(names))
        self.batch_size = batch_size
        self._iterator = iter_orderings(names)
        self._lock = threading.Lock()
        self._dispatched = 0
        self._exhausted = False

    @property
    def dispatched(self) -> int:
        return self._dispatched

    def next_batch(self) -> list[Ordering]:
        with self._lock:
            if self._exhausted:
                return []
            batch = list(itertools.islice(self._iterator, self.batch_size))
            if len(batch) < self.batch_size:
                self._exhausted = True
            self._dispatched += len(batch)
            return batch

    def __iter__(self) -> Iterator[Ordering]:
        while True:
            batch = self.next_batch()
            if not batch:
                return
            yield from batch
