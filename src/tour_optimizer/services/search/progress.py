"""Progress accounting for the permutation search."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ProgressUpdate:
    count: int
    total: int
    final: bool = False

    @property
    def percent(self) -> float:
        if self.total <= 0:
            return 100.0
        return self.count / self.total * 100.0


ProgressSink = Callable[[ProgressUpdate], None]


def log_progress(update: ProgressUpdate) -> None:
    logger.info(f"Permutation {update.count} of {update.total} ({update.percent:.2f}%)")


class ProgressReporter:
    """Counts evaluated orderings and emits an update every ``interval`` evaluations.

    Sampling is best effort; :meth:`finish` always emits the final count and
    must be called after the worker pool has joined.
    """

    def __init__(self, total: int, interval: int = 100_000, sink: Optional[ProgressSink] = None) -> None:
        if interval < 1:
            raise ValueError("Progress interval must be at least 1.")
        self.total = total
        self.interval = interval
        self.sink = sink or log_progress
        self._count = 0
        self._lock = threading.Lock()
        self._finished = False

    @property
    def count(self) -> int:
        return self._count

    @property
    def percent(self) -> float:
        return ProgressUpdate(self._count, self.total).percent

    def increment(self, amount: int = 1) -> int:
        with self._lock:
            before = self._count
            self._count += amount
            after = self._count
        if after // self.interval > before // self.interval:
            self._emit(ProgressUpdate(after, self.total))
        return after

    def finish(self) -> ProgressUpdate:
        with self._lock:
            already_finished = self._finished
            self._finished = True
            update = ProgressUpdate(self._count, self.total, final=True)
        if not already_finished:
            self._emit(update)
        return update

    def _emit(self, update: ProgressUpdate) -> None:
        try:
            self.sink(update)
        except Exception as exc:
            logger.warning(f"Progress sink failed: {exc}")
