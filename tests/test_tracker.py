import random
import threading

import pytest

from tour_optimizer.models.domain import TourMetrics
from tour_optimizer.services.search.tracker import BestSolutionTracker


def _metrics(value: float) -> TourMetrics:
    return TourMetrics(path_duration=value, path_distance=0.0, walk_distance=0.0)


def test_empty_tracker_has_no_best():
    assert BestSolutionTracker().current_best() is None


def test_min_tracker_keeps_strictly_smaller():
    tracker = BestSolutionTracker("min")

    assert tracker.offer(("A", "B"), _metrics(10.0), ())
    assert not tracker.offer(("B", "A"), _metrics(12.0), ())
    assert tracker.offer(("C", "A"), _metrics(5.0), ())

    best = tracker.current_best()
    assert best.ordering == ("C", "A")
    assert best.metric == 5.0
    assert tracker.improvements == 2


def test_ties_keep_first_seen():
    tracker = BestSolutionTracker("min")

    tracker.offer(("A", "B"), _metrics(7.0), ())
    assert not tracker.offer(("B", "A"), _metrics(7.0), ())

    assert tracker.current_best().ordering == ("A", "B")


def test_max_tracker_keeps_largest():
    tracker = BestSolutionTracker("max")

    tracker.offer(("A",), _metrics(1.0), ())
    tracker.offer(("B",), _metrics(3.0), ())
    tracker.offer(("C",), _metrics(2.0), ())

    assert tracker.current_best().ordering == ("B",)


def test_itinerary_factory_only_called_for_improvements():
    tracker = BestSolutionTracker("min")
    calls = []

    def factory():
        calls.append(1)
        return ()

    tracker.offer(("A",), _metrics(5.0), factory)
    tracker.offer(("B",), _metrics(9.0), factory)

    assert len(calls) == 1


def test_unknown_objective_rejected():
    with pytest.raises(ValueError):
        BestSolutionTracker("median")


def test_concurrent_offers_never_tear(make_itinerary):
    """Snapshot itineraries encode the metric, so a torn update would be visible."""
    tracker = BestSolutionTracker("min")
    values = [float(v) for v in range(1, 4001)]
    random.Random(7).shuffle(values)
    chunks = [values[i::16] for i in range(16)]
    observed = []
    done = threading.Event()

    def offer_all(chunk):
        for value in chunk:
            ordering = (f"W{int(value)}",)
            tracker.offer(ordering, _metrics(value), lambda value=value: (make_itinerary(value),))

    def watch():
        while not done.is_set():
            snapshot = tracker.current_best()
            if snapshot is not None:
                observed.append(snapshot)

    watcher = threading.Thread(target=watch)
    watcher.start()
    workers = [threading.Thread(target=offer_all, args=(chunk,)) for chunk in chunks]
    for worker in workers:
        worker.start()
    for worker in workers:
        worker.join()
    done.set()
    watcher.join()

    best = tracker.current_best()
    assert best.metric == 1.0
    assert best.ordering == ("W1",)
    assert best.itineraries[0].duration == 1.0
    for snapshot in observed:
        assert snapshot.ordering == (f"W{int(snapshot.metric)}",)
        assert snapshot.itineraries[0].duration == snapshot.metric
    metrics_seen = [snapshot.metric for snapshot in observed]
    assert metrics_seen == sorted(metrics_seen, reverse=True)
