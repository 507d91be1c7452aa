import logging
import threading

import pytest

from tour_optimizer.services.search.progress import ProgressReporter, ProgressUpdate


def test_emits_at_interval_and_on_finish():
    updates = []
    reporter = ProgressReporter(total=10, interval=4, sink=updates.append)

    for _ in range(10):
        reporter.increment()
    reporter.finish()

    assert [update.count for update in updates] == [4, 8, 10]
    assert updates[-1].final
    assert updates[-1].percent == pytest.approx(100.0)


def test_finish_emits_only_once():
    updates = []
    reporter = ProgressReporter(total=3, interval=100, sink=updates.append)
    reporter.increment(3)

    reporter.finish()
    reporter.finish()

    assert len(updates) == 1
    assert updates[0] == ProgressUpdate(3, 3, final=True)


def test_concurrent_increments_are_not_lost():
    updates = []
    reporter = ProgressReporter(total=8000, interval=1000, sink=updates.append)

    def work():
        for _ in range(1000):
            reporter.increment()

    threads = [threading.Thread(target=work) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    final = reporter.finish()

    assert reporter.count == 8000
    assert final.count == 8000
    assert reporter.percent == pytest.approx(100.0)
    assert sorted(update.count for update in updates if not update.final) == [
        1000, 2000, 3000, 4000, 5000, 6000, 7000, 8000
    ]


def test_default_sink_logs(caplog):
    reporter = ProgressReporter(total=2, interval=1)

    with caplog.at_level(logging.INFO, logger="tour_optimizer.services.search.progress"):
        reporter.increment()

    assert "Permutation 1 of 2 (50.00%)" in caplog.text


def test_failing_sink_does_not_break_counting():
    def sink(update):
        raise RuntimeError("display closed")

    reporter = ProgressReporter(total=2, interval=1, sink=sink)

    assert reporter.increment() == 1
    assert reporter.increment() == 2


def test_rejects_zero_interval():
    with pytest.raises(ValueError):
        ProgressReporter(total=1, interval=0)
