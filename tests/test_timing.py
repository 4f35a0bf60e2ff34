import dataclasses
import types

import pytest

from microbench.harness import summarize
from microbench.instrumentation import (
    DurationCollector,
    IterationResult,
    Timer,
    measure,
    percentile,
    timed,
)
from microbench.instrumentation import timing


class TestTimer:
    def test_elapsed_after_stop(self):
        timer = Timer("t").start()
        timer.stop()
        assert timer.elapsed >= 0.0
        assert not timer.running

    def test_elapsed_never_negative(self):
        timer = Timer("t")
        timer.start_time = 10.0
        timer.end_time = 5.0
        assert timer.elapsed == 0.0

    def test_uses_perf_counter(self, monkeypatch):
        ticks = iter([100.0, 100.25])
        fake_time = types.SimpleNamespace(perf_counter=lambda: next(ticks))
        monkeypatch.setattr(timing, "time", fake_time)
        with timed("x") as timer:
            pass
        assert timer.elapsed == pytest.approx(0.25)
        assert timer.elapsed_ms == pytest.approx(250.0)


class TestMeasure:
    def test_returns_duration_and_label(self):
        calls = []

        def unit():
            calls.append(1)
            return "label"

        duration, label = measure(unit)
        assert calls == [1]
        assert duration >= 0.0
        assert label == "label"

    def test_none_label(self):
        _, label = measure(lambda: None)
        assert label is None

    def test_exception_propagates(self):
        def unit():
            raise ZeroDivisionError("nope")

        with pytest.raises(ZeroDivisionError):
            measure(unit)


class TestPercentile:
    def test_empty(self):
        assert percentile([], 50) is None

    def test_interpolates(self):
        assert percentile([1.0, 2.0, 3.0, 4.0], 50) == pytest.approx(2.5)
        assert percentile([5.0], 95) == 5.0


class TestSummarize:
    def test_empty_report(self):
        report = summarize([])
        assert report.count == 0
        assert report.total == 0.0
        assert report.mean is None
        assert report.min is None
        assert report.max is None
        assert report.empty

    def test_statistics(self):
        results = [
            IterationResult(index=1, duration=1.0),
            IterationResult(index=2, duration=2.0),
            IterationResult(index=3, duration=3.0),
        ]
        report = summarize(results)
        assert report.count == 3
        assert report.total == pytest.approx(6.0)
        assert report.mean == pytest.approx(2.0)
        assert report.min == 1.0
        assert report.max == 3.0
        assert report.median == 2.0
        assert report.stdev == pytest.approx(1.0)

    def test_single_result_has_no_stdev(self):
        report = summarize([IterationResult(index=1, duration=0.5)])
        assert report.mean == 0.5
        assert report.stdev is None

    def test_report_is_immutable(self):
        report = summarize([])
        with pytest.raises(dataclasses.FrozenInstanceError):
            report.count = 5

    def test_collector_clear(self):
        collector = DurationCollector()
        collector.add(IterationResult(index=1, duration=0.1))
        assert collector.count == 1
        collector.clear()
        assert collector.stats()["count"] == 0
