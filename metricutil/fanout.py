"""A recorder that fans metrics out to several recorders."""

from __future__ import annotations

from typing import List, Sequence

from metricutil.recorder import Counter, Gauge, Histogram, Recorder


class _FanoutCounter:
    __slots__ = ("_counters",)

    def __init__(self, counters: Sequence[Counter]) -> None:
        self._counters = list(counters)

    def increment(self, value: int) -> None:
        for counter in self._counters:
            counter.increment(value)

    def absolute(self, value: int) -> None:
        for counter in self._counters:
            counter.absolute(value)


class _FanoutGauge:
    __slots__ = ("_gauges",)

    def __init__(self, gauges: Sequence[Gauge]) -> None:
        self._gauges = list(gauges)

    def increment(self, value: float) -> None:
        for gauge in self._gauges:
            gauge.increment(value)

    def decrement(self, value: float) -> None:
        for gauge in self._gauges:
            gauge.decrement(value)

    def set(self, value: float) -> None:
        for gauge in self._gauges:
            gauge.set(value)


class _FanoutHistogram:
    __slots__ = ("_histograms",)

    def __init__(self, histograms: Sequence[Histogram]) -> None:
        self._histograms = list(histograms)

    def record(self, value: float) -> None:
        for histogram in self._histograms:
            histogram.record(value)


class Fanout(Recorder):
    """Sends every description and registration to each of its recorders, in order."""

    def __init__(self, recorders: Sequence[Recorder]) -> None:
        self._recorders: List[Recorder] = list(recorders)

    def describe_counter(self, key_name, unit, description):
        for recorder in self._recorders:
            recorder.describe_counter(key_name, unit, description)

    def describe_gauge(self, key_name, unit, description):
        for recorder in self._recorders:
            recorder.describe_gauge(key_name, unit, description)

    def describe_histogram(self, key_name, unit, description):
        for recorder in self._recorders:
            recorder.describe_histogram(key_name, unit, description)

    def register_counter(self, key):
        return Counter(_FanoutCounter(r.register_counter(key) for r in self._recorders))

    def register_gauge(self, key):
        return Gauge(_FanoutGauge(r.register_gauge(key) for r in self._recorders))

    def register_histogram(self, key):
        return Histogram(_FanoutHistogram(r.register_histogram(key) for r in self._recorders))


class FanoutBuilder:
    """Collects recorders and builds a ``Fanout`` over them."""

    def __init__(self) -> None:
        self._recorders: List[Recorder] = []

    def add_recorder(self, recorder: Recorder) -> "FanoutBuilder":
        """Adds a recorder to the fanout list."""
        self._recorders.append(recorder)
        return self

    def build(self) -> Fanout:
        """Builds the ``Fanout`` recorder."""
        return Fanout(self._recorders)