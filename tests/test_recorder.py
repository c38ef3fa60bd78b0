import pytest

from metricutil.key import Key
from metricutil.recorder import Counter, Gauge, Histogram, NoopRecorder, Recorder


class _Sink:
    def __init__(self):
        self.calls = []

    def increment(self, value):
        self.calls.append(("increment", value))

    def absolute(self, value):
        self.calls.append(("absolute", value))

    def decrement(self, value):
        self.calls.append(("decrement", value))

    def set(self, value):
        self.calls.append(("set", value))

    def record(self, value):
        self.calls.append(("record", value))


def test_counter_forwards_to_inner():
    sink = _Sink()
    counter = Counter(sink)
    counter.increment(5)
    counter.absolute(9)
    assert sink.calls == [("increment", 5), ("absolute", 9)]


def test_gauge_forwards_to_inner():
    sink = _Sink()
    gauge = Gauge(sink)
    gauge.increment(1.5)
    gauge.decrement(0.5)
    gauge.set(3.0)
    assert sink.calls == [("increment", 1.5), ("decrement", 0.5), ("set", 3.0)]


def test_histogram_forwards_to_inner():
    sink = _Sink()
    histogram = Histogram(sink)
    histogram.record(2.5)
    assert sink.calls == [("record", 2.5)]


def test_noop_handles_have_no_inner():
    for handle in (Counter.noop(), Gauge.noop(), Histogram.noop()):
        assert handle.inner is None


def test_handle_equality_is_by_inner_identity():
    sink = _Sink()
    assert Counter(sink) == Counter(sink)
    assert Counter(sink) != Counter(_Sink())
    assert Counter.noop() == Counter.noop()


def test_noop_recorder_returns_noop_handles():
    recorder = NoopRecorder()
    key = Key.from_name("requests")
    assert recorder.register_counter(key) == Counter.noop()
    assert recorder.register_gauge(key) == Gauge.noop()
    assert recorder.register_histogram(key) == Histogram.noop()


def test_recorder_is_abstract():
    with pytest.raises(TypeError):
        Recorder()