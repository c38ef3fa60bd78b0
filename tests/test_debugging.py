from metricutil.debugging import DebuggingRecorder, DebugValue
from metricutil.key import CompositeKey, Key
from metricutil.kind import MetricKind
from metricutil.recorder import Unit


def test_counter_snapshot():
    recorder = DebuggingRecorder()
    snapshotter = recorder.snapshotter()
    key = Key.from_name("requests")
    counter = recorder.register_counter(key)
    counter.increment(2)
    counter.increment(3)
    data = snapshotter.snapshot().into_dict()
    ck = CompositeKey(MetricKind.COUNTER, key)
    assert data[ck] == (None, None, DebugValue(MetricKind.COUNTER, 5))


def test_gauge_snapshot_with_description():
    recorder = DebuggingRecorder()
    recorder.describe_gauge("bytes", Unit.BYTES, "gauge desc")
    key = Key.from_name("bytes")
    gauge = recorder.register_gauge(key)
    gauge.set(4.5)
    gauge.decrement(0.5)
    entries = recorder.snapshotter().snapshot().into_list()
    assert entries == [
        (CompositeKey(MetricKind.GAUGE, key), Unit.BYTES, "gauge desc",
         DebugValue(MetricKind.GAUGE, 4.0))
    ]


def test_histogram_snapshot_drains_values():
    recorder = DebuggingRecorder()
    key = Key.from_name("latency")
    hist = recorder.register_histogram(key)
    hist.record(1.0)
    hist.record(2.0)
    snapshotter = recorder.snapshotter()
    ck = CompositeKey(MetricKind.HISTOGRAM, key)
    first = snapshotter.snapshot().into_dict()[ck][2]
    assert first.kind == MetricKind.HISTOGRAM
    assert sorted(first.value) == [1.0, 2.0]
    second = snapshotter.snapshot().into_dict()[ck][2]
    assert second.value == ()


def test_described_only_metric_is_not_emitted():
    recorder = DebuggingRecorder()
    recorder.describe_counter("unused", Unit.COUNT, "counter desc")
    assert recorder.snapshotter().snapshot().into_list() == []


def test_description_without_unit_keeps_previous_unit():
    recorder = DebuggingRecorder()
    recorder.describe_histogram("h", Unit.NANOSECONDS, "first")
    recorder.describe_histogram("h", None, "histogram desc")
    key = Key.from_name("h")
    recorder.register_histogram(key)
    unit, desc, _ = recorder.snapshotter().snapshot().into_dict()[
        CompositeKey(MetricKind.HISTOGRAM, key)
    ]
    assert unit == Unit.NANOSECONDS
    assert desc == "histogram desc"


def test_same_name_different_kinds_are_separate():
    recorder = DebuggingRecorder()
    key = Key.from_name("shared")
    recorder.register_counter(key).increment(1)
    recorder.register_gauge(key).set(9.0)
    recorder.describe_counter("shared", Unit.COUNT, "counter desc")
    data = recorder.snapshotter().snapshot().into_dict()
    assert data[CompositeKey(MetricKind.COUNTER, key)] == (
        Unit.COUNT, "counter desc", DebugValue(MetricKind.COUNTER, 1)
    )
    assert data[CompositeKey(MetricKind.GAUGE, key)] == (
        None, None, DebugValue(MetricKind.GAUGE, 9.0)
    )


def test_snapshot_keeps_registration_order_and_shares_handles():
    recorder = DebuggingRecorder()
    keys = [Key.from_name(name) for name in ("b", "a", "c")]
    for key in keys:
        recorder.register_counter(key)
    recorder.register_counter(keys[0]).increment(7)
    entries = recorder.snapshotter().snapshot().into_list()
    assert [ck.key for ck, _, _, _ in entries] == keys
    assert entries[0][3] == DebugValue(MetricKind.COUNTER, 7)