from datetime import timedelta

from metricutil.key import Key
from metricutil.kind import MetricKindMask
from metricutil.recency import Generation, Generational, GenerationalStorage, Recency
from metricutil.registry import Registry
from metricutil.storage import AtomicCounter, AtomicGauge


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def _registry_with_counter(key):
    registry = Registry(GenerationalStorage.atomic())
    counter = registry.get_or_create_counter(key, lambda c: c)
    return registry, counter


def test_generation_ordering():
    assert Generation(1) < Generation(2)
    assert Generation(3) == Generation(3)


def test_with_increment_returns_result_and_bumps_generation():
    gen = Generational(AtomicCounter())
    before = gen.get_generation()
    result = gen.with_increment(lambda c: "done")
    assert result == "done"
    assert gen.get_generation() > before


def test_generational_counter_updates_inner():
    counter = GenerationalStorage.atomic().counter(Key.from_name("c"))
    counter.increment(3)
    counter.absolute(10)
    assert counter.inner.load() == 10
    assert counter.get_generation() == Generation(2)


def test_generational_gauge_updates_inner():
    gauge = GenerationalStorage.atomic().gauge(Key.from_name("g"))
    gauge.set(5.0)
    gauge.increment(2.0)
    gauge.decrement(1.0)
    assert isinstance(gauge.inner, AtomicGauge)
    assert gauge.inner.load() == 6.0
    assert gauge.get_generation() == Generation(3)


def test_generational_histogram_records():
    hist = GenerationalStorage.atomic().histogram(Key.from_name("h"))
    hist.record(1.5)
    hist.record(2.5)
    assert sorted(hist.inner.data()) == [1.5, 2.5]
    assert hist.get_generation() == Generation(2)


def test_no_timeout_always_stores():
    key = Key.from_name("c")
    registry, counter = _registry_with_counter(key)
    clock = FakeClock()
    recency = Recency(clock, MetricKindMask.ALL, None)
    gen = counter.get_generation()
    assert recency.should_store_counter(key, gen, registry)
    clock.now = 1e9
    assert recency.should_store_counter(key, gen, registry)
    assert key in registry.get_counter_handles()


def test_idle_metric_is_deleted():
    key = Key.from_name("c")
    registry, counter = _registry_with_counter(key)
    clock = FakeClock()
    recency = Recency(clock, MetricKindMask.ALL, 10)
    gen = counter.get_generation()
    assert recency.should_store_counter(key, gen, registry)
    clock.now = 5.0
    assert recency.should_store_counter(key, gen, registry)
    clock.now = 20.0
    assert not recency.should_store_counter(key, gen, registry)
    assert key not in registry.get_counter_handles()


def test_changed_generation_resets_timer():
    key = Key.from_name("c")
    registry, counter = _registry_with_counter(key)
    clock = FakeClock()
    recency = Recency(clock, MetricKindMask.ALL, timedelta(seconds=10))
    assert recency.should_store_counter(key, counter.get_generation(), registry)
    clock.now = 15.0
    counter.increment(1)
    assert recency.should_store_counter(key, counter.get_generation(), registry)
    clock.now = 20.0
    assert recency.should_store_counter(key, counter.get_generation(), registry)
    assert key in registry.get_counter_handles()


def test_mask_excludes_kind():
    key = Key.from_name("g")
    registry = Registry(GenerationalStorage.atomic())
    gauge = registry.get_or_create_gauge(key, lambda g: g)
    clock = FakeClock()
    recency = Recency(clock, MetricKindMask.COUNTER, 1)
    gen = gauge.get_generation()
    assert recency.should_store_gauge(key, gen, registry)
    clock.now = 100.0
    assert recency.should_store_gauge(key, gen, registry)
    assert key in registry.get_gauge_handles()


def test_idle_histogram_is_deleted():
    key = Key.from_name("h")
    registry = Registry(GenerationalStorage.atomic())
    hist = registry.get_or_create_histogram(key, lambda h: h)
    clock = FakeClock()
    recency = Recency(clock, MetricKindMask.HISTOGRAM, 1)
    gen = hist.get_generation()
    assert recency.should_store_histogram(key, gen, registry)
    clock.now = 2.0
    assert not recency.should_store_histogram(key, gen, registry)
    assert registry.get_histogram_handles() == {}