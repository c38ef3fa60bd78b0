# metricutil

Helper types for collecting, storing and routing application metrics. Pure Python,
no runtime dependencies.

## Modules

- `metricutil.kind`: `MetricKind` (`COUNTER`, `GAUGE`, `HISTOGRAM`) and `MetricKindMask`,
  a flag type with `NONE`, `COUNTER`, `GAUGE`, `HISTOGRAM` and `ALL`. Masks combine with `|`.
  You test a mask with `matches(kind)`.
- `metricutil.key`: `Label`, `Key` (`from_name`, `from_parts`, `hashable`), `CompositeKey`
  (kind plus key, `into_parts`), `DefaultHashable` and the `hashable(value)` helper. The
  helper returns a stable 64-bit hash, which is the same from one process to the next.
- `metricutil.recorder`: the `Recorder` interface, `NoopRecorder`, the `Unit` enum, and the
  `Counter`, `Gauge` and `Histogram` handles. Each handle forwards to an inner object. The
  handle from `noop()` discards every update.
- `metricutil.layers`: the `Layer` interface and `Stack`. `Stack.push(layer)` wraps
  everything already on the stack, and the stack is itself a recorder.
- `metricutil.prefix`: `PrefixLayer` / `Prefix`. Each metric name becomes `<prefix>.<name>`,
  and labels are kept.
- `metricutil.filter`: `FilterLayer` / `Filter`. A metric is dropped when its name contains
  any pattern as a substring. Dropped registrations return noop handles. Matching is case
  sensitive unless `case_insensitive(True)` is set, and that setting folds ASCII letters only.
- `metricutil.router`: `RouterBuilder` / `Router`. A metric goes to the target whose pattern
  is the longest prefix of its name. A metric with no matching route goes to the default
  recorder. `add_route` accepts exactly one kind or `ALL` and raises `ValueError` for any
  other mask.
- `metricutil.fanout`: `FanoutBuilder` / `Fanout`. Every call is sent to each added
  recorder, in the order they were added.
- `metricutil.bucket`: `AtomicBucket`, a thread-safe, append-only bucket made of 64-value
  blocks. `data()` and `data_with(f)` return values newest block first. Inside a block,
  values keep their write order. `clear_with(f)` detaches the values and hands each block
  to `f`.
- `metricutil.storage`: `AtomicCounter` (unsigned 64-bit, wraps on overflow; `absolute`
  only raises the value), `AtomicGauge`, the `Storage` interface and `AtomicStorage`.
- `metricutil.registry`: `Registry`, a sharded, thread-safe store of counters, gauges and
  histograms. It provides `get_or_create_*`, `delete_*`, `visit_*`, `get_*_handles` and
  `clear`. `Registry.atomic()` uses `AtomicStorage`.
- `metricutil.recency`: `Generation`, `Generational` (counts modifications),
  `GenerationalStorage` (`atomic()`) and `Recency`. `Recency` deletes a metric from a
  registry once its generation has stayed the same for longer than `idle_timeout`. The
  timeout is given in seconds or as a `timedelta`. `clock` is any callable that returns
  seconds.
- `metricutil.debugging`: `DebuggingRecorder` and its `Snapshotter`. A `Snapshot` can be
  turned into a dict (`into_dict`) or a list of `(key, unit, description, DebugValue)`
  tuples (`into_list`). Taking a snapshot drains histogram values. Metrics that were
  described but never registered are left out.
- `metricutil.histogram`: `Histogram`, with cumulative `<= bound` buckets. Empty bounds
  raise `ValueError`.
- `metricutil.quantile`: `Quantile` and `parse_quantiles`. Values are clamped to [0, 1] and
  given labels such as `min`, `p99`, `p999` and `max`.
- `metricutil.summary`: `DDSketch` and `Summary`. `Summary` estimates quantiles with a
  relative-error guarantee and handles negative values. `Summary.quantile` returns `None`
  when the summary is empty or q is outside [0, 1]. `DDSketch.quantile` raises
  `ValueError` for q outside that range.

## Installing

```
pip install .
```

With the test dependencies:

```
pip install .[test]
```

## Examples

Bucketed histogram:

```python
from metricutil.histogram import Histogram

histogram = Histogram([10.0, 25.0, 100.0])
histogram.record_many([3.0, 12.0, 56.0])
histogram.record(89.0)
print(histogram.buckets())  # [(10.0, 1), (25.0, 2), (100.0, 4)]
```

Quantile labels:

```python
from metricutil.quantile import parse_quantiles

print([q.label() for q in parse_quantiles([0.0, 0.99, 0.999, 1.0])])
# ['min', 'p99', 'p999', 'max']
```

Layering a recorder:

```python
from metricutil.key import Key
from metricutil.layers import Stack
from metricutil.prefix import PrefixLayer
from metricutil.filter import FilterLayer
from metricutil.debugging import DebuggingRecorder

recorder = DebuggingRecorder()
snapshotter = recorder.snapshotter()

stack = Stack(recorder).push(FilterLayer.from_patterns(["internal"])).push(PrefixLayer("app"))
stack.register_counter(Key.from_name("requests")).increment(1)

for key, unit, description, value in snapshotter.snapshot().into_list():
    print(key.key.name, value.value)  # app.requests 1
```

Routing by metric name prefix:

```python
from metricutil.kind import MetricKindMask
from metricutil.recorder import NoopRecorder
from metricutil.router import RouterBuilder

builder = RouterBuilder(NoopRecorder())
builder.add_route(MetricKindMask.COUNTER, "http", NoopRecorder())
router = builder.build()
```

Quantile summary:

```python
from metricutil.summary import Summary

summary = Summary.with_defaults()
for value in (1.0, 2.0, 3.0, 4.0):
    summary.add(value)
print(summary.quantile(0.5), summary.min(), summary.max())
```

## What it does not do

This package is a library only. It has no global recorder to install, no exporter that
sends metrics anywhere, and no command-line tool. Your code passes recorders and
registries around itself and reads values back, for example through a `Snapshotter` or
`Registry.get_counter_handles()`.

## Running the tests

```
pytest
```