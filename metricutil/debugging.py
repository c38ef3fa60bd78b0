"""A recorder for debugging and testing, with point-in-time snapshots."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from metricutil.key import CompositeKey, Key
from metricutil.kind import MetricKind
from metricutil.recorder import Counter, Gauge, Histogram, Recorder, Unit
from metricutil.registry import Registry


@dataclass(frozen=True)
class DebugValue:
    """A point-in-time raw value: an int for counters, a float for gauges,
    and a tuple of floats for histograms."""

    kind: MetricKind
    value: Any


SnapshotEntry = Tuple[CompositeKey, Optional[Unit], Optional[str], DebugValue]


class Snapshot:
    """A point-in-time snapshot of every metric in a ``DebuggingRecorder``."""

    def __init__(self, entries: List[SnapshotEntry]) -> None:
        self._entries = entries

    def into_dict(self) -> Dict[CompositeKey, Tuple[Optional[Unit], Optional[str], DebugValue]]:
        """The snapshot as a mapping keyed by composite key."""
        return {ck: (unit, desc, value) for ck, unit, desc, value in self._entries}

    def into_list(self) -> List[SnapshotEntry]:
        """The snapshot as a list of ``(key, unit, description, value)`` tuples."""
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)


class _State:
    """State shared between a recorder and its snapshotters."""

    def __init__(self) -> None:
        self.registry = Registry.atomic()
        self.lock = threading.Lock()
        self.seen: Dict[CompositeKey, None] = {}
        self.metadata: Dict[Tuple[MetricKind, str], Tuple[Optional[Unit], str]] = {}


class Snapshotter:
    """Takes snapshots of a ``DebuggingRecorder``."""

    def __init__(self, state: _State) -> None:
        self._state = state

    def snapshot(self) -> Snapshot:
        """Takes a snapshot; histogram values are drained by it."""
        state = self._state
        counters = state.registry.get_counter_handles()
        gauges = state.registry.get_gauge_handles()
        histograms = state.registry.get_histogram_handles()
        with state.lock:
            seen = list(state.seen)
            metadata = dict(state.metadata)

        entries: List[SnapshotEntry] = []
        for ck in seen:
            value: Optional[DebugValue] = None
            if ck.kind == MetricKind.COUNTER:
                counter = counters.get(ck.key)
                if counter is not None:
                    value = DebugValue(MetricKind.COUNTER, counter.load())
            elif ck.kind == MetricKind.GAUGE:
                gauge = gauges.get(ck.key)
                if gauge is not None:
                    value = DebugValue(MetricKind.GAUGE, gauge.load())
            else:
                bucket = histograms.get(ck.key)
                if bucket is not None:
                    values: List[float] = []
                    bucket.clear_with(lambda xs: values.extend(float(x) for x in xs))
                    value = DebugValue(MetricKind.HISTOGRAM, tuple(values))

            unit, desc = metadata.get((ck.kind, ck.key.name), (None, None))

            # Metrics that were only described, never registered, are left out.
            if value is not None:
                entries.append((ck, unit, desc, value))
        return Snapshot(entries)


class DebuggingRecorder(Recorder):
    """A simple recorder whose raw values can be snapshotted at any time."""

    def __init__(self) -> None:
        self._state = _State()

    def snapshotter(self) -> Snapshotter:
        """A snapshotter attached to this recorder."""
        return Snapshotter(self._state)

    def _describe(self, kind: MetricKind, key_name: str, unit: Optional[Unit], desc: str) -> None:
        with self._state.lock:
            current_unit, _ = self._state.metadata.get((kind, str(key_name)), (None, desc))
            new_unit = unit if unit is not None else current_unit
            self._state.metadata[(kind, str(key_name))] = (new_unit, desc)

    def _track(self, kind: MetricKind, key: Key) -> None:
        with self._state.lock:
            self._state.seen.setdefault(CompositeKey(kind, key), None)

    def describe_counter(self, key_name, unit, description):
        self._describe(MetricKind.COUNTER, key_name, unit, description)

    def describe_gauge(self, key_name, unit, description):
        self._describe(MetricKind.GAUGE, key_name, unit, description)

    def describe_histogram(self, key_name, unit, description):
        self._describe(MetricKind.HISTOGRAM, key_name, unit, description)

    def register_counter(self, key):
        self._track(MetricKind.COUNTER, key)
        return self._state.registry.get_or_create_counter(key, Counter)

    def register_gauge(self, key):
        self._track(MetricKind.GAUGE, key)
        return self._state.registry.get_or_create_gauge(key, Gauge)

    def register_histogram(self, key):
        self._track(MetricKind.HISTOGRAM, key)
        return self._state.registry.get_or_create_histogram(key, Histogram)