"""A sharded, thread-safe metric registry."""

from __future__ import annotations

import os
import threading
from typing import Any, Callable, Dict, Generic, List, TypeVar

from metricutil.key import hashable
from metricutil.storage import AtomicStorage, Storage

K = TypeVar("K")
V = TypeVar("V")


class _Shard:
    __slots__ = ("lock", "entries")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.entries: Dict[Any, Any] = {}


def _shard_count() -> int:
    cpus = max(1, os.cpu_count() or 1)
    return 1 << (cpus - 1).bit_length()


class _Table:
    """One kind of metric, spread over shards picked by the key's 64-bit hash."""

    def __init__(self, create: Callable[[Any], Any]) -> None:
        count = _shard_count()
        self._shards: List[_Shard] = [_Shard() for _ in range(count)]
        self._mask = count - 1
        self._create = create

    def _shard(self, key: Any) -> _Shard:
        return self._shards[hashable(key) & self._mask]

    def get_or_create(self, key: Any) -> Any:
        shard = self._shard(key)
        with shard.lock:
            value = shard.entries.get(key)
            if value is None:
                value = self._create(key)
                shard.entries[key] = value
            return value

    def delete(self, key: Any) -> bool:
        shard = self._shard(key)
        with shard.lock:
            return shard.entries.pop(key, None) is not None

    def clear(self) -> None:
        for shard in self._shards:
            with shard.lock:
                shard.entries.clear()

    def visit(self, collect: Callable[[Any, Any], Any]) -> None:
        for shard in self._shards:
            with shard.lock:
                items = list(shard.entries.items())
            for key, value in items:
                collect(key, value)

    def snapshot(self) -> Dict[Any, Any]:
        handles: Dict[Any, Any] = {}
        self.visit(handles.__setitem__)
        return handles


class Registry(Generic[K]):
    """A central listing of metrics by key, whose values come from a ``Storage``.

    Visiting goes shard by shard, so metrics added or removed during a visit may
    or may not be observed.
    """

    def __init__(self, storage: Storage) -> None:
        self._storage = storage
        self._counters = _Table(storage.counter)
        self._gauges = _Table(storage.gauge)
        self._histograms = _Table(storage.histogram)

    @classmethod
    def atomic(cls) -> "Registry":
        """A registry using atomic storage."""
        return cls(AtomicStorage())

    @property
    def storage(self) -> Storage:
        return self._storage

    def clear(self) -> None:
        """Removes all metrics."""
        self._counters.clear()
        self._gauges.clear()
        self._histograms.clear()

    def get_or_create_counter(self, key: K, op: Callable[[Any], V]) -> V:
        """Calls ``op`` with the counter for ``key``, creating it first if needed."""
        return op(self._counters.get_or_create(key))

    def get_or_create_gauge(self, key: K, op: Callable[[Any], V]) -> V:
        """Calls ``op`` with the gauge for ``key``, creating it first if needed."""
        return op(self._gauges.get_or_create(key))

    def get_or_create_histogram(self, key: K, op: Callable[[Any], V]) -> V:
        """Calls ``op`` with the histogram for ``key``, creating it first if needed."""
        return op(self._histograms.get_or_create(key))

    def delete_counter(self, key: K) -> bool:
        """Removes a counter; returns whether it existed."""
        return self._counters.delete(key)

    def delete_gauge(self, key: K) -> bool:
        """Removes a gauge; returns whether it existed."""
        return self._gauges.delete(key)

    def delete_histogram(self, key: K) -> bool:
        """Removes a histogram; returns whether it existed."""
        return self._histograms.delete(key)

    def visit_counters(self, collect: Callable[[K, Any], Any]) -> None:
        """Calls ``collect(key, counter)`` for every counter."""
        self._counters.visit(collect)

    def visit_gauges(self, collect: Callable[[K, Any], Any]) -> None:
        """Calls ``collect(key, gauge)`` for every gauge."""
        self._gauges.visit(collect)

    def visit_histograms(self, collect: Callable[[K, Any], Any]) -> None:
        """Calls ``collect(key, histogram)`` for every histogram."""
        self._histograms.visit(collect)

    def get_counter_handles(self) -> Dict[K, Any]:
        """A point-in-time mapping of every counter by key."""
        return self._counters.snapshot()

    def get_gauge_handles(self) -> Dict[K, Any]:
        """A point-in-time mapping of every gauge by key."""
        return self._gauges.snapshot()

    def get_histogram_handles(self) -> Dict[K, Any]:
        """A point-in-time mapping of every histogram by key."""
        return self._histograms.snapshot()