"""Metric recency: generation tracking and removal of idle metrics.

A metric's generation counts how many times it has been modified, so an
observer can tell whether it changed between two observations even when its
value did not. ``Recency`` combines generations with the time a metric was
last seen to change, and deletes metrics from a registry once they have been
idle for longer than a timeout.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Callable, Dict, Generic, Optional, Tuple, TypeVar, Union

from metricutil.kind import MetricKind, MetricKindMask
from metricutil.registry import Registry
from metricutil.storage import AtomicStorage, Storage

T = TypeVar("T")
V = TypeVar("V")


@dataclass(frozen=True, order=True)
class Generation:
    """An opaque, ordered generation number of a metric."""

    value: int


class Generational(Generic[T]):
    """Wraps a metric value and counts every modification made through it."""

    __slots__ = ("_inner", "_lock", "_gen")

    def __init__(self, inner: T) -> None:
        self._inner = inner
        self._lock = threading.Lock()
        self._gen = 0

    @property
    def inner(self) -> T:
        """The wrapped value."""
        return self._inner

    def get_generation(self) -> Generation:
        """The current generation."""
        with self._lock:
            return Generation(self._gen)

    def with_increment(self, f: Callable[[T], V]) -> V:
        """Calls ``f`` with the inner value, then advances the generation."""
        result = f(self._inner)
        with self._lock:
            self._gen += 1
        return result

    def increment(self, value: Union[int, float]) -> None:
        """Increments the inner counter or gauge."""
        self.with_increment(lambda inner: inner.increment(value))

    def absolute(self, value: int) -> None:
        """Sets the inner counter to an absolute value."""
        self.with_increment(lambda inner: inner.absolute(value))

    def decrement(self, value: float) -> None:
        """Decrements the inner gauge."""
        self.with_increment(lambda inner: inner.decrement(value))

    def set(self, value: float) -> None:
        """Sets the inner gauge."""
        self.with_increment(lambda inner: inner.set(value))

    def record(self, value: float) -> None:
        """Records a sample into the inner histogram."""
        self.with_increment(lambda inner: inner.record(value))

    def __repr__(self) -> str:
        return f"Generational({self._inner!r}, gen={self._gen})"


class GenerationalStorage(Storage):
    """Storage that wraps every metric of another storage in ``Generational``."""

    def __init__(self, storage: Storage) -> None:
        self._inner = storage

    @classmethod
    def atomic(cls) -> "GenerationalStorage":
        """Generational storage over ``AtomicStorage``."""
        return cls(AtomicStorage())

    def counter(self, key: Any) -> Generational:
        return Generational(self._inner.counter(key))

    def gauge(self, key: Any) -> Generational:
        return Generational(self._inner.gauge(key))

    def histogram(self, key: Any) -> Generational:
        return Generational(self._inner.histogram(key))

    def __repr__(self) -> str:
        return f"GenerationalStorage({self._inner!r})"


def _seconds(timeout: Union[None, float, int, timedelta]) -> Optional[float]:
    if timeout is None:
        return None
    if isinstance(timeout, timedelta):
        return timeout.total_seconds()
    return float(timeout)


class Recency(Generic[T]):
    """Tracks when metrics last changed, deleting those idle for too long.

    ``clock`` returns the current time in seconds. With ``idle_timeout`` of
    ``None`` nothing is ever deleted; ``mask`` selects which metric kinds are
    subject to recency at all.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        mask: MetricKindMask = MetricKindMask.ALL,
        idle_timeout: Union[None, float, int, timedelta] = None,
    ) -> None:
        self._clock = clock
        self._mask = MetricKindMask(mask)
        self._idle_timeout = _seconds(idle_timeout)
        self._lock = threading.Lock()
        self._entries: Dict[Any, Tuple[Generation, float]] = {}

    def should_store_counter(self, key: T, gen: Generation, registry: Registry) -> bool:
        """Whether the counter should be kept; deletes it from ``registry`` if idle."""
        return self._should_store(key, gen, registry, MetricKind.COUNTER, registry.delete_counter)

    def should_store_gauge(self, key: T, gen: Generation, registry: Registry) -> bool:
        """Whether the gauge should be kept; deletes it from ``registry`` if idle."""
        return self._should_store(key, gen, registry, MetricKind.GAUGE, registry.delete_gauge)

    def should_store_histogram(self, key: T, gen: Generation, registry: Registry) -> bool:
        """Whether the histogram should be kept; deletes it from ``registry`` if idle."""
        return self._should_store(
            key, gen, registry, MetricKind.HISTOGRAM, registry.delete_histogram
        )

    def _should_store(
        self,
        key: T,
        gen: Generation,
        registry: Registry,
        kind: MetricKind,
        delete_op: Callable[[T], bool],
    ) -> bool:
        idle_timeout = self._idle_timeout
        if idle_timeout is None or not self._mask.matches(kind):
            return True

        with self._lock:
            now = self._clock()
            entry = self._entries.get(key)
            deleted = False
            if entry is None:
                self._entries[key] = (gen, now)
            else:
                last_gen, last_update = entry
                if last_gen == gen:
                    deleted = (now - last_update) > idle_timeout and delete_op(key)
                else:
                    self._entries[key] = (gen, now)

            if deleted:
                del self._entries[key]
                return False
        return True