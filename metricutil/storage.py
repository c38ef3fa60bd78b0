"""Metric storage: the values behind counters, gauges and histograms."""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import Any

from metricutil.bucket import AtomicBucket

_U64_MASK = (1 << 64) - 1


class AtomicCounter:
    """A thread-safe unsigned 64-bit counter that wraps on overflow."""

    __slots__ = ("_lock", "_value")

    def __init__(self, value: int = 0) -> None:
        self._lock = threading.Lock()
        self._value = value & _U64_MASK

    def increment(self, value: int) -> None:
        """Adds ``value`` to the counter."""
        with self._lock:
            self._value = (self._value + value) & _U64_MASK

    def absolute(self, value: int) -> None:
        """Raises the counter to ``value`` if it is currently lower."""
        with self._lock:
            self._value = max(self._value, value & _U64_MASK)

    def load(self) -> int:
        """The current value."""
        with self._lock:
            return self._value

    def __repr__(self) -> str:
        return f"AtomicCounter({self.load()})"


class AtomicGauge:
    """A thread-safe floating-point gauge."""

    __slots__ = ("_lock", "_value")

    def __init__(self, value: float = 0.0) -> None:
        self._lock = threading.Lock()
        self._value = float(value)

    def increment(self, value: float) -> None:
        """Adds ``value`` to the gauge."""
        with self._lock:
            self._value += value

    def decrement(self, value: float) -> None:
        """Subtracts ``value`` from the gauge."""
        with self._lock:
            self._value -= value

    def set(self, value: float) -> None:
        """Sets the gauge to ``value``."""
        with self._lock:
            self._value = float(value)

    def load(self) -> float:
        """The current value."""
        with self._lock:
            return self._value

    def __repr__(self) -> str:
        return f"AtomicGauge({self.load()})"


class Storage(ABC):
    """Creates the objects that hold metric values."""

    @abstractmethod
    def counter(self, key: Any) -> Any:
        """Creates an empty counter."""

    @abstractmethod
    def gauge(self, key: Any) -> Any:
        """Creates an empty gauge."""

    @abstractmethod
    def histogram(self, key: Any) -> Any:
        """Creates an empty histogram."""


class AtomicStorage(Storage):
    """Storage backed by thread-safe counters, gauges and buckets."""

    def counter(self, key: Any) -> AtomicCounter:
        return AtomicCounter()

    def gauge(self, key: Any) -> AtomicGauge:
        return AtomicGauge()

    def histogram(self, key: Any) -> AtomicBucket:
        return AtomicBucket()

    def __repr__(self) -> str:
        return "AtomicStorage()"