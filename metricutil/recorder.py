"""Metric handles and the recorder interface."""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from typing import Any, Optional

from metricutil.key import Key


class Unit(enum.Enum):
    """Units a metric can be described with."""

    COUNT = "count"
    PERCENT = "percent"
    SECONDS = "seconds"
    MILLISECONDS = "milliseconds"
    MICROSECONDS = "microseconds"
    NANOSECONDS = "nanoseconds"
    TEBIBYTES = "tebibytes"
    GIBIBYTES = "gibibytes"
    MEBIBYTES = "mebibytes"
    KIBIBYTES = "kibibytes"
    BYTES = "bytes"
    TERABITS_PER_SECOND = "terabits_per_second"
    GIGABITS_PER_SECOND = "gigabits_per_second"
    MEGABITS_PER_SECOND = "megabits_per_second"
    KILOBITS_PER_SECOND = "kilobits_per_second"
    BITS_PER_SECOND = "bits_per_second"
    COUNT_PER_SECOND = "count_per_second"


class _Handle:
    """A handle forwarding to an inner object, or doing nothing when there is none."""

    __slots__ = ("_inner",)

    def __init__(self, inner: Any = None) -> None:
        self._inner = inner

    @property
    def inner(self) -> Any:
        return self._inner

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._inner is other._inner

    def __hash__(self) -> int:
        return id(self._inner)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._inner!r})"


class Counter(_Handle):
    """A counter handle."""

    __slots__ = ()

    @classmethod
    def noop(cls) -> "Counter":
        """A counter that discards every update."""
        return cls(None)

    def increment(self, value: int) -> None:
        if self._inner is not None:
            self._inner.increment(value)

    def absolute(self, value: int) -> None:
        if self._inner is not None:
            self._inner.absolute(value)


class Gauge(_Handle):
    """A gauge handle."""

    __slots__ = ()

    @classmethod
    def noop(cls) -> "Gauge":
        """A gauge that discards every update."""
        return cls(None)

    def increment(self, value: float) -> None:
        if self._inner is not None:
            self._inner.increment(value)

    def decrement(self, value: float) -> None:
        if self._inner is not None:
            self._inner.decrement(value)

    def set(self, value: float) -> None:
        if self._inner is not None:
            self._inner.set(value)


class Histogram(_Handle):
    """A histogram handle."""

    __slots__ = ()

    @classmethod
    def noop(cls) -> "Histogram":
        """A histogram that discards every sample."""
        return cls(None)

    def record(self, value: float) -> None:
        if self._inner is not None:
            self._inner.record(value)


class Recorder(ABC):
    """Receives metric descriptions and registrations."""

    @abstractmethod
    def describe_counter(self, key_name: str, unit: Optional[Unit], description: str) -> None:
        """Describes a counter."""

    @abstractmethod
    def describe_gauge(self, key_name: str, unit: Optional[Unit], description: str) -> None:
        """Describes a gauge."""

    @abstractmethod
    def describe_histogram(self, key_name: str, unit: Optional[Unit], description: str) -> None:
        """Describes a histogram."""

    @abstractmethod
    def register_counter(self, key: Key) -> Counter:
        """Registers a counter and returns its handle."""

    @abstractmethod
    def register_gauge(self, key: Key) -> Gauge:
        """Registers a gauge and returns its handle."""

    @abstractmethod
    def register_histogram(self, key: Key) -> Histogram:
        """Registers a histogram and returns its handle."""


class NoopRecorder(Recorder):
    """A recorder that ignores everything."""

    def describe_counter(self, key_name, unit, description):
        pass

    def describe_gauge(self, key_name, unit, description):
        pass

    def describe_histogram(self, key_name, unit, description):
        pass

    def register_counter(self, key):
        return Counter.noop()

    def register_gauge(self, key):
        return Gauge.noop()

    def register_histogram(self, key):
        return Histogram.noop()