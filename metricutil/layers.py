"""Composable layers that wrap a recorder, and a stack to chain them."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from metricutil.recorder import Recorder


class Layer(ABC):
    """Wraps an object in another."""

    @abstractmethod
    def layer(self, inner: Any) -> Any:
        """Returns ``inner`` wrapped by this layer."""


class Stack(Recorder):
    """Composes layers around a recorder, each push wrapping the whole stack so far."""

    def __init__(self, inner: Any) -> None:
        self._inner = inner

    @property
    def inner(self) -> Any:
        return self._inner

    def push(self, layer: Layer) -> "Stack":
        """Wraps the current stack with ``layer``."""
        return Stack(layer.layer(self._inner))

    def describe_counter(self, key_name, unit, description):
        self._inner.describe_counter(key_name, unit, description)

    def describe_gauge(self, key_name, unit, description):
        self._inner.describe_gauge(key_name, unit, description)

    def describe_histogram(self, key_name, unit, description):
        self._inner.describe_histogram(key_name, unit, description)

    def register_counter(self, key):
        return self._inner.register_counter(key)

    def register_gauge(self, key):
        return self._inner.register_gauge(key)

    def register_histogram(self, key):
        return self._inner.register_histogram(key)