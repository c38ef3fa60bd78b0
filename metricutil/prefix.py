"""A layer that prefixes every metric name."""

from __future__ import annotations

from typing import Any

from metricutil.key import Key
from metricutil.layers import Layer
from metricutil.recorder import Recorder


class Prefix(Recorder):
    """Forwards to ``inner`` with every name turned into ``<prefix>.<name>``."""

    def __init__(self, prefix: str, inner: Any) -> None:
        self._prefix = str(prefix)
        self._inner = inner

    @property
    def inner(self) -> Any:
        return self._inner

    def prefix_key(self, key: Key) -> Key:
        """The key with its name prefixed and its labels kept."""
        return Key.from_parts(f"{self._prefix}.{key.name}", key.labels)

    def prefix_key_name(self, key_name: str) -> str:
        """The key name with the prefix applied."""
        return f"{self._prefix}.{key_name}"

    def describe_counter(self, key_name, unit, description):
        self._inner.describe_counter(self.prefix_key_name(key_name), unit, description)

    def describe_gauge(self, key_name, unit, description):
        self._inner.describe_gauge(self.prefix_key_name(key_name), unit, description)

    def describe_histogram(self, key_name, unit, description):
        self._inner.describe_histogram(self.prefix_key_name(key_name), unit, description)

    def register_counter(self, key):
        return self._inner.register_counter(self.prefix_key(key))

    def register_gauge(self, key):
        return self._inner.register_gauge(self.prefix_key(key))

    def register_histogram(self, key):
        return self._inner.register_histogram(self.prefix_key(key))


class PrefixLayer(Layer):
    """A layer applying a prefix to every metric name."""

    def __init__(self, prefix: str) -> None:
        self._prefix = str(prefix)

    def layer(self, inner: Any) -> Prefix:
        return Prefix(self._prefix, inner)

    def __repr__(self) -> str:
        return f"PrefixLayer({self._prefix!r})"