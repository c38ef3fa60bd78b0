"""A layer that discards metrics whose names contain certain patterns."""

from __future__ import annotations

from typing import Any, Iterable, List

from metricutil.layers import Layer
from metricutil.recorder import Counter, Gauge, Histogram, Recorder

_ASCII_LOWER = str.maketrans(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ", "abcdefghijklmnopqrstuvwxyz"
)


def _ascii_lower(text: str) -> str:
    """Lower-cases ASCII letters only, leaving every other character alone."""
    return text.translate(_ASCII_LOWER)


class Filter(Recorder):
    """Forwards to ``inner`` unless the metric name contains one of the patterns."""

    def __init__(self, inner: Any, patterns: Iterable[str], case_insensitive: bool = False) -> None:
        self._inner = inner
        self._case_insensitive = bool(case_insensitive)
        patterns = [str(pattern) for pattern in patterns]
        if self._case_insensitive:
            patterns = [_ascii_lower(pattern) for pattern in patterns]
        self._patterns: List[str] = patterns

    @property
    def inner(self) -> Any:
        return self._inner

    def should_filter(self, key: str) -> bool:
        """Whether ``key`` contains any of the patterns as a substring."""
        haystack = str(key)
        if self._case_insensitive:
            haystack = _ascii_lower(haystack)
        return any(pattern in haystack for pattern in self._patterns)

    def describe_counter(self, key_name, unit, description):
        if not self.should_filter(key_name):
            self._inner.describe_counter(key_name, unit, description)

    def describe_gauge(self, key_name, unit, description):
        if not self.should_filter(key_name):
            self._inner.describe_gauge(key_name, unit, description)

    def describe_histogram(self, key_name, unit, description):
        if not self.should_filter(key_name):
            self._inner.describe_histogram(key_name, unit, description)

    def register_counter(self, key):
        if self.should_filter(key.name):
            return Counter.noop()
        return self._inner.register_counter(key)

    def register_gauge(self, key):
        if self.should_filter(key.name):
            return Gauge.noop()
        return self._inner.register_gauge(key)

    def register_histogram(self, key):
        if self.should_filter(key.name):
            return Histogram.noop()
        return self._inner.register_histogram(key)


class FilterLayer(Layer):
    """A layer discarding metrics whose names contain any configured pattern.

    Patterns match anywhere in the name. Matching is case sensitive unless
    ``case_insensitive(True)`` is set, which folds ASCII letters only.
    """

    def __init__(self, patterns: Iterable[str] = ()) -> None:
        self._patterns: List[str] = [str(pattern) for pattern in patterns]
        self._case_insensitive = False

    @classmethod
    def from_patterns(cls, patterns: Iterable[str]) -> "FilterLayer":
        """Creates a layer from an existing set of patterns."""
        return cls(patterns)

    @property
    def patterns(self) -> List[str]:
        return list(self._patterns)

    def add_pattern(self, pattern: str) -> "FilterLayer":
        """Adds a pattern to match."""
        self._patterns.append(str(pattern))
        return self

    def case_insensitive(self, case_insensitive: bool) -> "FilterLayer":
        """Sets whether matching ignores ASCII case; defaults to ``False``."""
        self._case_insensitive = bool(case_insensitive)
        return self

    def layer(self, inner: Any) -> Filter:
        return Filter(inner, self._patterns, self._case_insensitive)

    def __repr__(self) -> str:
        return (
            f"FilterLayer(patterns={self._patterns!r}, "
            f"case_insensitive={self._case_insensitive})"
        )