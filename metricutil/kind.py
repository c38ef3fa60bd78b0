"""Metric kinds and masks for matching against them."""

from __future__ import annotations

import enum


class MetricKind(enum.IntEnum):
    """The kind, or type, of a metric."""

    COUNTER = 0
    GAUGE = 1
    HISTOGRAM = 2


class MetricKindMask(enum.IntFlag):
    """A bitmask of metric kinds, combinable with ``|``."""

    NONE = 0
    COUNTER = 1
    GAUGE = 2
    HISTOGRAM = 4
    ALL = 7

    def matches(self, kind: MetricKind) -> bool:
        """Whether this mask contains the given metric kind."""
        return bool(self & _KIND_BITS[MetricKind(kind)])


_KIND_BITS = {
    MetricKind.COUNTER: MetricKindMask.COUNTER,
    MetricKind.GAUGE: MetricKindMask.GAUGE,
    MetricKind.HISTOGRAM: MetricKindMask.HISTOGRAM,
}