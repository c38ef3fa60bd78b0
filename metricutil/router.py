"""Routes metrics to target recorders by name prefix and metric kind."""

from __future__ import annotations

from typing import Dict, List, Mapping, Sequence

from metricutil.kind import MetricKind, MetricKindMask
from metricutil.recorder import Recorder


class Router(Recorder):
    """Sends each metric to the target whose route is the longest prefix of its name.

    Metrics with no matching route go to the default recorder.
    """

    def __init__(
        self,
        default: Recorder,
        global_mask: MetricKindMask,
        targets: Sequence[Recorder],
        counter_routes: Mapping[str, int],
        gauge_routes: Mapping[str, int],
        histogram_routes: Mapping[str, int],
    ) -> None:
        self._default = default
        self._global_mask = MetricKindMask(global_mask)
        self._targets: List[Recorder] = list(targets)
        self._routes: Dict[MetricKind, Dict[str, int]] = {
            MetricKind.COUNTER: dict(counter_routes),
            MetricKind.GAUGE: dict(gauge_routes),
            MetricKind.HISTOGRAM: dict(histogram_routes),
        }

    def _route(self, kind: MetricKind, name: str) -> Recorder:
        # The global mask records which kinds have any route at all.
        if not self._global_mask.matches(kind):
            return self._default
        routes = self._routes[kind]
        best = max(
            (pattern for pattern in routes if name.startswith(pattern)), key=len, default=None
        )
        if best is None:
            return self._default
        return self._targets[routes[best]]

    def describe_counter(self, key_name, unit, description):
        self._route(MetricKind.COUNTER, str(key_name)).describe_counter(key_name, unit, description)

    def describe_gauge(self, key_name, unit, description):
        self._route(MetricKind.GAUGE, str(key_name)).describe_gauge(key_name, unit, description)

    def describe_histogram(self, key_name, unit, description):
        self._route(MetricKind.HISTOGRAM, str(key_name)).describe_histogram(
            key_name, unit, description
        )

    def register_counter(self, key):
        return self._route(MetricKind.COUNTER, key.name).register_counter(key)

    def register_gauge(self, key):
        return self._route(MetricKind.GAUGE, key.name).register_gauge(key)

    def register_histogram(self, key):
        return self._route(MetricKind.HISTOGRAM, key.name).register_histogram(key)


_ROUTE_KINDS = {
    MetricKindMask.ALL: (MetricKind.COUNTER, MetricKind.GAUGE, MetricKind.HISTOGRAM),
    MetricKindMask.COUNTER: (MetricKind.COUNTER,),
    MetricKindMask.GAUGE: (MetricKind.GAUGE,),
    MetricKindMask.HISTOGRAM: (MetricKind.HISTOGRAM,),
}


class RouterBuilder:
    """Builds a ``Router`` around a default recorder.

    A route pairs a name prefix with a mask: the prefix ``foo`` matches ``foo`` and
    ``foo.submetric`` but not ``something.foo``.
    """

    def __init__(self, recorder: Recorder) -> None:
        self._default = recorder
        self._global_mask = MetricKindMask.NONE
        self._targets: List[Recorder] = []
        self._routes: Dict[MetricKind, Dict[str, int]] = {kind: {} for kind in MetricKind}

    def add_route(self, mask: MetricKindMask, pattern: str, recorder: Recorder) -> "RouterBuilder":
        """Adds a route, replacing any existing one with the same pattern and kind.

        ``mask`` must be exactly one kind or ``ALL``; anything else raises ValueError.
        """
        mask = MetricKindMask(mask)
        kinds = _ROUTE_KINDS.get(mask)
        if kinds is None:
            raise ValueError("cannot add route for unknown or empty metric kind mask")

        target_idx = len(self._targets)
        self._targets.append(recorder)
        self._global_mask |= mask
        for kind in kinds:
            self._routes[kind][str(pattern)] = target_idx
        return self

    def build(self) -> Router:
        """Builds the configured router."""
        return Router(
            self._default,
            self._global_mask,
            self._targets,
            self._routes[MetricKind.COUNTER],
            self._routes[MetricKind.GAUGE],
            self._routes[MetricKind.HISTOGRAM],
        )