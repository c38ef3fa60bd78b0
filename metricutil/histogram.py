"""A bucketed histogram."""

from __future__ import annotations

from itertools import accumulate
from typing import Iterable, List, Sequence, Tuple


class Histogram:
    """Counts samples into cumulative ``<= bound`` buckets, as Prometheus histograms do."""

    def __init__(self, bounds: Sequence[float]) -> None:
        bounds = [float(bound) for bound in bounds]
        if not bounds:
            raise ValueError("histogram bounds must not be empty")
        self._bounds: List[float] = bounds
        self._buckets: List[int] = [0] * len(bounds)
        self._count = 0
        self._sum = 0.0

    def sum(self) -> float:
        """The sum of all samples."""
        return self._sum

    def count(self) -> int:
        """The number of samples."""
        return self._count

    def buckets(self) -> List[Tuple[float, int]]:
        """Pairs of bucket bound and the count of samples in that bucket."""
        return list(zip(self._bounds, self._buckets))

    def record(self, sample: float) -> None:
        """Records a single sample."""
        self._sum += sample
        self._count += 1
        self._buckets = [
            count + 1 if sample <= bound else count
            for bound, count in zip(self._bounds, self._buckets)
        ]

    def record_many(self, samples: Iterable[float]) -> None:
        """Records many samples."""
        bucketed = [0] * len(self._bounds)
        total = 0.0
        count = 0
        for sample in samples:
            total += sample
            count += 1
            idx = next((i for i, bound in enumerate(self._bounds) if sample <= bound), None)
            if idx is not None:
                bucketed[idx] += 1

        # Each bucket also holds every sample of the buckets below it.
        self._buckets = [
            current + local for current, local in zip(self._buckets, accumulate(bucketed))
        ]
        self._sum += total
        self._count += count

    def __repr__(self) -> str:
        return f"Histogram(count={self._count}, sum={self._sum}, buckets={self.buckets()})"