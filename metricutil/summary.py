"""A quantile sketch with relative-error guarantees, over positive and negative values."""

from __future__ import annotations

import math
from typing import Dict, Optional, Tuple

_I32_MAX = 2**31 - 1
_I32_MIN = -(2**31)

# Fixed overhead of a summary, in bytes, on top of its bins.
_FIXED_OVERHEAD = 160
_BIN_SIZE = 8


def _ceil_i32(value: float) -> int:
    """Ceiling of ``value``, saturated to the 32-bit signed range."""
    if math.isnan(value):
        return 0
    if value >= _I32_MAX:
        return _I32_MAX
    if value <= _I32_MIN:
        return _I32_MIN
    return math.ceil(value)


class _CollapsingStore:
    """Counts per bin key, keeping at most ``max_bins`` bins by merging the lowest ones."""

    __slots__ = ("_max_bins", "_bins", "_min_key", "_max_key", "_count")

    def __init__(self, max_bins: int) -> None:
        self._max_bins = max_bins
        self._bins: Dict[int, int] = {}
        self._min_key = 0
        self._max_key = 0
        self._count = 0

    @property
    def count(self) -> int:
        return self._count

    def __len__(self) -> int:
        if self._count == 0:
            return 0
        return self._max_key - self._min_key + 1

    def _collapse_below(self, lowest: int) -> None:
        merged = 0
        for key in [k for k in self._bins if k < lowest]:
            merged += self._bins.pop(key)
        if merged:
            self._bins[lowest] = self._bins.get(lowest, 0) + merged
        self._min_key = lowest

    def add(self, key: int) -> None:
        if self._count == 0:
            self._min_key = self._max_key = key
        elif key > self._max_key:
            self._max_key = key
            lowest = self._max_key - self._max_bins + 1
            if self._min_key < lowest:
                self._collapse_below(lowest)
        elif key < self._min_key:
            lowest = self._max_key - self._max_bins + 1
            if key < lowest:
                key = lowest
            self._min_key = key
        self._bins[key] = self._bins.get(key, 0) + 1
        self._count += 1

    def key_at_rank(self, rank: int) -> int:
        seen = 0
        for key in sorted(self._bins):
            seen += self._bins[key]
            if seen >= rank:
                return key
        return self._max_key


class DDSketch:
    """A relative-error quantile sketch.

    ``alpha`` is the relative accuracy, ``max_num_bins`` bounds memory by merging the
    lowest bins, and values whose magnitude is at most ``min_value`` count as zero.
    """

    def __init__(
        self, alpha: float = 0.01, max_num_bins: int = 2048, min_value: float = 1.0e-9
    ) -> None:
        if not 0.0 < alpha < 1.0:
            raise ValueError("alpha must be between 0 and 1, exclusive")
        if max_num_bins < 1:
            raise ValueError("max_num_bins must be at least 1")
        if not min_value > 0.0:
            raise ValueError("min_value must be greater than zero")
        ratio = (2.0 * alpha) / (1.0 - alpha)
        self._gamma = 1.0 + ratio
        self._gamma_ln = math.log1p(ratio)
        self._min_value = min_value
        self._offset = 1 - int(math.log(min_value) / self._gamma_ln)
        self._store = _CollapsingStore(max_num_bins)
        self._min = math.inf
        self._max = -math.inf
        self._sum = 0.0

    def _key(self, value: float) -> int:
        if value < -self._min_value:
            return -_ceil_i32(math.log(-value) / self._gamma_ln) - self._offset
        if value > self._min_value:
            return _ceil_i32(math.log(value) / self._gamma_ln) + self._offset
        return 0

    def _pow_gamma(self, key: int) -> float:
        return math.exp(key * self._gamma_ln)

    def add(self, value: float) -> None:
        """Adds a sample."""
        self._store.add(self._key(value))
        if value < self._min:
            self._min = value
        if self._max < value:
            self._max = value
        self._sum += value

    def quantile(self, q: float) -> Optional[float]:
        """The estimated value at quantile ``q``, or None when empty.

        Raises ValueError when ``q`` is outside [0, 1].
        """
        if not 0.0 <= q <= 1.0:
            raise ValueError("quantile must be between 0 and 1, inclusive")
        if self.count() == 0:
            return None
        if q == 0.0:
            return self._min
        if q == 1.0:
            return self._max

        rank = int(q * (self.count() - 1) + 1.0)
        key = self._store.key_at_rank(rank)
        if key < 0:
            key += self._offset
            estimate = -2.0 * self._pow_gamma(-key) / (1.0 + self._gamma)
        elif key > 0:
            key -= self._offset
            estimate = 2.0 * self._pow_gamma(key) / (1.0 + self._gamma)
        else:
            estimate = 0.0
        return min(max(estimate, self._min), self._max)

    def count(self) -> int:
        """The number of samples."""
        return self._store.count

    def length(self) -> int:
        """The number of bins in use."""
        return len(self._store)

    def __repr__(self) -> str:
        return f"DDSketch(count={self.count()}, bins={self.length()})"


class Summary:
    """Quantiles over an arbitrary distribution of floats, including negative values.

    Negative and positive values are kept in two separate sketches mapped back to
    back, with values whose magnitude is at most ``min_value`` counted as zeroes.
    """

    def __init__(self, alpha: float, max_buckets: int, min_value: float) -> None:
        min_value = abs(min_value)
        self._negative = DDSketch(alpha, max_buckets, min_value)
        self._positive = DDSketch(alpha, max_buckets, min_value)
        self._min_value = min_value
        self._zeroes = 0
        self._min = math.inf
        self._max = -math.inf

    @classmethod
    def with_defaults(cls) -> "Summary":
        """A summary with alpha 0.0001, 32,768 buckets and a minimum value of 1e-9."""
        return cls(0.0001, 32_768, 1.0e-9)

    def add(self, value: float) -> None:
        """Adds a sample; infinities are ignored and tiny magnitudes count as zero."""
        if math.isinf(value):
            return
        if value < self._min:
            self._min = value
        if value > self._max:
            self._max = value

        if value > self._min_value:
            self._positive.add(value)
        elif value < -self._min_value:
            self._negative.add(-value)
        else:
            self._zeroes += 1

    def quantile(self, q: float) -> Optional[float]:
        """The estimated value at ``q``, or None if empty or ``q`` is outside [0, 1]."""
        if not 0.0 <= q <= 1.0 or self.count() == 0:
            return None

        ncount = self._negative.count()
        pcount = self._positive.count()
        zcount = self._zeroes
        total = ncount + pcount + zcount
        rank = int(q * (total - 1))

        if rank < ncount:
            nq = 1.0 - (rank / ncount)
            value = self._negative.quantile(nq)
            return None if value is None else -value
        if rank < ncount + zcount:
            return 0.0
        pq = (rank - (ncount + zcount)) / pcount
        return self._positive.quantile(pq)

    def min(self) -> float:
        """The smallest value seen so far."""
        return self._min

    def max(self) -> float:
        """The largest value seen so far."""
        return self._max

    def is_empty(self) -> bool:
        """Whether no samples have been added."""
        return self.count() == 0

    def count(self) -> int:
        """The number of samples."""
        return self._negative.count() + self._positive.count() + self._zeroes

    def detailed_count(self) -> Tuple[int, int, int]:
        """The counts of zero, negative and positive samples."""
        return self._zeroes, self._negative.count(), self._positive.count()

    def estimated_size(self) -> int:
        """A rough size in bytes: a fixed overhead plus eight bytes per bin."""
        bins = self._positive.length() + self._negative.length()
        return _FIXED_OVERHEAD + bins * _BIN_SIZE

    def __repr__(self) -> str:
        return f"Summary(count={self.count()}, min={self._min}, max={self._max})"