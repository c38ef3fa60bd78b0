"""Quantiles with human-friendly labels."""

from __future__ import annotations

import math
from decimal import Decimal
from typing import Iterable, List


def _format_float(value: float) -> str:
    """Formats a float in plain decimal notation, with no trailing ``.0``."""
    if value.is_integer():
        return str(int(value))
    text = repr(value)
    if "e" in text or "E" in text:
        text = format(Decimal(text), "f")
    return text


class Quantile:
    """A quantile value clamped to [0, 1] with a label such as ``p99``, ``min`` or ``max``."""

    __slots__ = ("_value", "_label")

    def __init__(self, quantile: float) -> None:
        quantile = float(quantile)
        clamped = 0.0 if math.isnan(quantile) else min(max(quantile, 0.0), 1.0)
        raw_label = _format_float(clamped)
        if raw_label == "0":
            label = "min"
        elif raw_label == "1":
            label = "max"
        else:
            label = ("p" + _format_float(clamped * 100.0)).replace(".", "")
        self._value = clamped
        self._label = label

    def label(self) -> str:
        """The human-friendly display label."""
        return self._label

    def value(self) -> float:
        """The raw quantile value."""
        return self._value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Quantile):
            return NotImplemented
        return self._value == other._value and self._label == other._label

    def __hash__(self) -> int:
        return hash((self._value, self._label))

    def __repr__(self) -> str:
        return f"Quantile({self._value!r}, {self._label!r})"


def parse_quantiles(quantiles: Iterable[float]) -> List[Quantile]:
    """Converts floating-point values into quantiles."""
    return [Quantile(q) for q in quantiles]