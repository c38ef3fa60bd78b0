"""Metric keys, labels and self-hashing helpers."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from typing import Any, Iterable, Tuple, Union

from metricutil.kind import MetricKind


def _stable_hash(*parts: str) -> int:
    """A 64-bit hash that is the same across processes."""
    digest = hashlib.blake2b(digest_size=8)
    for part in parts:
        data = part.encode("utf-8")
        digest.update(len(data).to_bytes(8, "little"))
        digest.update(data)
    return int.from_bytes(digest.digest(), "little")


@dataclass(frozen=True, order=True)
class Label:
    """A key/value pair attached to a metric key."""

    key: str
    value: str


LabelLike = Union[Label, Tuple[str, str]]


def _to_label(label: LabelLike) -> Label:
    if isinstance(label, Label):
        return label
    key, value = label
    return Label(str(key), str(value))


@dataclass(frozen=True, order=True)
class Key:
    """A metric name together with its labels."""

    name: str
    labels: Tuple[Label, ...] = ()
    _hash: int = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        labels = tuple(_to_label(label) for label in self.labels)
        object.__setattr__(self, "labels", labels)
        parts = [self.name]
        for label in labels:
            parts.extend((label.key, label.value))
        object.__setattr__(self, "_hash", _stable_hash(*parts))

    @classmethod
    def from_name(cls, name: str) -> "Key":
        """Creates a key with no labels."""
        return cls(str(name))

    @classmethod
    def from_parts(cls, name: str, labels: Iterable[LabelLike]) -> "Key":
        """Creates a key from a name and labels (``Label`` or ``(key, value)`` pairs)."""
        return cls(str(name), tuple(labels))

    def hashable(self) -> int:
        """The pre-computed 64-bit hash of this key."""
        return self._hash

    def __hash__(self) -> int:
        return self._hash


@dataclass(frozen=True, order=True)
class DefaultHashable:
    """Wraps any hashable value so that it can produce a stable 64-bit hash."""

    value: Any

    def hashable(self) -> int:
        """The 64-bit hash of the wrapped value."""
        return _stable_hash(type(self.value).__qualname__, repr(self.value))


def hashable(value: Any) -> int:
    """Returns the 64-bit hash of ``value``, using its own ``hashable`` if it has one."""
    method = getattr(value, "hashable", None)
    if callable(method):
        return method()
    return DefaultHashable(value).hashable()


@dataclass(frozen=True, order=True)
class CompositeKey:
    """A metric key paired with its metric kind."""

    kind: MetricKind
    key: Key

    def into_parts(self) -> Tuple[MetricKind, Key]:
        """Returns the kind and key as a tuple."""
        return self.kind, self.key