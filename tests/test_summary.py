import math
import random

import pytest
from hypothesis import given
from hypothesis import strategies as st

from metricutil.summary import DDSketch, Summary


def _true_quantile(sorted_values, q):
    position = q * (len(sorted_values) - 1)
    low = math.floor(position)
    high = math.ceil(position)
    fraction = position - low
    return sorted_values[low] + (sorted_values[high] - sorted_values[low]) * fraction


def test_basics():
    summary = Summary.with_defaults()
    assert summary.is_empty()

    summary.add(-420.42)
    assert summary.count() == 1
    assert summary.min() == pytest.approx(-420.42)
    assert summary.max() == pytest.approx(-420.42)
    assert summary.quantile(0.1) == -420.42
    assert summary.quantile(0.5) == -420.42
    assert summary.quantile(0.99) == -420.42

    summary.add(420.42)
    assert summary.count() == 2
    assert summary.min() == pytest.approx(-420.42)
    assert summary.max() == pytest.approx(420.42)
    assert summary.quantile(0.49) == -420.42

    summary.add(42.42)
    assert summary.count() == 3
    assert summary.min() == pytest.approx(-420.42)
    assert summary.max() == pytest.approx(420.42)
    assert summary.quantile(0.4999999999) == -420.42
    assert summary.quantile(0.5) == 42.42
    assert summary.quantile(0.9999999999) == 42.42


def test_positive_uniform():
    alpha = 0.0001
    rng = random.Random(1234)
    summary = Summary(alpha, 32_768, 1.0e-9)
    values = []
    for _ in range(100_000):
        value = rng.uniform(0.0, 100.0)
        values.append(value)
        summary.add(value)
    values.sort()

    for q in (0.25, 0.5, 0.75, 0.99):
        expected = _true_quantile(values, q)
        distance = (expected * alpha) * 2.0
        assert summary.quantile(q) == pytest.approx(expected, rel=distance)


def test_negative_positive_uniform():
    alpha = 0.0001
    rng = random.Random(4321)
    summary = Summary(alpha, 65_536, 1.0e-9)
    values = []
    for _ in range(100_000):
        value = rng.uniform(-100.0, 100.0)
        values.append(value)
        summary.add(value)
    values.sort()

    for q in (0.25, 0.47, 0.75, 0.99):
        expected = _true_quantile(values, q)
        distance = (abs(expected) * alpha) * 2.0
        assert summary.quantile(q) == pytest.approx(expected, rel=distance)


def test_zeroes():
    summary = Summary.with_defaults()
    summary.add(0.0)
    assert summary.quantile(0.5) == 0.0


def test_infinities():
    summary = Summary.with_defaults()
    summary.add(math.inf)
    assert summary.quantile(0.5) is None
    summary.add(-math.inf)
    assert summary.quantile(0.5) is None
    assert summary.is_empty()


@pytest.mark.parametrize("q", [-0.1, 1.1, math.nan])
def test_summary_out_of_range_quantile_is_none(q):
    summary = Summary.with_defaults()
    summary.add(1.0)
    assert summary.quantile(q) is None


def test_values_within_min_value_count_as_zero():
    summary = Summary(0.01, 1024, -0.5)
    for value in (0.1, -0.4, 0.5, 2.0, -3.0):
        summary.add(value)
    assert summary.detailed_count() == (3, 1, 1)
    assert summary.count() == 5


def test_min_and_max_of_empty_summary():
    summary = Summary.with_defaults()
    assert summary.min() == math.inf
    assert summary.max() == -math.inf


def test_estimated_size_grows_per_bin():
    empty = Summary.with_defaults()
    summary = Summary.with_defaults()
    summary.add(10.0)
    assert summary.estimated_size() - empty.estimated_size() == 8
    summary.add(10.0)
    assert summary.estimated_size() - empty.estimated_size() == 8


def test_ddsketch_empty_returns_none():
    sketch = DDSketch()
    assert sketch.quantile(0.5) is None
    assert sketch.count() == 0
    assert sketch.length() == 0


@pytest.mark.parametrize("q", [-0.01, 1.01])
def test_ddsketch_rejects_out_of_range_quantile(q):
    sketch = DDSketch()
    sketch.add(1.0)
    with pytest.raises(ValueError):
        sketch.quantile(q)


def test_ddsketch_single_value_is_exact():
    sketch = DDSketch()
    sketch.add(10.0)
    assert sketch.quantile(0.0) == 10.0
    assert sketch.quantile(0.5) == 10.0
    assert sketch.quantile(1.0) == 10.0


def test_ddsketch_relative_accuracy():
    sketch = DDSketch(alpha=0.01)
    for value in range(1, 1001):
        sketch.add(float(value))
    assert sketch.count() == 1000
    assert sketch.quantile(0.5) == pytest.approx(500.0, rel=0.01)
    assert sketch.quantile(0.9) == pytest.approx(900.0, rel=0.01)


def test_ddsketch_collapses_lowest_bins():
    sketch = DDSketch(alpha=0.01, max_num_bins=4)
    for value in (1e-3, 1.0, 1e3, 1e6, 1e9):
        sketch.add(value)
    assert sketch.length() <= 4
    assert sketch.count() == 5
    assert sketch.quantile(1.0) == 1e9


@pytest.mark.parametrize(
    "alpha, bins, min_value",
    [(0.0, 10, 1e-9), (1.0, 10, 1e-9), (0.01, 0, 1e-9), (0.01, 10, 0.0)],
)
def test_ddsketch_invalid_config(alpha, bins, min_value):
    with pytest.raises(ValueError):
        DDSketch(alpha, bins, min_value)