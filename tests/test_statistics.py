import math

import pytest

from echem_analytics.analysis import calculate_statistics
from echem_analytics.exceptions import InvalidInputError


def test_basic_statistics():
    stats = calculate_statistics([5, 1, 4, 2, 3])

    assert stats.mean == pytest.approx(3.0)
    assert stats.median == pytest.approx(3.0)
    assert stats.variance == pytest.approx(2.0)
    assert stats.std_dev == pytest.approx(math.sqrt(2.0))
    assert stats.min == 1.0
    assert stats.max == 5.0
    assert stats.q1 == pytest.approx(2.0)
    assert stats.q3 == pytest.approx(4.0)
    assert stats.count == 5


def test_quartiles_interpolate():
    stats = calculate_statistics([1, 2, 3, 4])
    assert stats.median == pytest.approx(2.5)
    assert stats.q1 == pytest.approx(1.75)
    assert stats.q3 == pytest.approx(3.25)


def test_single_value():
    stats = calculate_statistics([7.5])
    assert stats.std_dev == 0.0
    assert stats.q1 == stats.q3 == stats.median == 7.5


def test_to_dict():
    d = calculate_statistics([1, 2, 3]).to_dict()
    assert set(d) == {"mean", "median", "std_dev", "variance", "min", "max", "q1", "q3", "count"}
    assert d["count"] == 3


def test_empty_input_rejected():
    with pytest.raises(InvalidInputError):
        calculate_statistics([])
