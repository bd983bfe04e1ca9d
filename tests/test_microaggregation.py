"""
Tests for microaggregation functions
"""

import numpy as np
import pandas as pd
import pytest

from profitability_anonymize.microaggregation import (
    CategoricalMicroaggregationFunction,
    MicroaggregationFunctionType,
    NumericalMicroaggregationFunction,
    get_microaggregation_domain_sizes,
    make_microaggregation_function,
)


class TestNumericalMicroaggregationFunction:
    def setup_method(self):
        self.function = make_microaggregation_function(
            MicroaggregationFunctionType.MEDIAN, [1, 2, 2, 3, 5, 8, np.nan]
        )

    def test_domain_size_ignores_duplicates_and_nan(self):
        actual = self.function.domain_size
        expected = 5
        assert actual == expected, f"{actual} != {expected}"

    def test_share_of_range(self):
        actual = self.function.information_loss(np.array([2.0, 5.0, 3.0]))
        expected = 3 / 5
        assert actual == expected, f"{actual} != {expected}"

    def test_single_value(self):
        actual = self.function.information_loss([8])
        expected = 1 / 5
        assert actual == expected, f"{actual} != {expected}"

    def test_value_outside_domain(self):
        actual = self.function.information_loss([100.0])
        expected = 1 / 5
        assert actual == expected, f"{actual} != {expected}"

    def test_all_missing(self):
        actual = self.function.information_loss([np.nan, np.nan])
        assert actual == 1.0

    def test_full_range(self):
        actual = self.function.information_loss(pd.Series([1, 8, np.nan]))
        assert actual == 1.0

    def test_wrong_type(self):
        with pytest.raises(ValueError):
            NumericalMicroaggregationFunction(MicroaggregationFunctionType.MODE, [1, 2])

    def test_empty_domain(self):
        with pytest.raises(ValueError):
            make_microaggregation_function(MicroaggregationFunctionType.INTERVAL, [np.nan])


class TestCategoricalMicroaggregationFunction:
    def setup_method(self):
        self.function = make_microaggregation_function(
            MicroaggregationFunctionType.SET, ["a", "b", "c", "d", "a", None]
        )

    def test_domain_size(self):
        assert self.function.domain_size == 4

    def test_share_of_distinct_values(self):
        actual = self.function.information_loss(["a", "a", "b", None])
        expected = 2 / 4
        assert actual == expected, f"{actual} != {expected}"

    def test_empty(self):
        assert self.function.information_loss([]) == 1.0

    def test_wrong_type(self):
        with pytest.raises(ValueError):
            CategoricalMicroaggregationFunction(MicroaggregationFunctionType.ARITHMETIC_MEAN, ["a"])


def test_make_microaggregation_function_dispatch():
    for function_type in MicroaggregationFunctionType:
        function = make_microaggregation_function(function_type, [1, 2, 3])
        if function_type in (MicroaggregationFunctionType.MODE, MicroaggregationFunctionType.SET):
            assert isinstance(function, CategoricalMicroaggregationFunction)
        else:
            assert isinstance(function, NumericalMicroaggregationFunction)
        assert function.function_type is function_type


def test_get_microaggregation_domain_sizes():
    functions = [
        make_microaggregation_function(MicroaggregationFunctionType.ARITHMETIC_MEAN, range(10)),
        make_microaggregation_function(MicroaggregationFunctionType.MODE, ["x", "y"]),
    ]
    actual = get_microaggregation_domain_sizes(functions)
    expected = (10, 2)
    assert actual == expected, f"{actual} != {expected}"
