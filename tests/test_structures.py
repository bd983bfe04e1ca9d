"""
Tests for the data structures exchanged with the search
"""

import pytest

from profitability_anonymize.exceptions import ConfigurationError
from profitability_anonymize.structures import DataSubset, EquivalenceClass, Transformation


def test_equivalence_class_defaults():
    entry = EquivalenceClass((1, 2), 3)
    assert entry.pcount == 0
    assert not entry.is_outlier
    assert entry.distributions == ()


def test_transformation():
    transformation = Transformation((1, 0, 2))
    assert transformation.generalization == (1, 0, 2)


class TestDataSubset:
    def test_properties(self):
        subset = DataSubset([4, 1, 1, 3], 10)
        assert len(subset) == 3
        assert list(subset) == [1, 3, 4]
        assert 3 in subset
        assert 2 not in subset
        assert subset.dataset_size == 10
        assert subset.indices == frozenset({1, 3, 4})

    def test_equality(self):
        assert DataSubset([1, 2], 5) == DataSubset([2, 1], 5)
        assert DataSubset([1, 2], 5) != DataSubset([1, 2], 6)
        assert hash(DataSubset([1, 2], 5)) == hash(DataSubset([2, 1], 5))

    def test_immutable(self):
        subset = DataSubset([1], 2)
        with pytest.raises(AttributeError):
            subset.extra = 1

    @pytest.mark.parametrize("indices,dataset_size", [([5], 5), ([-1], 5), ([], -1)])
    def test_invalid(self, indices, dataset_size):
        with pytest.raises(ConfigurationError):
            DataSubset(indices, dataset_size)
