"""
Read-only data structures exchanged with the external search.

The search that enumerates transformations and the grouping that partitions
records into equivalence classes live outside of this package. They hand
their results to the privacy models as the lightweight structures defined
here, which this package never mutates.
"""

from collections import namedtuple
from typing import Iterable, Iterator

from profitability_anonymize.exceptions import ConfigurationError

Transformation = namedtuple("Transformation", ["generalization"])
Transformation.__doc__ = """
A candidate transformation: one generalization level per hierarchy dimension.

Attributes
----------
generalization : tuple of int
    Generalization level applied to each quasi-identifier dimension, 0 being
    the original (most specific) value.
"""

EquivalenceClass = namedtuple(
    "EquivalenceClass",
    ["key", "count", "pcount", "is_outlier", "distributions"],
    defaults=(0, False, ()),
)
EquivalenceClass.__doc__ = """
Statistics of a single equivalence class under a transformation.

Attributes
----------
key : tuple of int
    Generalized key, one domain-value id per hierarchy dimension.
count : int
    Number of records of the released sample in this class. Zero for classes
    that only contain records of the population.
pcount : int
    Number of records of the class within the population subset, 0 if unknown.
is_outlier : bool
    Whether the class is suppressed under the current transformation.
distributions : tuple of array-like
    Values of the class's records for each tracked attribute, used by
    microaggregation functions.
"""


class DataSubset:
    """
    Research subset of a dataset, as handed to the journalist model.

    The subset is described by the row indices of the records it contains and
    by the number of records in the dataset it was drawn from. Instances are
    immutable and hashable so that they can be shared between workers.

    Parameters
    ----------
    indices : Iterable[int]
        Row indices of the records in the subset.
    dataset_size : int
        Number of records of the full dataset.

    Raises
    ------
    ConfigurationError
        If an index lies outside of the dataset.
    """

    __slots__ = ("_indices", "_dataset_size")

    def __init__(self, indices: Iterable[int], dataset_size: int) -> None:
        indices = frozenset(int(index) for index in indices)
        if dataset_size < 0:
            raise ConfigurationError(f"dataset_size {dataset_size} must be >= 0")
        for index in indices:
            if index < 0 or index >= dataset_size:
                raise ConfigurationError(
                    f"Subset index {index} is outside of the dataset (size {dataset_size})"
                )
        self._indices = indices
        self._dataset_size = dataset_size

    @property
    def indices(self) -> frozenset[int]:
        return self._indices

    @property
    def dataset_size(self) -> int:
        return self._dataset_size

    def __len__(self) -> int:
        return len(self._indices)

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self._indices))

    def __contains__(self, index: object) -> bool:
        return index in self._indices

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DataSubset):
            return NotImplemented
        return self._indices == other._indices and self._dataset_size == other._dataset_size

    def __hash__(self) -> int:
        return hash((self._indices, self._dataset_size))

    def __repr__(self) -> str:
        return f"DataSubset(size={len(self)}, dataset_size={self._dataset_size})"
