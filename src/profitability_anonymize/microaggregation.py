"""
Microaggregation functions and their information loss estimates.

Microaggregated attributes are not generalized through a hierarchy. Instead,
the values of each equivalence class are replaced by an aggregate (mean,
median, mode, ...). Substituting the values happens outside of this package;
what the privacy models need is each function's own estimate of how much of
the attribute's domain a class's values span, expressed as a domain share in
[1/domain_size, 1] so that it combines with hierarchy-based shares:

- Numerical functions (arithmetic mean, geometric mean, median, interval): the
  share of domain values lying within the class's [min, max] range.
- Categorical functions (mode, set): the share of domain values that occur in
  the class.

A class whose values are all missing gets a share of 1.0 (maximal loss).
"""

from abc import ABCMeta, abstractmethod
from enum import Enum
from typing import Any, Iterable, Sequence

import numpy as np
import pandas as pd

from profitability_anonymize.utils import count_within, min_max

MicroaggregationFunctionType = Enum(
    "MicroaggregationFunctionType",
    ["ARITHMETIC_MEAN", "GEOMETRIC_MEAN", "MEDIAN", "INTERVAL", "MODE", "SET"],
)

NUMERICAL_FUNCTION_TYPES = frozenset(
    {
        MicroaggregationFunctionType.ARITHMETIC_MEAN,
        MicroaggregationFunctionType.GEOMETRIC_MEAN,
        MicroaggregationFunctionType.MEDIAN,
        MicroaggregationFunctionType.INTERVAL,
    }
)


class MicroaggregationFunction(metaclass=ABCMeta):
    """
    Abstract base class for microaggregation functions.

    Parameters
    ----------
    function_type : MicroaggregationFunctionType
        The aggregate this function computes
    domain_values : Iterable[Any]
        Values of the attribute's domain; duplicates and missing values are ignored.

    Raises
    ------
    ValueError
        If the domain is empty.
    """

    def __init__(self, function_type: MicroaggregationFunctionType, domain_values: Iterable[Any]):
        self.function_type = function_type

    @property
    @abstractmethod
    def domain_size(self) -> int:
        """Number of distinct values in the attribute's domain."""

    @abstractmethod
    def information_loss(self, values: Any) -> float:
        """
        Estimate the domain share spanned by the values of one equivalence class.

        Parameters
        ----------
        values : array-like
            The attribute's values for the records of the class.

        Returns
        -------
        float
            A share in [1/domain_size, 1].
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.function_type.name}, domain_size={self.domain_size})"


class NumericalMicroaggregationFunction(MicroaggregationFunction):
    """
    Microaggregation of a numerical attribute by mean, geometric mean, median or interval.
    """

    def __init__(self, function_type: MicroaggregationFunctionType, domain_values: Iterable[Any]):
        if function_type not in NUMERICAL_FUNCTION_TYPES:
            raise ValueError(f"{function_type} is not a numerical microaggregation function")
        super().__init__(function_type, domain_values)
        domain = np.asarray(list(domain_values), dtype=np.float64)
        domain = np.unique(domain[~np.isnan(domain)])
        if len(domain) == 0:
            raise ValueError("Domain of a microaggregated attribute must not be empty")
        domain.setflags(write=False)
        self._domain = domain

    @property
    def domain_size(self) -> int:
        return len(self._domain)

    def information_loss(self, values: Any) -> float:
        minimum, maximum = min_max(np.asarray(values, dtype=np.float64))
        if np.isnan(minimum):
            return 1.0
        covered = count_within(self._domain, minimum, maximum)
        return max(covered, 1) / self.domain_size


class CategoricalMicroaggregationFunction(MicroaggregationFunction):
    """
    Microaggregation of a categorical attribute by mode or by the set of values.
    """

    def __init__(self, function_type: MicroaggregationFunctionType, domain_values: Iterable[Any]):
        if function_type in NUMERICAL_FUNCTION_TYPES:
            raise ValueError(f"{function_type} is not a categorical microaggregation function")
        super().__init__(function_type, domain_values)
        domain = pd.Series(list(domain_values), dtype="object").dropna().unique()
        if len(domain) == 0:
            raise ValueError("Domain of a microaggregated attribute must not be empty")
        self._domain_size = len(domain)

    @property
    def domain_size(self) -> int:
        return self._domain_size

    def information_loss(self, values: Any) -> float:
        distinct = pd.Series(values, dtype="object").dropna().nunique()
        if distinct == 0:
            return 1.0
        return min(distinct, self._domain_size) / self._domain_size


def make_microaggregation_function(
    function_type: MicroaggregationFunctionType, domain_values: Iterable[Any]
) -> MicroaggregationFunction:
    """
    Create the microaggregation function of the given type over a domain.

    Parameters
    ----------
    function_type : MicroaggregationFunctionType
        The aggregate to compute
    domain_values : Iterable[Any]
        Values of the attribute's domain, e.g. the attribute's column in the input data

    Returns
    -------
    MicroaggregationFunction
        A numerical function for mean, geometric mean, median and interval;
        a categorical function for mode and set.
    """
    if function_type in NUMERICAL_FUNCTION_TYPES:
        return NumericalMicroaggregationFunction(function_type, domain_values)
    return CategoricalMicroaggregationFunction(function_type, domain_values)


def get_microaggregation_domain_sizes(
    functions: Sequence[MicroaggregationFunction],
) -> tuple[int, ...]:
    """Return the domain size of each microaggregated attribute."""
    return tuple(function.domain_size for function in functions)
