"""
Census-corrected success probabilities for the journalist model.

An equivalence class with a generalized key stands for every combination of
concrete values that its generalized values cover. The census-corrected
success probability of an attack on the class is one over the number of
individuals in the population that share one of these combinations, as
recorded in a :class:`PopulationFrequencyTable`.

The reverse lookup from generalized ids to covered leaf values is computed
eagerly when the map is built, so that the map is immutable and can be used
by many search workers at the same time.
"""

import itertools as it
import logging
from typing import Any, Optional, Sequence

from profitability_anonymize.exceptions import ConfigurationError, InvariantViolation
from profitability_anonymize.hierarchies import Hierarchy
from profitability_anonymize.population import PopulationFrequencyTable
from profitability_anonymize.structures import EquivalenceClass
from profitability_anonymize.utils import debug_logging_enabled

_LOGGER = logging.getLogger(__name__)


class CensusMap:
    """
    Reverse lookup from generalized keys to population sizes.

    Parameters
    ----------
    hierarchies : Sequence[Hierarchy]
        One hierarchy per quasi-identifier dimension, in record field order.
    population : PopulationFrequencyTable
        Population table whose field order matches the hierarchies' order.
    logger : logging.Logger, optional
        Logger for debug output, by default this module's logger.

    Raises
    ------
    ConfigurationError
        If the number of hierarchies does not match the table's dimensions.
    """

    def __init__(
        self,
        hierarchies: Sequence[Hierarchy],
        population: PopulationFrequencyTable,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        if len(hierarchies) != population.num_dimensions:
            raise ConfigurationError(
                f"Got {len(hierarchies)} hierarchies for a population table with "
                f"{population.num_dimensions} dimensions"
            )
        self.logger = logger if logger is not None else _LOGGER
        self.population = population
        # [dimension][value id] -> leaf labels, sorted for a deterministic summation order
        self._leaf_labels: tuple[tuple[tuple[Any, ...], ...], ...] = tuple(
            tuple(
                tuple(sorted(hierarchy.leaf_labels(value_id), key=str))
                for value_id in range(len(hierarchy.labels))
            )
            for hierarchy in hierarchies
        )

    @property
    def num_dimensions(self) -> int:
        return len(self._leaf_labels)

    def leaf_labels(self, dimension: int, value_id: int) -> tuple[Any, ...]:
        """Return the leaf values covered by a generalized value of a dimension."""
        return self._leaf_labels[dimension][value_id]

    def population_size(self, key: Sequence[int]) -> float:
        """
        Sum the population sizes of every value combination a generalized key covers.

        Parameters
        ----------
        key : Sequence[int]
            Generalized key, one id per dimension.

        Returns
        -------
        float
            The total population size; combinations missing from the table count as 0.
        """
        if len(key) != len(self._leaf_labels):
            raise ValueError(f"Expected a key with {len(self._leaf_labels)} ids, got {len(key)}")
        total = 0.0
        for labels in it.product(
            *(self._leaf_labels[dimension][value_id] for dimension, value_id in enumerate(key))
        ):
            total += self.population.lookup_group_size(labels)
        return total

    def success_probability(self, entry: EquivalenceClass, sample_probability: float) -> float:
        """
        Return the census-corrected success probability of an attack on a class.

        Parameters
        ----------
        entry : EquivalenceClass
            The equivalence class.
        sample_probability : float
            The success probability derived from the subset or sample counts.

        Returns
        -------
        float
            ``min(1, 1 / population size)``.

        Raises
        ------
        InvariantViolation
            If the class does not exist in the population, or if the census
            risk exceeds the subset/sample risk. Both indicate corrupted
            reference data or hierarchies that do not match the table.
        """
        size = self.population_size(entry.key)
        if size == 0.0:
            raise InvariantViolation(
                f"Equivalence class {tuple(entry.key)} does not exist in the population"
            )
        risk = min(1.0, 1.0 / size)
        if risk > sample_probability:
            raise InvariantViolation(
                f"Population risk ({risk}) is greater than record risk ({sample_probability}) "
                f"for equivalence class {tuple(entry.key)}"
            )
        if debug_logging_enabled(self.logger):
            self.logger.debug(
                "census risk %s, record risk %s for %s", risk, sample_probability, tuple(entry.key)
            )
        return risk

    def __repr__(self) -> str:
        return f"CensusMap(num_dimensions={self.num_dimensions}, population={self.population!r})"
