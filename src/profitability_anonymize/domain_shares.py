"""
Domain shares of generalized values.

The domain share of a generalized value is the fraction of its attribute's
domain that the value represents: a leaf of a hierarchy with ``n`` leaves has
a share of ``1/n`` and the root has a share of 1. Shares grow monotonically
with the generalization level, which is what makes the entropy-based
information loss monotonic.
"""

from abc import ABCMeta, abstractmethod

from profitability_anonymize.hierarchies import Hierarchy


class DomainShare(metaclass=ABCMeta):
    """
    Abstract base class for the domain shares of one quasi-identifier dimension.

    Implementations must be immutable after construction.
    """

    @property
    @abstractmethod
    def domain_size(self) -> int:
        """Number of distinct values in the attribute's domain."""

    @abstractmethod
    def share(self, value_id: int, level: int) -> float:
        """
        Return the share of the domain represented by a value at a generalization level.

        Parameters
        ----------
        value_id : int
            Domain-value id of the generalized value
        level : int
            Generalization level the value was produced at

        Returns
        -------
        float
            A share in (0, 1].
        """


class DomainShareMaterialized(DomainShare):
    """
    Domain shares materialized from a generalization hierarchy.

    Every value's share is the number of leaves it generalizes at a given
    level divided by the number of leaves of the hierarchy. The same label may
    occur at several levels with different coverage, hence shares are stored
    per (value, level).

    Parameters
    ----------
    hierarchy : Hierarchy
        The hierarchy of the dimension
    """

    def __init__(self, hierarchy: Hierarchy) -> None:
        num_leaves = hierarchy.num_leaves
        shares: dict[tuple[int, int], float] = {}
        for level in range(hierarchy.num_levels):
            for value_id in set(hierarchy.array[:, level].tolist()):
                shares[(value_id, level)] = hierarchy.count_leaves(value_id, level) / num_leaves
        self._domain_size = num_leaves
        self._shares = shares

    @property
    def domain_size(self) -> int:
        return self._domain_size

    def share(self, value_id: int, level: int) -> float:
        """
        Return the share of a value at a level.

        Raises
        ------
        KeyError
            If the value does not occur at that level of the hierarchy.
        """
        return self._shares[(value_id, level)]

    def __repr__(self) -> str:
        return f"DomainShareMaterialized(domain_size={self._domain_size})"
