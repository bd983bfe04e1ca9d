"""
Rectangular generalization hierarchies with integer-encoded values.

The external search identifies equivalence classes by generalized keys: one
integer id per quasi-identifier dimension. A :class:`Hierarchy` fixes the
encoding for one dimension. It holds a dictionary of every label that can
occur at any generalization level, and an array with one row per leaf value
and one column per level, so that ``array[row, level]`` is the id of the
leaf's generalization at that level.

Leaf values receive the ids ``0 .. num_leaves - 1`` in row order; coarser
labels follow in order of first appearance, level by level.
"""

from typing import Any, Sequence

import numpy as np

from profitability_anonymize.gtrees import GTree


class Hierarchy:
    """
    Integer-encoded generalization hierarchy of a single dimension.

    Instances are immutable after construction and safe to share between threads.

    Parameters
    ----------
    rows : Sequence[Sequence[Any]]
        One row per leaf value, listing the leaf followed by each of its
        generalizations up to the root. All rows must have the same length.

    Raises
    ------
    ValueError
        If there are no rows, rows have different lengths, or a leaf value
        appears twice.

    Examples
    --------
    >>> hierarchy = Hierarchy([("31", "30-39", "*"), ("34", "30-39", "*"), ("45", "40-49", "*")])
    >>> hierarchy.num_levels
    3
    >>> hierarchy.label(hierarchy.generalize("34", 1))
    '30-39'
    """

    def __init__(self, rows: Sequence[Sequence[Any]]) -> None:
        if len(rows) == 0:
            raise ValueError("rows param must not be empty")
        num_levels = len(rows[0])
        if num_levels == 0 or any(len(row) != num_levels for row in rows):
            raise ValueError("All hierarchy rows must have the same, non-zero length")
        leaves = [row[0] for row in rows]
        if len(set(leaves)) != len(leaves):
            raise ValueError("Leaf values of a hierarchy must be unique")

        labels: list[Any] = []
        label_to_id: dict[Any, int] = {}
        for level in range(num_levels):
            for row in rows:
                if row[level] not in label_to_id:
                    label_to_id[row[level]] = len(labels)
                    labels.append(row[level])

        array = np.empty((len(rows), num_levels), dtype=np.int64)
        for row_index, row in enumerate(rows):
            for level, value in enumerate(row):
                array[row_index, level] = label_to_id[value]
        array.setflags(write=False)

        # Leaves covered by every id, merged over all levels it occurs at
        covered: list[set[Any]] = [set() for _ in labels]
        for row_index, leaf in enumerate(leaves):
            for level in range(num_levels):
                covered[array[row_index, level]].add(leaf)

        self._labels = tuple(labels)
        self._label_to_id = label_to_id
        self._array = array
        self._leaf_to_row = {leaf: row_index for row_index, leaf in enumerate(leaves)}
        self._covered_leaves = tuple(frozenset(values) for values in covered)

    @classmethod
    def from_gtree(cls, gtree: GTree) -> "Hierarchy":
        """
        Create a hierarchy from a generalization tree whose leaves share one depth.

        Parameters
        ----------
        gtree : GTree
            The generalization tree

        Returns
        -------
        Hierarchy
            The hierarchy with one row per leaf, in the tree's insertion order

        Raises
        ------
        ValueError
            If the tree's leaves do not all sit at the same depth.
        """
        gtree.height()
        return cls([gtree.leaf_path(value) for value in gtree.leaf_values()])

    @property
    def num_levels(self) -> int:
        return int(self._array.shape[1])

    @property
    def num_leaves(self) -> int:
        return int(self._array.shape[0])

    @property
    def labels(self) -> tuple[Any, ...]:
        """Labels indexed by their id."""
        return self._labels

    @property
    def array(self) -> np.ndarray:
        """Read-only id array of shape (num_leaves, num_levels)."""
        return self._array

    def label(self, value_id: int) -> Any:
        return self._labels[value_id]

    def id_of(self, label: Any) -> int:
        """
        Return the id of a label.

        Raises
        ------
        KeyError
            If the label does not occur in the hierarchy.
        """
        return self._label_to_id[label]

    def generalize(self, leaf: Any, level: int) -> int:
        """
        Return the id of a leaf value's generalization at a level.

        Raises
        ------
        KeyError
            If the value is not a leaf of the hierarchy.
        IndexError
            If the level does not exist.
        """
        if level < 0 or level >= self.num_levels:
            raise IndexError(f"Level {level} is out of range [0, {self.num_levels})")
        return int(self._array[self._leaf_to_row[leaf], level])

    def leaf_labels(self, value_id: int) -> frozenset[Any]:
        """
        Return the leaf values generalized by an id, at any level.

        This is the reverse mapping of the hierarchy: the concrete attribute
        values an equivalence class with this generalized value may contain.
        """
        return self._covered_leaves[value_id]

    def count_leaves(self, value_id: int, level: int) -> int:
        """Return the number of leaves whose generalization at ``level`` is ``value_id``."""
        return int(np.count_nonzero(self._array[:, level] == value_id))

    def __repr__(self) -> str:
        return f"Hierarchy(num_leaves={self.num_leaves}, num_levels={self.num_levels})"


def generalize_record(
    hierarchies: Sequence[Hierarchy], record: Sequence[Any], generalization: Sequence[int]
) -> tuple[int, ...]:
    """
    Compute the generalized key of a record under a transformation.

    Parameters
    ----------
    hierarchies : Sequence[Hierarchy]
        One hierarchy per quasi-identifier dimension
    record : Sequence[Any]
        The record's leaf values, in dimension order
    generalization : Sequence[int]
        Generalization level per dimension

    Returns
    -------
    Tuple[int, ...]
        One domain-value id per dimension
    """
    if not (len(hierarchies) == len(record) == len(generalization)):
        raise ValueError(
            f"Expected one value and one level per hierarchy ({len(hierarchies)}), "
            f"got {len(record)} values and {len(generalization)} levels"
        )
    return tuple(
        hierarchy.generalize(value, level)
        for hierarchy, value, level in zip(hierarchies, record, generalization)
    )
