"""
Classes and functions to represent and use generalization trees.

A generalization tree describes how specific values of a quasi-identifier are
generalized into broader categories: leaves are the original values and every
ancestor is a coarser category, up to a root that represents the whole domain.
The privacy models in this package do not build hierarchies themselves; they
consume trees built elsewhere, typically from ARX-style hierarchy rows
(``leaf;level-1;...;root``) via :func:`make_gtree_from_rows`.
"""

from typing import Any, Optional, Sequence

from treelib import (
    Node,  # type: ignore[reportPrivateImportUsage]  # Node is publicly exported from treelib
    Tree,  # type: ignore[reportPrivateImportUsage]  # Tree is publicly exported from treelib
)


class GTree(Tree):
    """
    Generalization tree for hierarchical data representation.

    This class extends the treelib.Tree class with a cached lookup of leaf
    nodes by value, used to read the path of every leaf value up to the root.

    Attributes
    ----------
    value_to_leaf_node_nid : dict
        Maps leaf values to leaf node IDs
    """

    def __init__(
        self,
        tree: Optional["GTree"] = None,
        identifier: Optional[str] = None,
        deep: bool = True,
    ) -> None:
        """
        Initialize a generalization tree.

        Parameters
        ----------
        tree : GTree, optional
            An existing GTree to copy, by default None
        identifier : str, optional
            A string identifier for the tree, by default None
        deep : bool, optional
            Whether to perform a deep copy when copying from an existing tree, by default True
        """
        super().__init__(tree=tree, deep=deep, identifier=identifier)
        self.value_to_leaf_node_nid: dict[Any, str] = {}
        if tree is not None:
            self.value_to_leaf_node_nid = dict(tree.value_to_leaf_node_nid)

    def create_node(  # type: ignore[override]
        self,
        value: Any,
        parent: Optional[Node] = None,
        identifier: Optional[str] = None,
    ) -> Node:  # pylint: disable=arguments-differ,arguments-renamed
        """
        Create a new node in the generalization tree.

        Parameters
        ----------
        value : Any
            Value of the node. Must be hashable since it is used as a dictionary key.
        parent : Node, optional
            Parent node to which this node will be attached, by default None
        identifier : str, optional
            Unique identifier for the node, by default None

        Returns
        -------
        Node
            The newly created Node object
        """
        self.value_to_leaf_node_nid = {}
        return super().create_node(tag=value, identifier=identifier, parent=parent)

    def remove_node(self, identifier: str) -> int:  # type: ignore[override]
        self.value_to_leaf_node_nid = {}
        return super().remove_node(identifier)

    def get_value(self, node: Node) -> Any:
        """Return the value stored in a node (its tag)."""
        return node.tag

    def leaf_values(self) -> list[Any]:
        """
        Return the leaf values in depth-first insertion order.

        Returns
        -------
        List[Any]
            Leaf values, ordered as they were inserted below their parents.
        """
        if self.root is None:
            return []
        result = []
        for nid in self.expand_tree(mode=Tree.DEPTH, sorting=False):
            node = self.get_node(nid)
            assert node is not None
            if not self.children(nid):
                result.append(self.get_value(node))
        return result

    def update_value_to_leaf_node_nid_if(self) -> bool:
        """
        Build the mapping of leaf values to leaf node IDs if it is missing.

        Returns
        -------
        bool
            True if the mapping was updated, False if it was already populated

        Raises
        ------
        ValueError
            If the same value is used by two leaves.
        """
        if not self.value_to_leaf_node_nid:
            for leaf in self.leaves():
                value = self.get_value(leaf)
                if value in self.value_to_leaf_node_nid:
                    raise ValueError(f"Leaf value {value!r} appears more than once")
                self.value_to_leaf_node_nid[value] = leaf.identifier
            return True
        return False

    def leaf_path(self, value: Any) -> tuple[Any, ...]:
        """
        Return the values on the path from a leaf up to the root.

        Parameters
        ----------
        value : Any
            The leaf value

        Returns
        -------
        Tuple[Any, ...]
            The leaf value followed by the value of each ancestor, ending with the root.

        Raises
        ------
        KeyError
            If the value is not a leaf of this tree.
        """
        self.update_value_to_leaf_node_nid_if()
        nid = self.value_to_leaf_node_nid[value]
        path = []
        for ancestor_nid in self.rsearch(nid):
            node = self.get_node(ancestor_nid)
            assert node is not None
            path.append(self.get_value(node))
        return tuple(path)

    def height(self) -> int:
        """
        Return the number of generalization levels above the leaves.

        Raises
        ------
        ValueError
            If the leaves do not all sit at the same depth.
        """
        depths = {self.depth(leaf) for leaf in self.leaves()}
        if len(depths) != 1:
            raise ValueError(f"Leaves of the generalization tree have different depths {depths}")
        return depths.pop()


class ReadOnlyGTree(GTree):
    """
    A read-only version of the generalization tree.

    The leaf lookup is computed eagerly during initialization, after which
    the tree is locked. A locked tree never mutates, which makes it safe to
    share between threads.

    Attributes
    ----------
    locked : bool
        Flag indicating whether the tree is in read-only mode
    """

    def __init__(self, tree: Optional["GTree"] = None) -> None:
        self.locked = False
        super().__init__(tree=tree)
        self.update_value_to_leaf_node_nid_if()
        self.locked = True

    def create_node(  # type: ignore[override]
        self,
        value: Any,
        parent: Optional[Node] = None,
        identifier: Optional[str] = None,
    ) -> Node:  # pylint: disable=arguments-differ
        assert not self.locked, "GTree is read-only"
        return super().create_node(value, parent=parent, identifier=identifier)

    def remove_node(self, identifier: str) -> int:  # type: ignore[override]
        assert not self.locked, "GTree is read-only"
        return super().remove_node(identifier)

    def update_value_to_leaf_node_nid_if(self) -> bool:
        updated = super().update_value_to_leaf_node_nid_if()
        assert not updated or not self.locked, "GTree is read-only"
        return updated


def make_gtree_from_rows(rows: Sequence[Sequence[Any]]) -> GTree:
    """
    Create a generalization tree from ARX-style hierarchy rows.

    Every row lists a leaf value followed by its generalizations, the last
    entry being the root, e.g. ``("34", "30-39", "*")``.

    Parameters
    ----------
    rows : Sequence[Sequence[Any]]
        One row per leaf value. All rows must have the same length and end with
        the same root value.

    Returns
    -------
    GTree
        The generalization tree described by the rows

    Raises
    ------
    ValueError
        If there are no rows, the rows have different lengths or different roots.
    """
    if not rows:
        raise ValueError("rows param must not be empty")
    height = len(rows[0])
    if height == 0 or any(len(row) != height for row in rows):
        raise ValueError("All hierarchy rows must have the same, non-zero length")
    roots = {row[-1] for row in rows}
    if len(roots) != 1:
        raise ValueError(f"Hierarchy rows have different roots {roots}")

    gtree = GTree()
    root = gtree.create_node(rows[0][-1])
    # (parent nid, value) -> nid, so equal labels under different parents stay distinct
    children: dict[tuple[str, Any], str] = {}
    for row in rows:
        parent = root
        for value in reversed(row[:-1]):
            nid = children.get((parent.identifier, value))
            if nid is None:
                node = gtree.create_node(value, parent=parent)
                children[(parent.identifier, value)] = node.identifier
            else:
                node = gtree.get_node(nid)
                assert node is not None
            parent = node
    return gtree
