"""
Tests for gtrees
"""

import pickle

import pytest

from profitability_anonymize.gtrees import GTree, ReadOnlyGTree, make_gtree_from_rows
from tests.shared import AGE_ROWS, SEX_ROWS


class TestGTree:
    """
    Tests for generalization trees.
    """

    def test_gtree_pickle(self):
        """Tests that GTree is pickleable."""
        gtree = GTree()
        gtree.create_node("*")

        gtree = pickle.loads(pickle.dumps(gtree))

        actual = gtree.get_value(gtree.get_node(gtree.root))
        expected = "*"
        assert actual == expected, f"{actual} != {expected}"

    def test_gtree_get_value_read_only(self):
        """Tests get_value on a read-only gtree."""
        gtree = GTree()
        node = gtree.create_node("*")
        gtree.create_node("a", parent=node)

        read_only_gtree = ReadOnlyGTree(gtree)
        actual = read_only_gtree.get_value(node)
        expected = "*"
        assert actual == expected, f"{actual} != {expected}"

    def test_read_only_rejects_changes(self):
        read_only_gtree = ReadOnlyGTree(make_gtree_from_rows(SEX_ROWS))
        with pytest.raises(AssertionError):
            read_only_gtree.create_node("X", parent=read_only_gtree.get_node(read_only_gtree.root))

    def test_read_only_leaf_path(self):
        read_only_gtree = ReadOnlyGTree(make_gtree_from_rows(AGE_ROWS))
        actual = read_only_gtree.leaf_path("34")
        expected = ("34", "30-39", "*")
        assert actual == expected, f"{actual} != {expected}"

    def test_leaf_values_in_insertion_order(self):
        gtree = make_gtree_from_rows(AGE_ROWS)
        actual = gtree.leaf_values()
        expected = ["31", "34", "45", "47"]
        assert actual == expected, f"{actual} != {expected}"

    def test_leaf_values_empty(self):
        assert GTree().leaf_values() == []

    def test_leaf_path(self):
        gtree = make_gtree_from_rows(AGE_ROWS)
        actual = gtree.leaf_path("45")
        expected = ("45", "40-49", "*")
        assert actual == expected, f"{actual} != {expected}"
        with pytest.raises(KeyError):
            gtree.leaf_path("99")

    def test_duplicate_leaf_value(self):
        gtree = GTree()
        root = gtree.create_node("*")
        a = gtree.create_node("a", parent=root)
        b = gtree.create_node("b", parent=root)
        gtree.create_node("x", parent=a)
        gtree.create_node("x", parent=b)
        with pytest.raises(ValueError):
            gtree.update_value_to_leaf_node_nid_if()

    def test_caches_reset_on_create_node(self):
        gtree = make_gtree_from_rows([("a", "*")])
        assert gtree.leaf_path("a") == ("a", "*")
        gtree.create_node("b", parent=gtree.get_node(gtree.root))
        assert gtree.leaf_path("b") == ("b", "*")

    def test_height(self):
        assert make_gtree_from_rows(AGE_ROWS).height() == 2
        assert make_gtree_from_rows(SEX_ROWS).height() == 1

    def test_height_unbalanced(self):
        gtree = GTree()
        root = gtree.create_node("*")
        a = gtree.create_node("a", parent=root)
        gtree.create_node("b", parent=root)
        gtree.create_node("c", parent=a)
        with pytest.raises(ValueError):
            gtree.height()


class TestMakeGTree:
    def test_shared_prefixes_merged(self):
        gtree = make_gtree_from_rows(AGE_ROWS)
        actual = [gtree.get_value(node) for node in gtree.children(gtree.root)]
        expected = ["30-39", "40-49"]
        assert actual == expected, f"{actual} != {expected}"

    def test_same_label_under_different_parents(self):
        rows = [("a", "x", "*"), ("b", "y", "*"), ("c", "x", "*")]
        gtree = make_gtree_from_rows(rows)
        assert len(gtree.children(gtree.root)) == 2
        assert gtree.leaf_path("c") == ("c", "x", "*")

    @pytest.mark.parametrize(
        "rows",
        [
            [],
            [("a", "*"), ("b",)],
            [("a", "*"), ("b", "ROOT")],
        ],
    )
    def test_invalid_rows(self, rows):
        with pytest.raises(ValueError):
            make_gtree_from_rows(rows)
