"""Unit tests for treekit.model — node types, tree creation and queries."""
from __future__ import annotations

import pytest

from treekit.model import (
    Node,
    TreeState,
    create_tree_state,
    find_ancestors,
    find_children,
    find_descendants,
    find_node,
    find_parent,
    find_siblings,
    find_subtree,
    iter_depth_first,
)


def _ids(nodes: list[Node]) -> list[str]:
    return [n.id for n in nodes]


class TestCreateTreeState:
    def test_single_root(self, id_factory) -> None:
        state = create_tree_state(id_factory)
        assert state.root_id == "id-1"
        assert list(state.nodes_by_id) == ["id-1"]
        assert state.children_by_id == {"id-1": ()}

    def test_root_fields(self, id_factory) -> None:
        root = create_tree_state(id_factory).root
        assert root.name == "Root"
        assert root.parent_id is None
        assert root.order_key == "0"

    def test_default_ids_are_unique(self) -> None:
        assert create_tree_state().root_id != create_tree_state().root_id

    def test_custom_root_name(self, id_factory) -> None:
        assert create_tree_state(id_factory, name="Home").root.name == "Home"


class TestNode:
    def test_with_changes_returns_copy(self) -> None:
        node = Node(id="a", name="A", parent_id="root", order_key="0")
        renamed = node.with_changes(name="B")
        assert renamed.name == "B"
        assert node.name == "A"

    def test_frozen(self) -> None:
        node = Node(id="a", name="A")
        with pytest.raises(AttributeError):
            node.name = "B"  # type: ignore[misc]

    def test_state_len_and_contains(self, sample_state: TreeState) -> None:
        assert len(sample_state) == 6
        assert "grand1" in sample_state
        assert "missing" not in sample_state


class TestLookups:
    def test_find_node(self, sample_state: TreeState) -> None:
        assert find_node(sample_state, "child2").name == "Child 2"  # type: ignore[union-attr]
        assert find_node(sample_state, "missing") is None

    def test_find_parent(self, sample_state: TreeState) -> None:
        assert find_parent(sample_state, "grand1").id == "child1"  # type: ignore[union-attr]

    def test_find_parent_of_root_is_none(self, sample_state: TreeState) -> None:
        assert find_parent(sample_state, "root") is None

    def test_find_parent_of_missing_is_none(self, sample_state: TreeState) -> None:
        assert find_parent(sample_state, "missing") is None

    def test_find_children_in_order(self, sample_state: TreeState) -> None:
        assert _ids(find_children(sample_state, "root")) == ["child1", "child2", "child3"]

    def test_find_children_of_leaf_and_missing(self, sample_state: TreeState) -> None:
        assert find_children(sample_state, "child3") == []
        assert find_children(sample_state, "missing") == []


class TestTraversals:
    def test_ancestors_nearest_first(self, sample_state: TreeState) -> None:
        assert _ids(find_ancestors(sample_state, "grand2")) == ["child1", "root"]

    def test_ancestors_of_root_empty(self, sample_state: TreeState) -> None:
        assert find_ancestors(sample_state, "root") == []

    def test_descendants_pre_order(self, sample_state: TreeState) -> None:
        assert _ids(find_descendants(sample_state, "root")) == [
            "child1",
            "grand1",
            "grand2",
            "child2",
            "child3",
        ]

    def test_siblings_exclude_self(self, sample_state: TreeState) -> None:
        assert _ids(find_siblings(sample_state, "child2")) == ["child1", "child3"]

    def test_siblings_of_root_empty(self, sample_state: TreeState) -> None:
        assert find_siblings(sample_state, "root") == []

    def test_subtree_includes_self(self, sample_state: TreeState) -> None:
        assert _ids(find_subtree(sample_state, "child1")) == ["child1", "grand1", "grand2"]

    def test_subtree_of_missing_empty(self, sample_state: TreeState) -> None:
        assert find_subtree(sample_state, "missing") == []

    def test_iter_depth_first_depths(self, sample_state: TreeState) -> None:
        pairs = [(depth, node.id) for depth, node in iter_depth_first(sample_state)]
        assert pairs == [
            (0, "root"),
            (1, "child1"),
            (2, "grand1"),
            (2, "grand2"),
            (1, "child2"),
            (1, "child3"),
        ]

    def test_ancestors_stop_on_cycle(self) -> None:
        nodes = {
            "root": Node(id="root", name="Root", order_key="0"),
            "a": Node(id="a", name="A", parent_id="b", order_key="0"),
            "b": Node(id="b", name="B", parent_id="a", order_key="0"),
        }
        state = TreeState(root_id="root", nodes_by_id=nodes, children_by_id={})
        assert _ids(find_ancestors(state, "a")) == ["b"]

    def test_deep_chain_does_not_recurse(self) -> None:
        depth = 5000
        nodes = {"n0": Node(id="n0", name="n0", order_key="0")}
        children: dict[str, tuple[str, ...]] = {}
        for i in range(1, depth):
            nodes[f"n{i}"] = Node(id=f"n{i}", name=f"n{i}", parent_id=f"n{i - 1}", order_key="0")
            children[f"n{i - 1}"] = (f"n{i}",)
        children[f"n{depth - 1}"] = ()
        state = TreeState(root_id="n0", nodes_by_id=nodes, children_by_id=children)
        assert len(find_descendants(state, "n0")) == depth - 1
        assert len(find_ancestors(state, f"n{depth - 1}")) == depth - 1
