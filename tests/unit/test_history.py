"""Unit tests for treekit.history — patches and the undo/redo store."""
from __future__ import annotations

import pytest

from treekit.config import TreeConfig
from treekit.history import HistoryStore, Patch, PatchOp, apply_patches, diff_states
from treekit.invariants import DuplicateNode, Failure, check_tree
from treekit.model import Node, TreeState
from treekit.ops import insert_node


def _copy(state: TreeState) -> TreeState:
    return TreeState(
        root_id=state.root_id,
        nodes_by_id=dict(state.nodes_by_id),
        children_by_id=dict(state.children_by_id),
    )


# ===========================================================================
# diff_states / apply_patches
# ===========================================================================


class TestPatches:
    def test_identical_states_diff_empty(self, sample_state: TreeState) -> None:
        assert diff_states(sample_state, sample_state) == ([], [])

    def test_insert_diff_is_minimal(self, sample_state: TreeState) -> None:
        after = insert_node(sample_state, "child3", Node(id="x", name="X")).data  # type: ignore[union-attr]
        forward, inverse = diff_states(sample_state, after)
        assert {(p.op, p.key) for p in forward} == {
            (PatchOp.SET_NODE, "x"),
            (PatchOp.SET_CHILDREN, "child3"),
            (PatchOp.SET_CHILDREN, "x"),
        }
        assert {(p.op, p.key) for p in inverse} == {
            (PatchOp.REMOVE_NODE, "x"),
            (PatchOp.SET_CHILDREN, "child3"),
            (PatchOp.REMOVE_CHILDREN, "x"),
        }

    def test_round_trip(self, sample_state: TreeState) -> None:
        after = insert_node(sample_state, "root", Node(id="x", name="X", order_key="1")).data  # type: ignore[union-attr]
        forward, inverse = diff_states(sample_state, after)
        assert apply_patches(after, inverse) == sample_state
        assert apply_patches(sample_state, forward) == after

    def test_apply_does_not_mutate(self, sample_state: TreeState) -> None:
        before = _copy(sample_state)
        apply_patches(sample_state, [Patch(PatchOp.REMOVE_NODE, "child3")])
        assert sample_state == before

    def test_root_change(self, sample_state: TreeState) -> None:
        other = TreeState(root_id="child1", nodes_by_id=sample_state.nodes_by_id, children_by_id=sample_state.children_by_id)
        forward, inverse = diff_states(sample_state, other)
        assert forward == [Patch(PatchOp.SET_ROOT, "child1")]
        assert apply_patches(other, inverse).root_id == "root"

    def test_patch_str(self) -> None:
        assert str(Patch(PatchOp.REMOVE_NODE, "a")) == "[-] node a"


# ===========================================================================
# HistoryStore
# ===========================================================================


@pytest.fixture()
def store(sample_state: TreeState) -> HistoryStore:
    return HistoryStore(sample_state)


class TestHistoryStoreBasics:
    def test_default_store_has_root(self, id_factory) -> None:
        store = HistoryStore(id_factory=id_factory)
        assert store.snapshot.root_id == "id-1"
        assert not store.can_undo
        assert not store.can_redo

    def test_invalid_initial_state_rejected(self, sample_state: TreeState) -> None:
        broken = TreeState(root_id="ghost", nodes_by_id=sample_state.nodes_by_id, children_by_id=sample_state.children_by_id)
        with pytest.raises(ValueError, match="Invalid tree state"):
            HistoryStore(broken)

    def test_success_replaces_snapshot(self, store: HistoryStore) -> None:
        result = store.insert_node("root", Node(id="x", name="X"))
        assert result.success
        assert store.snapshot is result.data  # type: ignore[union-attr]
        assert store.can_undo

    def test_failure_leaves_everything(self, store: HistoryStore) -> None:
        before = store.snapshot
        result = store.insert_node("root", Node(id="child1", name="Dup"))
        assert result == Failure(DuplicateNode(node_id="child1"))
        assert store.snapshot is before
        assert not store.can_undo

    def test_noop_update_not_recorded(self, store: HistoryStore) -> None:
        store.update_node("child1", store.snapshot.nodes_by_id["child1"])
        assert not store.can_undo

    def test_noop_update_still_notifies(self, store: HistoryStore) -> None:
        calls: list[None] = []
        store.subscribe(lambda: calls.append(None))
        before = store.snapshot
        result = store.update_node("child1", before.nodes_by_id["child1"])
        assert result.success
        assert store.snapshot is before
        assert calls == [None]

    def test_repr(self, store: HistoryStore) -> None:
        assert "HistoryStore" in repr(store)


class TestUndoRedo:
    def test_undo_on_empty_is_noop(self, store: HistoryStore) -> None:
        before = store.snapshot
        assert store.undo() is False
        assert store.redo() is False
        assert store.snapshot is before

    @pytest.mark.parametrize(
        "operation",
        [
            lambda s: s.insert_node("root", Node(id="x", name="X", order_key="1")),
            lambda s: s.update_node("child2", s.snapshot.nodes_by_id["child2"].with_changes(name="N")),
            lambda s: s.delete_node("child1"),
            lambda s: s.move_node("child1", "child3"),
            lambda s: s.reorder_sibling("child3", 0),
        ],
        ids=["insert", "update", "delete", "move", "reorder"],
    )
    def test_undo_restores_and_redo_reapplies(self, store: HistoryStore, operation) -> None:
        before = _copy(store.snapshot)
        assert operation(store).success
        after = _copy(store.snapshot)

        assert store.undo() is True
        assert store.snapshot == before
        assert store.can_redo

        assert store.redo() is True
        assert store.snapshot == after
        assert check_tree(store.snapshot).success

    def test_renormalizing_insert_is_one_step(self) -> None:
        nodes = {
            "root": Node(id="root", name="Root", order_key="0"),
            "a": Node(id="a", name="A", parent_id="root", order_key="0"),
            "b": Node(id="b", name="B", parent_id="root", order_key="1"),
        }
        initial = TreeState(root_id="root", nodes_by_id=nodes, children_by_id={"root": ("a", "b"), "a": (), "b": ()})
        store = HistoryStore(initial)
        store.insert_node("root", Node(id="c", name="C", order_key="1"))
        assert store.undo_depth == 1
        store.undo()
        assert store.snapshot == initial
        assert not store.can_undo

    def test_new_edit_clears_redo(self, store: HistoryStore) -> None:
        store.delete_node("child3")
        store.undo()
        assert store.can_redo
        store.delete_node("child2")
        assert not store.can_redo

    def test_multiple_undo_in_order(self, store: HistoryStore) -> None:
        original = _copy(store.snapshot)
        store.insert_node("root", Node(id="x", name="X"))
        store.move_node("x", "child1")
        store.reorder_sibling("x", 0)
        while store.undo():
            pass
        assert store.snapshot == original
        assert store.redo_depth == 3

    def test_history_limit_evicts_oldest(self, sample_state: TreeState) -> None:
        store = HistoryStore(sample_state, config=TreeConfig(history_limit=2))
        for name in ("a", "b", "c"):
            store.insert_node("root", Node(id=name, name=name))
        assert store.undo_depth == 2
        store.undo()
        store.undo()
        assert "a" in store.snapshot
        assert store.undo() is False

    def test_unbounded_history(self, sample_state: TreeState) -> None:
        store = HistoryStore(sample_state, config=TreeConfig(history_limit=None))
        for index in range(150):
            store.insert_node("root", Node(id=f"n{index}", name="n"))
        assert store.undo_depth == 150

    def test_clear_history(self, store: HistoryStore) -> None:
        store.delete_node("child3")
        store.clear_history()
        assert not store.can_undo

    def test_reset(self, store: HistoryStore, sample_state: TreeState) -> None:
        store.delete_node("child3")
        store.reset(sample_state)
        assert store.snapshot is sample_state
        assert not store.can_undo


class TestSubscriptions:
    def test_listener_called_after_swap(self, store: HistoryStore) -> None:
        seen: list[int] = []
        store.subscribe(lambda: seen.append(len(store.snapshot)))
        store.insert_node("root", Node(id="x", name="X"))
        store.undo()
        store.redo()
        assert seen == [7, 6, 7]

    def test_not_called_on_failure_or_empty_undo(self, store: HistoryStore) -> None:
        calls: list[None] = []
        store.subscribe(lambda: calls.append(None))
        store.delete_node("ghost")
        store.undo()
        assert calls == []

    def test_unsubscribe(self, store: HistoryStore) -> None:
        calls: list[None] = []
        unsubscribe = store.subscribe(lambda: calls.append(None))
        unsubscribe()
        unsubscribe()
        store.delete_node("child3")
        assert calls == []

    def test_listener_sees_valid_state(self, store: HistoryStore) -> None:
        results: list[bool] = []
        store.subscribe(lambda: results.append(check_tree(store.snapshot).success))
        store.move_node("child2", "grand1")
        store.undo()
        assert results == [True, True]
