"""Undo/redo history around the operation engine.

``HistoryStore`` owns the current ``TreeState`` and exposes the five
engine operations.  Each successful operation is recorded as one
``HistoryEntry`` holding a forward and an inverse patch list, however
many nodes it touched, so undo and redo always move by whole edits.

There is no process-wide default store.  Construct one and pass it to
whatever needs it::

    store = HistoryStore()
    unsubscribe = store.subscribe(lambda: print(len(store.snapshot)))
    store.insert_node(store.snapshot.root_id, Node(id="a", name="A"))
    store.undo()
    unsubscribe()

Listeners run synchronously after the new snapshot is in place.  The
undo stack holds at most ``config.history_limit`` entries; the oldest
entry is dropped first.  Callers must serialize access to a store.
"""
from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass

from treekit.config import DEFAULT_CONFIG, TreeConfig
from treekit.history.patch import Patch, apply_patches, diff_states
from treekit.invariants.checks import check_tree
from treekit.invariants.errors import OperationResult
from treekit.model.nodes import IdFactory, Node, TreeState, create_tree_state
from treekit.ops import engine

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


@dataclass(frozen=True)
class HistoryEntry:
    """One undoable edit.

    Parameters
    ----------
    label:
        Name of the operation that produced the edit.
    forward:
        Patches replaying the edit.
    inverse:
        Patches reverting the edit.
    """

    label: str
    forward: tuple[Patch, ...]
    inverse: tuple[Patch, ...]


class HistoryStore:
    """Stateful tree holder with undo/redo and change notification.

    Parameters
    ----------
    initial:
        Starting snapshot.  Defaults to a fresh tree with a single root.
    config:
        Allocator and history settings.
    id_factory:
        Id source for the root of the default starting snapshot.

    Raises
    ------
    ValueError
        If ``initial`` violates a tree invariant.
    """

    def __init__(
        self,
        initial: TreeState | None = None,
        config: TreeConfig | None = None,
        id_factory: IdFactory | None = None,
    ) -> None:
        self._config: TreeConfig = config or DEFAULT_CONFIG
        self._state: TreeState = self._checked(initial) if initial is not None else create_tree_state(id_factory)
        self._past: deque[HistoryEntry] = deque(maxlen=self._config.history_limit)
        self._future: list[HistoryEntry] = []
        self._listeners: list[Listener] = []

    @staticmethod
    def _checked(state: TreeState) -> TreeState:
        audit = check_tree(state)
        if not audit.success:
            raise ValueError(f"Invalid tree state: {audit.error}")
        return state

    # ------------------------------------------------------------------
    # State and subscription
    # ------------------------------------------------------------------

    @property
    def snapshot(self) -> TreeState:
        """The current snapshot."""
        return self._state

    @property
    def config(self) -> TreeConfig:
        return self._config

    @property
    def can_undo(self) -> bool:
        return len(self._past) > 0

    @property
    def can_redo(self) -> bool:
        return len(self._future) > 0

    @property
    def undo_depth(self) -> int:
        return len(self._past)

    @property
    def redo_depth(self) -> int:
        return len(self._future)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` and return a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self) -> None:
        for listener in list(self._listeners):
            listener()

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def insert_node(self, parent_id: str, node: Node) -> OperationResult[TreeState]:
        return self._run("insert", engine.insert_node(self._state, parent_id, node, self._config))

    def update_node(self, node_id: str, node: Node) -> OperationResult[TreeState]:
        return self._run("update", engine.update_node(self._state, node_id, node))

    def delete_node(self, node_id: str) -> OperationResult[TreeState]:
        return self._run("delete", engine.delete_node(self._state, node_id))

    def move_node(self, node_id: str, parent_id: str) -> OperationResult[TreeState]:
        return self._run("move", engine.move_node(self._state, node_id, parent_id, self._config))

    def reorder_sibling(self, node_id: str, new_index: int) -> OperationResult[TreeState]:
        return self._run(
            "reorder", engine.reorder_sibling(self._state, node_id, new_index, self._config)
        )

    def _run(self, label: str, result: OperationResult[TreeState]) -> OperationResult[TreeState]:
        """Commit a successful engine result and notify listeners.

        A success that changed nothing records no history entry, but
        listeners are still notified.
        """
        if not result.success:
            return result
        forward, inverse = diff_states(self._state, result.data)
        if not forward:
            self._emit()
            return result
        if self._past.maxlen is not None and len(self._past) == self._past.maxlen:
            logger.debug("History full (%d); evicting oldest entry", self._past.maxlen)
        self._past.append(HistoryEntry(label=label, forward=tuple(forward), inverse=tuple(inverse)))
        self._future.clear()
        self._state = result.data
        logger.debug("Committed %s (%d patches)", label, len(forward))
        self._emit()
        return result

    # ------------------------------------------------------------------
    # Undo / redo
    # ------------------------------------------------------------------

    def undo(self) -> bool:
        """Revert the most recent edit.  Returns ``False`` if there was nothing to undo."""
        if not self._past:
            return False
        entry = self._past.pop()
        self._state = apply_patches(self._state, entry.inverse)
        self._future.append(entry)
        logger.debug("Undid %s", entry.label)
        self._emit()
        return True

    def redo(self) -> bool:
        """Replay the most recently undone edit.  Returns ``False`` if there was nothing to redo."""
        if not self._future:
            return False
        entry = self._future.pop()
        self._state = apply_patches(self._state, entry.forward)
        self._past.append(entry)
        logger.debug("Redid %s", entry.label)
        self._emit()
        return True

    def clear_history(self) -> None:
        """Drop every undo and redo entry, keeping the current snapshot."""
        self._past.clear()
        self._future.clear()

    def reset(self, state: TreeState) -> None:
        """Replace the current snapshot and clear history.

        Raises
        ------
        ValueError
            If ``state`` violates a tree invariant.
        """
        self._state = self._checked(state)
        self.clear_history()
        self._emit()

    def __repr__(self) -> str:
        return (
            f"HistoryStore(nodes={len(self._state)}, undo={len(self._past)}, "
            f"redo={len(self._future)})"
        )
