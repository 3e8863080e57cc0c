"""treekit — in-memory ordered tree engine with patch-based undo/redo.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
::

    import treekit

    state = treekit.create_tree_state()
    result = treekit.insert_node(state, state.root_id, treekit.Node(id="a", name="A"))
    if result.success:
        state = result.data

    # Stateful editing with undo/redo
    store = treekit.HistoryStore(state)
    store.update_node("a", store.snapshot.nodes_by_id["a"].with_changes(name="Renamed"))
    store.undo()

    # Versioned envelope
    envelope = treekit.serialize_tree_state(store.snapshot)
    restored = treekit.deserialize_tree_state(envelope)

    treekit.__version__
    '0.1.0'
"""
from __future__ import annotations

__version__: str = "0.1.0"

from treekit.adapters import (
    TreeDeserializationError,
    TreeSerializer,
    deserialize_tree_state,
    serialize_tree_state,
)
from treekit.config import ConfigError, TreeConfig, load_config
from treekit.history import HistoryStore
from treekit.invariants import (
    ErrorKind,
    Failure,
    OperationError,
    OperationResult,
    Success,
    check_tree,
)
from treekit.model import Node, TreeState, create_tree_state, iter_depth_first
from treekit.ops import delete_node, insert_node, move_node, reorder_sibling, update_node

__all__ = [
    "__version__",
    "ConfigError",
    "ErrorKind",
    "Failure",
    "HistoryStore",
    "Node",
    "OperationError",
    "OperationResult",
    "Success",
    "TreeConfig",
    "TreeDeserializationError",
    "TreeSerializer",
    "TreeState",
    "check_tree",
    "create_tree_state",
    "delete_node",
    "deserialize_tree_state",
    "insert_node",
    "iter_depth_first",
    "load_config",
    "move_node",
    "reorder_sibling",
    "serialize_tree_state",
    "update_node",
]
