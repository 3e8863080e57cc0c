"""treekit data model: node and snapshot types plus read-only queries."""
from __future__ import annotations

from treekit.model.nodes import (
    ROOT_NAME,
    ROOT_ORDER_KEY,
    IdFactory,
    Node,
    TreeState,
    create_tree_state,
    default_id_factory,
)
from treekit.model.queries import (
    find_ancestors,
    find_children,
    find_descendants,
    find_node,
    find_parent,
    find_siblings,
    find_subtree,
    iter_depth_first,
)

__all__ = [
    "ROOT_NAME",
    "ROOT_ORDER_KEY",
    "IdFactory",
    "Node",
    "TreeState",
    "create_tree_state",
    "default_id_factory",
    "find_ancestors",
    "find_children",
    "find_descendants",
    "find_node",
    "find_parent",
    "find_siblings",
    "find_subtree",
    "iter_depth_first",
]
