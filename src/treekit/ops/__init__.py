"""treekit operation engine: the five structural mutators."""
from __future__ import annotations

from treekit.ops.engine import delete_node, insert_node, move_node, reorder_sibling, update_node

__all__ = [
    "delete_node",
    "insert_node",
    "move_node",
    "reorder_sibling",
    "update_node",
]
