"""treekit invariant layer.

Exports the typed failure values, the ``Success``/``Failure`` result
types and every structural check.
"""
from __future__ import annotations

from treekit.invariants.checks import (
    check_children_consistent,
    check_cycle_free,
    check_move_valid,
    check_node_exists,
    check_node_unique,
    check_node_valid,
    check_order_keys_strict,
    check_parent_exists,
    check_tree,
    check_update_valid,
    parse_order_key,
)
from treekit.invariants.errors import (
    CycleDetected,
    DuplicateNode,
    ErrorKind,
    Failure,
    InvalidMove,
    InvalidNode,
    InvalidOrderKey,
    InvalidOrderSequence,
    InvalidUpdate,
    NodeNotFound,
    OperationError,
    OperationResult,
    ParentNotFound,
    Success,
)

__all__ = [
    "check_children_consistent",
    "check_cycle_free",
    "check_move_valid",
    "check_node_exists",
    "check_node_unique",
    "check_node_valid",
    "check_order_keys_strict",
    "check_parent_exists",
    "check_tree",
    "check_update_valid",
    "parse_order_key",
    "CycleDetected",
    "DuplicateNode",
    "ErrorKind",
    "Failure",
    "InvalidMove",
    "InvalidNode",
    "InvalidOrderKey",
    "InvalidOrderSequence",
    "InvalidUpdate",
    "NodeNotFound",
    "OperationError",
    "OperationResult",
    "ParentNotFound",
    "Success",
]
