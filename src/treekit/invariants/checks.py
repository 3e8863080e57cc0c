"""Invariant checks over a ``TreeState`` snapshot.

Each check is a pure function returning ``Success`` with the data it
validated (so callers can reuse the resolved nodes) or ``Failure`` with a
typed error naming the broken invariant:

    check_node_valid          node has a non-empty id
    check_node_unique         id not yet present
    check_node_exists         id resolves to a node
    check_parent_exists       node's parent resolves
    check_children_consistent children list resolves, points back, no duplicates
    check_order_keys_strict   children consistent and keys strictly increasing
    check_cycle_free          parent links reach a null parent without revisiting
    check_update_valid        update keeps id, parent_id and order_key
    check_move_valid          endpoints exist, no self parenting, no cycle
    check_tree                every invariant over the whole snapshot
"""
from __future__ import annotations

import re

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
    OperationResult,
    ParentNotFound,
    Success,
)
from treekit.model.nodes import Node, TreeState
from treekit.model.queries import find_node, find_parent

_ORDER_KEY_RE = re.compile(r"^[+-]?\d+$")


def parse_order_key(order_key: str) -> int | None:
    """Parse an order key into an integer, or return ``None`` if it is not numeric."""
    if not isinstance(order_key, str):
        return None
    text = order_key.strip()
    if not _ORDER_KEY_RE.match(text):
        return None
    return int(text)


def check_node_valid(node: Node) -> OperationResult[Node]:
    if not isinstance(node.id, str) or not node.id.strip():
        return Failure(InvalidNode(node=node))
    return Success(node)


def check_node_unique(state: TreeState, node_id: str) -> OperationResult[None]:
    if node_id in state.nodes_by_id:
        return Failure(DuplicateNode(node_id=node_id))
    return Success(None)


def check_node_exists(state: TreeState, node_id: str) -> OperationResult[Node]:
    node = find_node(state, node_id)
    if node is None:
        return Failure(NodeNotFound(node_id=node_id))
    return Success(node)


def check_parent_exists(state: TreeState, node_id: str) -> OperationResult[Node]:
    """Return the parent of ``node_id``; fails for the root and for absent ids."""
    parent = find_parent(state, node_id)
    if parent is None:
        return Failure(ParentNotFound(node_id=node_id))
    return Success(parent)


def check_children_consistent(state: TreeState, parent_id: str) -> OperationResult[list[Node]]:
    """Resolve the children of ``parent_id`` and confirm each points back to it."""
    seen: set[str] = set()
    resolved: list[Node] = []
    for child_id in state.children_by_id.get(parent_id, ()):
        if child_id in seen:
            return Failure(DuplicateNode(node_id=child_id))
        seen.add(child_id)
        child = find_node(state, child_id)
        if child is None:
            return Failure(NodeNotFound(node_id=child_id))
        if child.parent_id != parent_id:
            return Failure(ParentNotFound(node_id=child_id))
        resolved.append(child)
    return Success(resolved)


def check_order_keys_strict(state: TreeState, parent_id: str) -> OperationResult[list[Node]]:
    """Children are consistent and their parsed keys strictly increase in list order."""
    children = check_children_consistent(state, parent_id)
    if not children.success:
        return children

    previous: int | None = None
    for child in children.data:
        key = parse_order_key(child.order_key)
        if key is None:
            return Failure(InvalidOrderKey(node_id=child.id, order_key=child.order_key))
        if previous is not None and key <= previous:
            return Failure(
                InvalidOrderSequence(
                    parent_id=parent_id,
                    sequence=tuple(c.id for c in children.data),
                )
            )
        previous = key
    return children


def check_cycle_free(state: TreeState, node_id: str) -> OperationResult[None]:
    """Walk parent links from ``node_id`` until a null parent or a missing node."""
    visited: set[str] = set()
    path: list[str] = []
    current: str | None = node_id
    while current is not None:
        if current in visited:
            start = path.index(current)
            return Failure(CycleDetected(path=(*path[start:], current)))
        visited.add(current)
        path.append(current)
        node = find_node(state, current)
        if node is None:
            break
        current = node.parent_id
    return Success(None)


def check_update_valid(state: TreeState, node_id: str, node: Node) -> OperationResult[Node]:
    """Only non-structural fields may differ from the stored node.

    Returns the stored node on success.
    """
    existing = check_node_exists(state, node_id)
    if not existing.success:
        return existing
    current = existing.data
    for field_name in ("id", "parent_id", "order_key"):
        if getattr(node, field_name) != getattr(current, field_name):
            return Failure(InvalidUpdate(node=node, reason=f"Cannot update node.{field_name}"))
    return existing


def _is_in_subtree(state: TreeState, candidate_id: str, root_id: str) -> bool:
    """True if ``candidate_id`` is ``root_id`` or one of its descendants."""
    seen: set[str] = set()
    current: str | None = candidate_id
    while current is not None and current not in seen:
        if current == root_id:
            return True
        seen.add(current)
        node = find_node(state, current)
        current = node.parent_id if node is not None else None
    return False


def check_move_valid(state: TreeState, node_id: str, parent_id: str) -> OperationResult[Node]:
    """Validate moving ``node_id`` under ``parent_id``; returns the moving node."""
    if node_id == parent_id:
        return Failure(InvalidMove(node_id=node_id, parent_id=parent_id, reason="NodeIsParent"))
    node = check_node_exists(state, node_id)
    if not node.success:
        return Failure(
            InvalidMove(node_id=node_id, parent_id=parent_id, reason=ErrorKind.NODE_NOT_FOUND.label)
        )
    if find_node(state, parent_id) is None:
        return Failure(
            InvalidMove(node_id=node_id, parent_id=parent_id, reason=ErrorKind.PARENT_NOT_FOUND.label)
        )
    if _is_in_subtree(state, parent_id, node_id):
        return Failure(
            InvalidMove(node_id=node_id, parent_id=parent_id, reason=ErrorKind.CYCLE_DETECTED.label)
        )
    cycle = check_cycle_free(state, parent_id)
    if not cycle.success:
        return cycle
    return node


def check_tree(state: TreeState) -> OperationResult[TreeState]:
    """Audit every structural invariant of a whole snapshot.

    Returns the first failure found, in this order: root presence, every
    children list (consistency and key ordering), membership of every
    non-root node in its parent's list, then cycle freedom.
    """
    root = find_node(state, state.root_id)
    if root is None:
        return Failure(NodeNotFound(node_id=state.root_id))
    if root.parent_id is not None:
        return Failure(ParentNotFound(node_id=state.root_id))

    for parent_id in state.children_by_id:
        if parent_id not in state.nodes_by_id:
            return Failure(NodeNotFound(node_id=parent_id))
        ordered = check_order_keys_strict(state, parent_id)
        if not ordered.success:
            return ordered

    for node_id, node in state.nodes_by_id.items():
        if node.id != node_id:
            return Failure(InvalidNode(node=node))
        if node_id == state.root_id:
            continue
        if node.parent_id is None or node.parent_id not in state.nodes_by_id:
            return Failure(ParentNotFound(node_id=node_id))
        if node_id not in state.children_by_id.get(node.parent_id, ()):
            return Failure(ParentNotFound(node_id=node_id))

    for node_id in state.nodes_by_id:
        cycle = check_cycle_free(state, node_id)
        if not cycle.success:
            return cycle
    return Success(state)
