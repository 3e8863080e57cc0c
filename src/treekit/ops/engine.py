"""Structural operations on an immutable ``TreeState``.

Every operation validates its preconditions through ``treekit.invariants``,
builds a new snapshot and returns ``Success(new_state)``, or returns
``Failure(error)`` without building anything.  The supplied snapshot is
never mutated: new ``nodes_by_id`` / ``children_by_id`` dicts are created
and every untouched ``Node`` and children tuple is shared with the input.

Usage
-----
::

    from treekit.model import Node, create_tree_state
    from treekit.ops import insert_node, move_node

    state = create_tree_state()
    result = insert_node(state, state.root_id, Node(id="a", name="A"))
    if result.success:
        state = result.data
"""
from __future__ import annotations

import logging

from treekit.config import TreeConfig
from treekit.invariants.checks import (
    check_cycle_free,
    check_move_valid,
    check_node_exists,
    check_node_unique,
    check_node_valid,
    check_order_keys_strict,
    check_parent_exists,
    check_update_valid,
    parse_order_key,
)
from treekit.invariants.errors import (
    Failure,
    InvalidOrderKey,
    OperationError,
    OperationResult,
    ParentNotFound,
    Success,
)
from treekit.model.nodes import Node, TreeState
from treekit.model.queries import find_subtree
from treekit.ordering.allocator import KeyAllocation, allocate_order_key, normalize_order_keys

logger = logging.getLogger(__name__)


def _fail(operation: str, error: OperationError) -> Failure:
    logger.debug("%s rejected: %s", operation, error)
    return Failure(error)


def _rekey(nodes: dict[str, Node], keys: dict[str, str], skip: str | None = None) -> None:
    """Rewrite the order key of every node in ``keys`` whose key changed."""
    for node_id, key in keys.items():
        if node_id == skip:
            continue
        node = nodes[node_id]
        if node.order_key != key:
            nodes[node_id] = node.with_changes(order_key=key)


def _place(
    nodes: dict[str, Node],
    children: dict[str, tuple[str, ...]],
    parent_id: str,
    node_id: str,
    allocation: KeyAllocation,
) -> None:
    """Insert ``node_id`` into the children of ``parent_id`` as ``allocation`` decided."""
    if allocation.renumbered is not None and allocation.ordered_ids is not None:
        _rekey(nodes, allocation.renumbered, skip=node_id)
        children[parent_id] = allocation.ordered_ids
        return
    siblings = list(children.get(parent_id, ()))
    siblings.insert(allocation.index, node_id)
    children[parent_id] = tuple(siblings)


def insert_node(
    state: TreeState,
    parent_id: str,
    node: Node,
    config: TreeConfig | None = None,
) -> OperationResult[TreeState]:
    """Insert ``node`` as a child of ``parent_id``.

    A blank ``node.order_key`` appends the node; a numeric key asks for a
    position among the siblings (see ``treekit.ordering``).  The stored
    node always takes ``parent_id`` from the argument.

    Returns
    -------
    OperationResult[TreeState]
        The new snapshot, or one of ``InvalidNode``, ``DuplicateNode``,
        ``NodeNotFound`` (parent), ``InvalidOrderKey`` and the children
        consistency failures of the parent's current list.
    """
    valid = check_node_valid(node)
    if not valid.success:
        return _fail("insert", valid.error)
    unique = check_node_unique(state, node.id)
    if not unique.success:
        return _fail("insert", unique.error)
    parent = check_node_exists(state, parent_id)
    if not parent.success:
        return _fail("insert", parent.error)
    siblings = check_order_keys_strict(state, parent_id)
    if not siblings.success:
        return _fail("insert", siblings.error)
    if (node.order_key or "").strip() and parse_order_key(node.order_key) is None:
        return _fail("insert", InvalidOrderKey(node_id=node.id, order_key=node.order_key))

    incoming = node.with_changes(parent_id=parent_id)
    allocation = allocate_order_key(state, parent_id, incoming, config)

    nodes = dict(state.nodes_by_id)
    children = dict(state.children_by_id)
    _place(nodes, children, parent_id, node.id, allocation)
    nodes[node.id] = incoming.with_changes(order_key=allocation.order_key)
    children[node.id] = ()
    next_state = TreeState(root_id=state.root_id, nodes_by_id=nodes, children_by_id=children)

    ordered = check_order_keys_strict(next_state, parent_id)
    if not ordered.success:
        return _fail("insert", ordered.error)
    logger.debug("Inserted %r under %r with key %s", node.id, parent_id, allocation.order_key)
    return Success(next_state)


def update_node(state: TreeState, node_id: str, node: Node) -> OperationResult[TreeState]:
    """Replace the non-structural fields of ``node_id`` with those of ``node``.

    ``node`` must carry the stored ``id``, ``parent_id`` and ``order_key``;
    only ``name`` may change.  An update that changes nothing returns the
    input snapshot itself.
    """
    valid = check_update_valid(state, node_id, node)
    if not valid.success:
        return _fail("update", valid.error)
    current = valid.data
    merged = current.with_changes(name=node.name)
    if merged == current:
        return Success(state)

    nodes = dict(state.nodes_by_id)
    nodes[node_id] = merged
    return Success(TreeState(root_id=state.root_id, nodes_by_id=nodes, children_by_id=state.children_by_id))


def delete_node(state: TreeState, node_id: str) -> OperationResult[TreeState]:
    """Delete ``node_id`` together with its whole subtree.

    The root cannot be deleted; doing so reports ``ParentNotFound`` for it.
    """
    existing = check_node_exists(state, node_id)
    if not existing.success:
        return _fail("delete", existing.error)
    if node_id == state.root_id:
        return _fail("delete", ParentNotFound(node_id=node_id))

    removed = find_subtree(state, node_id)
    nodes = dict(state.nodes_by_id)
    children = dict(state.children_by_id)
    for member in removed:
        nodes.pop(member.id, None)
        children.pop(member.id, None)

    parent_id = existing.data.parent_id
    if parent_id is not None and parent_id in children:
        children[parent_id] = tuple(child for child in children[parent_id] if child != node_id)
    next_state = TreeState(root_id=state.root_id, nodes_by_id=nodes, children_by_id=children)

    if parent_id is not None:
        ordered = check_order_keys_strict(next_state, parent_id)
        if not ordered.success:
            return _fail("delete", ordered.error)
    logger.debug("Deleted %r and %d descendants", node_id, len(removed) - 1)
    return Success(next_state)


def move_node(
    state: TreeState,
    node_id: str,
    parent_id: str,
    config: TreeConfig | None = None,
) -> OperationResult[TreeState]:
    """Move ``node_id`` (with its subtree) to the end of ``parent_id``'s children.

    Fails with ``InvalidMove`` for self parenting, unknown endpoints, or a
    destination inside the moving subtree.
    """
    valid = check_move_valid(state, node_id, parent_id)
    if not valid.success:
        return _fail("move", valid.error)
    node = valid.data
    destination = check_order_keys_strict(state, parent_id)
    if not destination.success:
        return _fail("move", destination.error)

    old_parent_id = node.parent_id
    children = dict(state.children_by_id)
    if old_parent_id is not None:
        children[old_parent_id] = tuple(c for c in children.get(old_parent_id, ()) if c != node_id)
    detached = TreeState(root_id=state.root_id, nodes_by_id=state.nodes_by_id, children_by_id=children)

    allocation = allocate_order_key(detached, parent_id, node.with_changes(order_key=""), config)
    nodes = dict(state.nodes_by_id)
    _place(nodes, children, parent_id, node_id, allocation)
    nodes[node_id] = node.with_changes(parent_id=parent_id, order_key=allocation.order_key)
    next_state = TreeState(root_id=state.root_id, nodes_by_id=nodes, children_by_id=children)

    touched = [parent_id]
    if old_parent_id is not None and old_parent_id != parent_id:
        touched.append(old_parent_id)
    for touched_id in touched:
        ordered = check_order_keys_strict(next_state, touched_id)
        if not ordered.success:
            return _fail("move", ordered.error)
    cycle = check_cycle_free(next_state, node_id)
    if not cycle.success:
        return _fail("move", cycle.error)
    logger.debug("Moved %r from %r to %r", node_id, old_parent_id, parent_id)
    return Success(next_state)


def reorder_sibling(
    state: TreeState,
    node_id: str,
    new_index: int,
    config: TreeConfig | None = None,
) -> OperationResult[TreeState]:
    """Move ``node_id`` to position ``new_index`` among its siblings.

    The index is clamped into ``[0, number of other siblings]``.  Every
    sibling is then rekeyed ``0, gap, 2 * gap, ...`` in the new order.
    """
    existing = check_node_exists(state, node_id)
    if not existing.success:
        return _fail("reorder", existing.error)
    parent = check_parent_exists(state, node_id)
    if not parent.success:
        return _fail("reorder", parent.error)
    parent_id = parent.data.id
    current = check_order_keys_strict(state, parent_id)
    if not current.success:
        return _fail("reorder", current.error)

    ordered_ids = [child.id for child in current.data if child.id != node_id]
    index = max(0, min(int(new_index), len(ordered_ids)))
    ordered_ids.insert(index, node_id)

    nodes = dict(state.nodes_by_id)
    _rekey(nodes, normalize_order_keys(ordered_ids, config))
    children = dict(state.children_by_id)
    children[parent_id] = tuple(ordered_ids)
    next_state = TreeState(root_id=state.root_id, nodes_by_id=nodes, children_by_id=children)

    ordered = check_order_keys_strict(next_state, parent_id)
    if not ordered.success:
        return _fail("reorder", ordered.error)
    logger.debug("Reordered %r to index %d under %r", node_id, index, parent_id)
    return Success(next_state)
