"""Read-only traversal queries over a ``TreeState``.

All queries are total: an absent id yields ``None`` or an empty list
instead of raising.  Walks are iterative so that very deep trees do not
run into the interpreter's recursion limit.
"""
from __future__ import annotations

from collections.abc import Iterator

from treekit.model.nodes import Node, TreeState


def find_node(state: TreeState, node_id: str) -> Node | None:
    """Return the node with ``node_id``, or ``None``."""
    return state.nodes_by_id.get(node_id)


def find_parent(state: TreeState, node_id: str) -> Node | None:
    """Return the parent of ``node_id``, or ``None`` for the root and absent ids."""
    node = find_node(state, node_id)
    if node is None or node.parent_id is None:
        return None
    return find_node(state, node.parent_id)


def find_children(state: TreeState, node_id: str) -> list[Node]:
    """Return the children of ``node_id`` in sibling order.

    Ids in the children list that do not resolve are skipped.
    """
    children: list[Node] = []
    for child_id in state.children_by_id.get(node_id, ()):
        child = find_node(state, child_id)
        if child is not None:
            children.append(child)
    return children


def find_ancestors(state: TreeState, node_id: str) -> list[Node]:
    """Return the ancestors of ``node_id``, nearest first, ending at the root.

    The walk stops early if a parent link revisits a node.
    """
    ancestors: list[Node] = []
    seen = {node_id}
    parent = find_parent(state, node_id)
    while parent is not None and parent.id not in seen:
        ancestors.append(parent)
        seen.add(parent.id)
        parent = find_parent(state, parent.id)
    return ancestors


def find_descendants(state: TreeState, node_id: str) -> list[Node]:
    """Return every descendant of ``node_id`` in pre-order.

    Each child is immediately followed by its own subtree.
    """
    descendants: list[Node] = []
    seen = {node_id}
    stack = list(reversed(find_children(state, node_id)))
    while stack:
        node = stack.pop()
        if node.id in seen:
            continue
        seen.add(node.id)
        descendants.append(node)
        stack.extend(reversed(find_children(state, node.id)))
    return descendants


def find_siblings(state: TreeState, node_id: str) -> list[Node]:
    """Return the other children of ``node_id``'s parent, in sibling order."""
    parent = find_parent(state, node_id)
    if parent is None:
        return []
    return [child for child in find_children(state, parent.id) if child.id != node_id]


def find_subtree(state: TreeState, node_id: str) -> list[Node]:
    """Return ``node_id`` followed by all of its descendants."""
    node = find_node(state, node_id)
    if node is None:
        return []
    return [node, *find_descendants(state, node_id)]


def iter_depth_first(state: TreeState, node_id: str | None = None) -> Iterator[tuple[int, Node]]:
    """Yield ``(depth, node)`` pairs in pre-order, starting at ``node_id`` or the root."""
    start = find_node(state, node_id if node_id is not None else state.root_id)
    if start is None:
        return
    seen: set[str] = set()
    stack: list[tuple[int, Node]] = [(0, start)]
    while stack:
        depth, node = stack.pop()
        if node.id in seen:
            continue
        seen.add(node.id)
        yield depth, node
        stack.extend((depth + 1, child) for child in reversed(find_children(state, node.id)))
