"""Entity definitions for the ordered tree.

A tree is stored as an id-indexed arena: ``nodes_by_id`` maps every id to
its ``Node`` and ``children_by_id`` maps every node id to the ordered tuple
of its children's ids.  Nodes never hold references to one another, so
parent/child consistency and cycle freedom are checked explicitly by
``treekit.invariants`` rather than guaranteed by construction.

Snapshots are treated as immutable.  Operations build new dicts and reuse
the untouched ``Node`` values and children tuples of the previous snapshot.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from typing import Callable

IdFactory = Callable[[], str]

ROOT_NAME = "Root"
ROOT_ORDER_KEY = "0"


def default_id_factory() -> str:
    """Return a random UUID4 string."""
    return str(uuid.uuid4())


@dataclass(frozen=True, slots=True)
class Node:
    """A single named tree node.

    Parameters
    ----------
    id:
        Globally unique, immutable identifier.
    name:
        Display name; the only field an update may change.
    parent_id:
        Id of the parent, or ``None`` for the root.
    order_key:
        String-encoded signed integer ordering the node among its
        siblings.  Assigned by the engine; a blank key asks the engine
        to append.
    """

    id: str
    name: str
    parent_id: str | None = None
    order_key: str = ""

    def with_changes(self, **changes: object) -> "Node":
        """Return a copy of this node with ``changes`` applied."""
        return replace(self, **changes)


@dataclass(frozen=True)
class TreeState:
    """An immutable snapshot of a whole tree.

    Parameters
    ----------
    root_id:
        Id of the root node.
    nodes_by_id:
        Every node, keyed by its own id.
    children_by_id:
        Ordered child ids for every node; leaves map to ``()``.
    """

    root_id: str
    nodes_by_id: dict[str, Node] = field(default_factory=dict)
    children_by_id: dict[str, tuple[str, ...]] = field(default_factory=dict)

    @property
    def root(self) -> Node:
        return self.nodes_by_id[self.root_id]

    def __len__(self) -> int:
        return len(self.nodes_by_id)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.nodes_by_id


def create_tree_state(id_factory: IdFactory | None = None, name: str = ROOT_NAME) -> TreeState:
    """Create a tree holding a single root node.

    Parameters
    ----------
    id_factory:
        Source of the root id.  Defaults to random UUID4 strings.
    name:
        Name of the root node.

    Returns
    -------
    TreeState
        A snapshot with one root whose order key is ``"0"`` and whose
        children list is empty.
    """
    root_id = (id_factory or default_id_factory)()
    root = Node(id=root_id, name=name, parent_id=None, order_key=ROOT_ORDER_KEY)
    return TreeState(root_id=root_id, nodes_by_id={root_id: root}, children_by_id={root_id: ()})
