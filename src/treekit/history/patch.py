"""Reversible patches between two ``TreeState`` snapshots.

``diff_states`` compares two snapshots entry by entry and produces a
forward patch list (old -> new) and an inverse patch list (new -> old).
Entries are compared by identity first, so the snapshots produced by the
engine, which share every untouched ``Node`` and children tuple, diff to
exactly the entries an operation touched.

``apply_patches`` replays a patch list onto a snapshot, returning a new
snapshot that shares everything the patches do not name.
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum, auto
from typing import Union

from treekit.model.nodes import Node, TreeState


class PatchOp(Enum):
    """Enumeration of all patch operations."""

    SET_ROOT = auto()
    SET_NODE = auto()
    REMOVE_NODE = auto()
    SET_CHILDREN = auto()
    REMOVE_CHILDREN = auto()


@dataclass(frozen=True)
class Patch:
    """A single change to one entry of a snapshot.

    Parameters
    ----------
    op:
        What to do.
    key:
        The node id the change applies to (the new root id for ``SET_ROOT``).
    value:
        The node for ``SET_NODE``, the children tuple for ``SET_CHILDREN``,
        ``None`` otherwise.
    """

    op: PatchOp
    key: str
    value: Union[Node, tuple[str, ...], None] = None

    def __str__(self) -> str:
        if self.op is PatchOp.SET_NODE:
            return f"[~] node {self.key}: {self.value!r}"
        if self.op is PatchOp.REMOVE_NODE:
            return f"[-] node {self.key}"
        if self.op is PatchOp.SET_CHILDREN:
            return f"[~] children {self.key}: {list(self.value or ())}"
        if self.op is PatchOp.REMOVE_CHILDREN:
            return f"[-] children {self.key}"
        return f"[~] root {self.key}"


def _diff_mapping(
    old: Mapping[str, object],
    new: Mapping[str, object],
    set_op: PatchOp,
    remove_op: PatchOp,
    forward: list[Patch],
    inverse: list[Patch],
) -> None:
    if old is new:
        return
    for key, value in new.items():
        previous = old.get(key)
        if previous is value:
            continue
        if key not in old:
            forward.append(Patch(set_op, key, value))  # type: ignore[arg-type]
            inverse.append(Patch(remove_op, key))
        elif previous != value:
            forward.append(Patch(set_op, key, value))  # type: ignore[arg-type]
            inverse.append(Patch(set_op, key, previous))  # type: ignore[arg-type]
    for key, value in old.items():
        if key not in new:
            forward.append(Patch(remove_op, key))
            inverse.append(Patch(set_op, key, value))  # type: ignore[arg-type]


def diff_states(old: TreeState, new: TreeState) -> tuple[list[Patch], list[Patch]]:
    """Return ``(forward, inverse)`` patch lists turning ``old`` into ``new`` and back."""
    forward: list[Patch] = []
    inverse: list[Patch] = []
    if old is new:
        return forward, inverse
    if old.root_id != new.root_id:
        forward.append(Patch(PatchOp.SET_ROOT, new.root_id))
        inverse.append(Patch(PatchOp.SET_ROOT, old.root_id))
    _diff_mapping(
        old.nodes_by_id, new.nodes_by_id, PatchOp.SET_NODE, PatchOp.REMOVE_NODE, forward, inverse
    )
    _diff_mapping(
        old.children_by_id,
        new.children_by_id,
        PatchOp.SET_CHILDREN,
        PatchOp.REMOVE_CHILDREN,
        forward,
        inverse,
    )
    return forward, inverse


def apply_patches(state: TreeState, patches: Iterable[Patch]) -> TreeState:
    """Return a new snapshot with ``patches`` applied to ``state``."""
    root_id = state.root_id
    nodes: dict[str, Node] | None = None
    children: dict[str, tuple[str, ...]] | None = None

    for patch in patches:
        if patch.op is PatchOp.SET_ROOT:
            root_id = patch.key
        elif patch.op in (PatchOp.SET_NODE, PatchOp.REMOVE_NODE):
            if nodes is None:
                nodes = dict(state.nodes_by_id)
            if patch.op is PatchOp.SET_NODE:
                nodes[patch.key] = patch.value  # type: ignore[assignment]
            else:
                nodes.pop(patch.key, None)
        else:
            if children is None:
                children = dict(state.children_by_id)
            if patch.op is PatchOp.SET_CHILDREN:
                children[patch.key] = patch.value  # type: ignore[assignment]
            else:
                children.pop(patch.key, None)

    return TreeState(
        root_id=root_id,
        nodes_by_id=nodes if nodes is not None else state.nodes_by_id,
        children_by_id=children if children is not None else state.children_by_id,
    )
