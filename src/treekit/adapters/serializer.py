"""Serialization of ``TreeState`` snapshots to and from an external envelope.

The wire format is a versioned envelope whose ``tree`` field holds the
snapshot as JSON text::

    {"version": 1, "tree": "{\\"rootId\\": \\"r\\", \\"nodesById\\": {...}, \\"childrenById\\": {...}}"}

The inner document uses the field names ``rootId``, ``nodesById``,
``childrenById``, ``id``, ``name``, ``parentId`` and ``orderKey``.  The
envelope itself may be written as JSON or YAML.

Loading is a boundary check, separate from the engine's own invariant
layer: malformed input raises ``TreeDeserializationError`` with a
field-specific reason and no snapshot is produced.

Usage
-----
::

    from treekit.adapters import TreeSerializer

    serializer = TreeSerializer()
    text = serializer.to_json(state)
    assert serializer.from_json(text) == state
"""
from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

import yaml

from treekit.invariants.checks import check_tree, parse_order_key
from treekit.model.nodes import Node, TreeState

FORMAT_VERSION = 1

_NODE_FIELDS = ("id", "name", "parentId", "orderKey")


class TreeDeserializationError(ValueError):
    """Raised when an external payload does not describe a valid tree."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Invalid tree: {reason}")


def _fail(reason: str) -> TreeDeserializationError:
    return TreeDeserializationError(reason)


class TreeSerializer:
    """Converts between ``TreeState`` snapshots and the versioned envelope."""

    # ------------------------------------------------------------------
    # Serialization (TreeState -> envelope)
    # ------------------------------------------------------------------

    def to_dict(self, state: TreeState) -> dict[str, Any]:
        """Return the inner tree document as a JSON-compatible dict."""
        return {
            "rootId": state.root_id,
            "nodesById": {
                node_id: self._node_to_dict(node) for node_id, node in state.nodes_by_id.items()
            },
            "childrenById": {
                parent_id: list(children) for parent_id, children in state.children_by_id.items()
            },
        }

    def _node_to_dict(self, node: Node) -> dict[str, Any]:
        return {
            "id": node.id,
            "name": node.name,
            "parentId": node.parent_id,
            "orderKey": node.order_key,
        }

    def to_envelope(self, state: TreeState) -> dict[str, Any]:
        return {
            "version": FORMAT_VERSION,
            "tree": json.dumps(self.to_dict(state), ensure_ascii=False, separators=(",", ":")),
        }

    def to_json(self, state: TreeState, indent: int | None = 2) -> str:
        return json.dumps(self.to_envelope(state), indent=indent, ensure_ascii=False)

    def to_yaml(self, state: TreeState) -> str:
        return yaml.safe_dump(self.to_envelope(state), default_flow_style=False, allow_unicode=True)

    # ------------------------------------------------------------------
    # Deserialization (envelope -> TreeState)
    # ------------------------------------------------------------------

    def from_json(self, text: str) -> TreeState:
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise _fail(f"envelope is not valid JSON ({exc.msg})") from exc
        return self.from_envelope(payload)

    def from_yaml(self, text: str) -> TreeState:
        try:
            payload = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise _fail(f"envelope is not valid YAML ({exc})") from exc
        return self.from_envelope(payload)

    def from_envelope(self, payload: object) -> TreeState:
        """Validate an envelope and return the snapshot it carries."""
        if not isinstance(payload, Mapping):
            raise _fail("envelope must be an object with 'version' and 'tree'")
        version = payload.get("version")
        if version != FORMAT_VERSION or isinstance(version, bool):
            raise _fail(f"unsupported envelope version {version!r}, expected {FORMAT_VERSION}")
        tree = payload.get("tree")
        if not isinstance(tree, str):
            raise _fail("envelope 'tree' must be a JSON string")
        try:
            data = json.loads(tree)
        except json.JSONDecodeError as exc:
            raise _fail(f"tree is not valid JSON ({exc.msg})") from exc
        return self.from_dict(data)

    def from_dict(self, data: object) -> TreeState:
        """Validate an inner tree document and build the snapshot."""
        if not isinstance(data, Mapping):
            raise _fail("tree must be an object")

        root_id = data.get("rootId")
        if not isinstance(root_id, str) or not root_id:
            raise _fail("rootId must be a non-empty string")

        raw_nodes = data.get("nodesById")
        if not isinstance(raw_nodes, Mapping):
            raise _fail("nodesById must be an object mapping ids to nodes")
        raw_children = data.get("childrenById")
        if not isinstance(raw_children, Mapping):
            raise _fail("childrenById must be an object mapping ids to lists of ids")

        nodes = {key: self._node_from_dict(key, value) for key, value in raw_nodes.items()}

        if root_id not in nodes:
            raise _fail(f"rootId {root_id!r} is not present in nodesById")
        if nodes[root_id].parent_id is not None:
            raise _fail(f"root node {root_id!r} must have a null parentId")

        children = self._children_from_dict(raw_children, nodes)
        self._check_membership(root_id, nodes, children)
        self._check_ordering(nodes, children)

        state = TreeState(root_id=root_id, nodes_by_id=nodes, children_by_id=children)
        audit = check_tree(state)
        if not audit.success:
            raise _fail(str(audit.error))
        return state

    def _node_from_dict(self, key: object, value: object) -> Node:
        if not isinstance(key, str) or not key:
            raise _fail("nodesById keys must be non-empty strings")
        if not isinstance(value, Mapping):
            raise _fail(f"node {key!r} must be an object")
        for field_name in _NODE_FIELDS:
            if field_name not in value:
                raise _fail(f"node {key!r} is missing {field_name}")

        node_id = value["id"]
        if not isinstance(node_id, str) or not node_id:
            raise _fail(f"node {key!r} has an invalid id: must be a non-empty string")
        name = value["name"]
        if not isinstance(name, str):
            raise _fail(f"node {key!r} has an invalid name: must be a string")
        parent_id = value["parentId"]
        if parent_id is not None and (not isinstance(parent_id, str) or not parent_id):
            raise _fail(f"node {key!r} has an invalid parentId: must be null or a non-empty string")
        order_key = value["orderKey"]
        if not isinstance(order_key, str) or not order_key:
            raise _fail(f"node {key!r} has an invalid orderKey: must be a non-empty string")
        if node_id != key:
            raise _fail(f"node indexed by {key!r} has id {node_id!r}; keys must match node ids")
        return Node(id=node_id, name=name, parent_id=parent_id, order_key=order_key)

    def _children_from_dict(
        self, raw_children: Mapping[Any, Any], nodes: Mapping[str, Node]
    ) -> dict[str, tuple[str, ...]]:
        children: dict[str, tuple[str, ...]] = {}
        for parent_id, child_ids in raw_children.items():
            if parent_id not in nodes:
                raise _fail(f"childrenById references unknown parent {parent_id!r}")
            if not isinstance(child_ids, list):
                raise _fail(f"childrenById[{parent_id!r}] must be a list of ids")
            seen: set[str] = set()
            for child_id in child_ids:
                if not isinstance(child_id, str) or child_id not in nodes:
                    raise _fail(f"childrenById[{parent_id!r}] references unknown child {child_id!r}")
                if child_id in seen:
                    raise _fail(f"childrenById[{parent_id!r}] lists child {child_id!r} more than once")
                seen.add(child_id)
                if nodes[child_id].parent_id != parent_id:
                    raise _fail(
                        f"child {child_id!r} is listed under {parent_id!r} but its parentId is "
                        f"{nodes[child_id].parent_id!r}"
                    )
            children[parent_id] = tuple(child_ids)
        for node_id in nodes:
            children.setdefault(node_id, ())
        return children

    def _check_membership(
        self,
        root_id: str,
        nodes: Mapping[str, Node],
        children: Mapping[str, tuple[str, ...]],
    ) -> None:
        for node_id, node in nodes.items():
            if node_id == root_id:
                continue
            if node.parent_id is None:
                raise _fail(f"node {node_id!r} has a null parentId but is not the root")
            if node.parent_id not in nodes:
                raise _fail(f"node {node_id!r} references unknown parent {node.parent_id!r}")
            if node_id not in children[node.parent_id]:
                raise _fail(f"node {node_id!r} is not listed under its parent {node.parent_id!r}")

    def _check_ordering(
        self, nodes: Mapping[str, Node], children: Mapping[str, tuple[str, ...]]
    ) -> None:
        for parent_id, child_ids in children.items():
            previous: int | None = None
            for child_id in child_ids:
                key = parse_order_key(nodes[child_id].order_key)
                if key is None:
                    raise _fail(
                        f"node {child_id!r} has a non-numeric orderKey {nodes[child_id].order_key!r}"
                    )
                if previous is not None and key <= previous:
                    raise _fail(f"children of {parent_id!r} are not in strictly increasing orderKey order")
                previous = key


_default = TreeSerializer()


def serialize_tree_state(state: TreeState) -> dict[str, Any]:
    """Wrap ``state`` in a version 1 envelope."""
    return _default.to_envelope(state)


def deserialize_tree_state(payload: object) -> TreeState:
    """Validate a version 1 envelope and return its snapshot.

    Raises
    ------
    TreeDeserializationError
        If the envelope or the tree it carries is malformed.
    """
    return _default.from_envelope(payload)
