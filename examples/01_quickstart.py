#!/usr/bin/env python3
"""Example: Quickstart — treekit

Minimal working example: build a tree, edit it through the history
store, undo and redo, and round-trip it through the versioned envelope.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install treekit
"""
from __future__ import annotations

import treekit
from treekit import HistoryStore, Node


def outline(state: treekit.TreeState) -> str:
    return "\n".join(
        f"{'  ' * depth}- {node.name} (key {node.order_key})"
        for depth, node in treekit.iter_depth_first(state)
    )


def main() -> None:
    print(f"treekit version: {treekit.__version__}")

    # Step 1: Start a store with a fresh root
    store = HistoryStore()
    root_id = store.snapshot.root_id

    # Step 2: Append, then insert positionally between two siblings
    store.insert_node(root_id, Node(id="docs", name="Docs"))
    store.insert_node(root_id, Node(id="src", name="Source"))
    store.insert_node(root_id, Node(id="tests", name="Tests", order_key="10"))
    print(outline(store.snapshot))

    # Step 3: Failures are values, not exceptions
    result = store.move_node(root_id, "docs")
    if not result.success:
        print(f"Rejected: {result.error}")

    # Step 4: Reorder and undo
    store.reorder_sibling("src", 0)
    print(outline(store.snapshot))
    store.undo()
    print(f"After undo, first child: {store.snapshot.children_by_id[root_id][0]}")

    # Step 5: Serialize and restore
    envelope = treekit.serialize_tree_state(store.snapshot)
    restored = treekit.deserialize_tree_state(envelope)
    print(f"Round-trip equal: {restored == store.snapshot}")


if __name__ == "__main__":
    main()
