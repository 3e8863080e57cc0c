"""Shared test fixtures for treekit.

Fixtures defined here are available to all tests in the suite without
needing an explicit import. Add project-wide fixtures here; keep
domain-specific fixtures close to the tests that use them.
"""
from __future__ import annotations

import itertools
from collections.abc import Callable

import pytest

from treekit.model.nodes import Node, TreeState


@pytest.fixture()
def package_name() -> str:
    """Return the importable package name for assertions."""
    return "treekit"


@pytest.fixture()
def expected_version() -> str:
    """Return the current expected version string.

    Update this fixture when cutting a release so that the version
    test immediately catches stale ``__version__`` values.
    """
    return "0.1.0"


@pytest.fixture()
def id_factory() -> Callable[[], str]:
    """Deterministic id source yielding ``id-1``, ``id-2``, ..."""
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture()
def sample_state() -> TreeState:
    """A small tree::

        root
        ├── child1 (0)
        │   ├── grand1 (0)
        │   └── grand2 (10)
        ├── child2 (10)
        └── child3 (20)
    """
    nodes = {
        "root": Node(id="root", name="Root", parent_id=None, order_key="0"),
        "child1": Node(id="child1", name="Child 1", parent_id="root", order_key="0"),
        "child2": Node(id="child2", name="Child 2", parent_id="root", order_key="10"),
        "child3": Node(id="child3", name="Child 3", parent_id="root", order_key="20"),
        "grand1": Node(id="grand1", name="Grand 1", parent_id="child1", order_key="0"),
        "grand2": Node(id="grand2", name="Grand 2", parent_id="child1", order_key="10"),
    }
    children = {
        "root": ("child1", "child2", "child3"),
        "child1": ("grand1", "grand2"),
        "child2": (),
        "child3": (),
        "grand1": (),
        "grand2": (),
    }
    return TreeState(root_id="root", nodes_by_id=nodes, children_by_id=children)
