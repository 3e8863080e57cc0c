"""treekit adapters: the versioned JSON/YAML envelope boundary."""
from __future__ import annotations

from treekit.adapters.serializer import (
    FORMAT_VERSION,
    TreeDeserializationError,
    TreeSerializer,
    deserialize_tree_state,
    serialize_tree_state,
)

__all__ = [
    "FORMAT_VERSION",
    "TreeDeserializationError",
    "TreeSerializer",
    "deserialize_tree_state",
    "serialize_tree_state",
]
