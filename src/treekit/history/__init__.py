"""treekit history module: reversible patches and the undo/redo store."""
from __future__ import annotations

from treekit.history.patch import Patch, PatchOp, apply_patches, diff_states
from treekit.history.store import HistoryEntry, HistoryStore, Listener

__all__ = [
    "HistoryEntry",
    "HistoryStore",
    "Listener",
    "Patch",
    "PatchOp",
    "apply_patches",
    "diff_states",
]
