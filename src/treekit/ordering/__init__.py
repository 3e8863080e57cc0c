"""treekit ordering module: fractional order-key allocation and renormalization."""
from __future__ import annotations

from treekit.ordering.allocator import (
    KeyAllocation,
    allocate_order_key,
    midpoint_key,
    normalize_order_keys,
)

__all__ = [
    "KeyAllocation",
    "allocate_order_key",
    "midpoint_key",
    "normalize_order_keys",
]
