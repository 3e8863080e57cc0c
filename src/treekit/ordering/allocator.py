"""Order-key allocation for sibling lists.

Sibling order is encoded in string integer keys spaced ``order_gap``
apart, so most inserts can pick a key between two neighbours without
touching them.  When the neighbours are too close the whole sibling list
is renormalized to ``0, gap, 2 * gap, ...``.

Rules, for a node inserted under a parent whose other children have keys
``k_0 < k_1 < ... < k_n``:

    no siblings              requested key, or "0" when blank
    blank key                max + gap, appended
    key == key of the only   sibling key + gap, appended
      sibling
    key above every sibling  max + gap, appended
    key at or below the min  min - gap, prepended
    otherwise                placed before the first sibling whose key is
                             >= the requested key: midpoint of the two
                             neighbours while they are more than
                             ``min_order_gap`` (and at least 2) apart,
                             else renormalize
"""
from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from treekit.config import DEFAULT_CONFIG, TreeConfig
from treekit.invariants.checks import parse_order_key
from treekit.model.nodes import Node, TreeState
from treekit.model.queries import find_children

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeyAllocation:
    """Outcome of allocating a key for one incoming node.

    Parameters
    ----------
    order_key:
        Final key of the incoming node.
    index:
        Position of the incoming node in the new sibling list.
    renumbered:
        When the list was renormalized, the new key of every sibling
        including the incoming node; otherwise ``None``.
    ordered_ids:
        When the list was renormalized, the full new sibling order;
        otherwise ``None``.
    """

    order_key: str
    index: int
    renumbered: dict[str, str] | None = None
    ordered_ids: tuple[str, ...] | None = None

    @property
    def is_renormalized(self) -> bool:
        return self.renumbered is not None


def midpoint_key(lower: int, upper: int) -> int:
    """Integer midpoint of two keys, strictly between them when ``upper - lower >= 2``."""
    return lower + (upper - lower) // 2


def normalize_order_keys(node_ids: Sequence[str], config: TreeConfig | None = None) -> dict[str, str]:
    """Assign evenly spaced keys ``0, gap, 2 * gap, ...`` in the given order."""
    gap = (config or DEFAULT_CONFIG).order_gap
    return {node_id: str(index * gap) for index, node_id in enumerate(node_ids)}


def _sibling_keys(siblings: Sequence[Node]) -> list[int]:
    keys: list[int] = []
    for sibling in siblings:
        key = parse_order_key(sibling.order_key)
        if key is None:
            raise ValueError(f"sibling {sibling.id!r} has a non-numeric order key {sibling.order_key!r}")
        keys.append(key)
    return keys


def allocate_order_key(
    state: TreeState,
    parent_id: str,
    node: Node,
    config: TreeConfig | None = None,
) -> KeyAllocation:
    """Decide the key of ``node`` when it joins the children of ``parent_id``.

    The current children of ``parent_id`` must be consistent and strictly
    ordered; ``node`` itself is ignored if it is already listed.  This
    function does not report failures as values: callers run
    ``check_order_keys_strict`` on the parent and validate the requested
    key first, as the operation engine does, so the ``ValueError`` below
    only signals misuse.

    Raises
    ------
    ValueError
        If the requested key is neither blank nor numeric, or a sibling
        key is not numeric.
    """
    config = config or DEFAULT_CONFIG
    gap = config.order_gap
    siblings = [child for child in find_children(state, parent_id) if child.id != node.id]
    keys = _sibling_keys(siblings)

    requested_text = (node.order_key or "").strip()
    requested: int | None = None
    if requested_text:
        requested = parse_order_key(requested_text)
        if requested is None:
            raise ValueError(f"requested order key {node.order_key!r} is not numeric")

    if not siblings:
        return KeyAllocation(order_key=str(requested if requested is not None else 0), index=0)

    if requested is None or (len(keys) == 1 and requested == keys[0]):
        anchor = max(keys) if requested is None else keys[0]
        return KeyAllocation(order_key=str(anchor + gap), index=len(siblings))

    # Position before the first sibling whose key is >= the requested key.
    upper_index = next((i for i, key in enumerate(keys) if key >= requested), None)
    if upper_index is None:
        return KeyAllocation(order_key=str(keys[-1] + gap), index=len(siblings))
    if upper_index == 0:
        return KeyAllocation(order_key=str(keys[0] - gap), index=0)

    lower, upper = keys[upper_index - 1], keys[upper_index]
    # Adjacent integers have no key between them.
    if upper - lower > max(config.min_order_gap, 1):
        return KeyAllocation(order_key=str(midpoint_key(lower, upper)), index=upper_index)

    ordered_ids = [sibling.id for sibling in siblings]
    ordered_ids.insert(upper_index, node.id)
    renumbered = normalize_order_keys(ordered_ids, config)
    logger.debug(
        "Renormalized %d children of %r to place %r", len(ordered_ids), parent_id, node.id
    )
    return KeyAllocation(
        order_key=renumbered[node.id],
        index=upper_index,
        renumbered=renumbered,
        ordered_ids=tuple(ordered_ids),
    )
