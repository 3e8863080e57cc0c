"""Failure values and result types returned by checks and operations.

Engine failures are values, never raised exceptions.  Every check and
every operation returns either a ``Success`` carrying its payload or a
``Failure`` carrying one of the ``OperationError`` dataclasses below.
Each error names the violated invariant through its ``kind`` and carries
the ids needed to diagnose it.

Usage
-----
::

    result = insert_node(state, parent_id, node)
    if result.success:
        state = result.data
    else:
        print(result.error)
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Generic, Literal, TypeVar, Union

from treekit.model.nodes import Node

T = TypeVar("T")


class ErrorKind(Enum):
    """Enumeration of every failure an engine check or operation can report."""

    INVALID_NODE = auto()
    DUPLICATE_NODE = auto()
    NODE_NOT_FOUND = auto()
    PARENT_NOT_FOUND = auto()
    CYCLE_DETECTED = auto()
    INVALID_ORDER_KEY = auto()
    INVALID_ORDER_SEQUENCE = auto()
    INVALID_UPDATE = auto()
    INVALID_MOVE = auto()

    @property
    def label(self) -> str:
        """CamelCase name, e.g. ``"NodeNotFound"``, used in move reasons and logs."""
        return "".join(part.capitalize() for part in self.name.split("_"))


# ---------------------------------------------------------------------------
# Error dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class InvalidNode:
    """The node payload is malformed (e.g. an empty id)."""

    node: Node
    kind: ErrorKind = ErrorKind.INVALID_NODE

    def __str__(self) -> str:
        return f"Invalid node {self.node!r}: id must be a non-empty string"


@dataclass(frozen=True)
class DuplicateNode:
    """An id is already taken, or listed twice under one parent."""

    node_id: str
    kind: ErrorKind = ErrorKind.DUPLICATE_NODE

    def __str__(self) -> str:
        return f"Duplicate node {self.node_id!r}"


@dataclass(frozen=True)
class NodeNotFound:
    node_id: str
    kind: ErrorKind = ErrorKind.NODE_NOT_FOUND

    def __str__(self) -> str:
        return f"Node {self.node_id!r} not found"


@dataclass(frozen=True)
class ParentNotFound:
    """The node has no resolvable parent, or is not listed under it."""

    node_id: str
    kind: ErrorKind = ErrorKind.PARENT_NOT_FOUND

    def __str__(self) -> str:
        return f"Parent of node {self.node_id!r} not found"


@dataclass(frozen=True)
class CycleDetected:
    """Following parent links revisits a node.

    ``path`` starts and ends with the revisited id.
    """

    path: tuple[str, ...]
    kind: ErrorKind = ErrorKind.CYCLE_DETECTED

    def __str__(self) -> str:
        return f"Cycle detected: {' -> '.join(self.path)}"


@dataclass(frozen=True)
class InvalidOrderKey:
    node_id: str
    order_key: str
    kind: ErrorKind = ErrorKind.INVALID_ORDER_KEY

    def __str__(self) -> str:
        return f"Node {self.node_id!r} has a non-numeric order key {self.order_key!r}"


@dataclass(frozen=True)
class InvalidOrderSequence:
    """Order keys under ``parent_id`` are not strictly increasing."""

    parent_id: str
    sequence: tuple[str, ...]
    kind: ErrorKind = ErrorKind.INVALID_ORDER_SEQUENCE

    def __str__(self) -> str:
        return (
            f"Children of {self.parent_id!r} are not in strictly increasing key order: "
            f"{', '.join(self.sequence)}"
        )


@dataclass(frozen=True)
class InvalidUpdate:
    node: Node
    reason: str
    kind: ErrorKind = ErrorKind.INVALID_UPDATE

    def __str__(self) -> str:
        return f"Invalid update of node {self.node.id!r}: {self.reason}"


@dataclass(frozen=True)
class InvalidMove:
    """A move was rejected; ``reason`` is the label of the underlying failure."""

    node_id: str
    parent_id: str
    reason: str
    kind: ErrorKind = ErrorKind.INVALID_MOVE

    def __str__(self) -> str:
        return f"Cannot move {self.node_id!r} under {self.parent_id!r}: {self.reason}"


OperationError = Union[
    InvalidNode,
    DuplicateNode,
    NodeNotFound,
    ParentNotFound,
    CycleDetected,
    InvalidOrderKey,
    InvalidOrderSequence,
    InvalidUpdate,
    InvalidMove,
]


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Success(Generic[T]):
    """A successful outcome carrying ``data``."""

    data: T
    success: Literal[True] = True


@dataclass(frozen=True)
class Failure:
    """A failed outcome carrying a typed ``error``."""

    error: OperationError
    success: Literal[False] = False


OperationResult = Union[Success[T], Failure]
