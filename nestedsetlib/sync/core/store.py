"""NestedSetStore abstraction for nestedsetlib.

The store owns the authoritative collection of nodes. It knows nothing about
the nested-set algorithms: it answers name and range queries and applies bulk
bound updates. The engine (NestedSetTree) is written once against this
interface, so any store that satisfies it can back a tree.
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, List, Optional

from ..._common.node import NestedSetNode


BOUND_COLUMNS = ("left", "right")


@dataclass(frozen=True)
class BoundShift:
    """A bulk update of one bound column.

    Adds ``delta`` to ``column`` on every node whose current value in that
    column lies within ``[minimum, maximum]``. Either side of the window may
    be omitted. Both ends are inclusive; strict comparisons are expressed by
    moving the end by one, which is exact for integer bounds.
    """

    column: str
    delta: int
    minimum: Optional[int] = None
    maximum: Optional[int] = None

    def __post_init__(self):
        if self.column not in BOUND_COLUMNS:
            raise ValueError(f"column must be one of {BOUND_COLUMNS}, got {self.column!r}")

    def matches(self, value: int) -> bool:
        if self.minimum is not None and value < self.minimum:
            return False
        if self.maximum is not None and value > self.maximum:
            return False
        return True

    def is_empty(self) -> bool:
        """True when no value can match."""
        return (self.minimum is not None and self.maximum is not None
                and self.minimum > self.maximum)


class NestedSetStore(ABC):
    """Abstract store holding the nodes of one nested-set tree.

    Reads return detached copies: mutating a returned node never changes the
    store. All writes issued inside one ``transaction()`` block are applied
    as a single atomic batch.
    """

    # Reads

    @abstractmethod
    def get(self, name: str) -> Optional[NestedSetNode]:
        """Get a node by name.

        Args:
            name: Unique node name

        Returns:
            The node, or None if no node has this name
        """
        pass

    @abstractmethod
    def all(self) -> List[NestedSetNode]:
        """Return every node ordered by left ascending."""
        pass

    @abstractmethod
    def descendants(self, node: NestedSetNode, max_depth: Optional[int] = None,
                    include_self: bool = False) -> List[NestedSetNode]:
        """Get nodes inside a node's bounds, ordered by left.

        Args:
            node: Subtree root
            max_depth: Only nodes with depth <= node.depth + max_depth
            include_self: Include node itself in the result

        Returns:
            Descendant nodes in preorder
        """
        pass

    @abstractmethod
    def ancestors(self, node: NestedSetNode) -> List[NestedSetNode]:
        """Get nodes whose bounds strictly contain node's, ordered by left."""
        pass

    def count(self) -> int:
        """Number of nodes. Stores can override with a cheaper query."""
        return len(self.all())

    def exists(self, name: str) -> bool:
        return self.get(name) is not None

    # Writes

    @abstractmethod
    def insert(self, node: NestedSetNode) -> None:
        """Insert one node. The name must not exist yet."""
        pass

    @abstractmethod
    def delete_range(self, left: int, right: int) -> int:
        """Delete every node whose bounds fall within [left, right].

        Returns:
            Number of deleted nodes
        """
        pass

    @abstractmethod
    def shift_bounds(self, shift: BoundShift) -> int:
        """Apply a bulk bound update.

        Returns:
            Number of updated nodes
        """
        pass

    @abstractmethod
    def set_parent_and_depth(self, name: str, parent: Optional[str],
                             depth: Optional[int] = None) -> None:
        """Point a node at a new parent without touching its bounds.

        Args:
            name: Node to update
            parent: New parent name, None only for the root
            depth: New depth, or None to keep the current one
        """
        pass

    @abstractmethod
    def hide_range(self, left: int, right: int) -> int:
        """Negate the bounds of every node within [left, right].

        Hidden nodes keep their relative order and never match a shift
        window with positive ends.

        Returns:
            Number of hidden nodes
        """
        pass

    @abstractmethod
    def reveal_hidden(self, shift: int, delta_depth: int) -> int:
        """Re-anchor every hidden node.

        For each node with negative bounds: ``left = shift - left``,
        ``right = shift - right`` and ``depth += delta_depth``.

        Returns:
            Number of revealed nodes
        """
        pass

    @abstractmethod
    def clear(self) -> None:
        """Delete every node."""
        pass

    # Lifecycle

    @contextmanager
    def transaction(self) -> Iterator["NestedSetStore"]:
        """Group writes into one atomic batch.

        Default implementation provides no atomicity. Stores override it;
        nested blocks join the outermost one.
        """
        yield self

    def close(self) -> None:
        """Release resources held by the store."""
        pass

    def __enter__(self) -> "NestedSetStore":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # Capability flags

    def is_persistent(self) -> bool:
        """Check if nodes outlive the process.

        Returns:
            True if a reopened store sees the same nodes
        """
        return False

    def supports_transactions(self) -> bool:
        """Check if transaction() gives all-or-nothing semantics."""
        return False

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
