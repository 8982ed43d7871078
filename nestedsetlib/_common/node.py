"""Node model for nested-set trees.

A node is a plain data container. It holds no references to other nodes,
only the name of its parent, so the bounds stored alongside it are the single
source of truth for the tree shape.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional


@dataclass
class NestedSetNode:
    """One node of a nested-set tree.

    Attributes:
        name: Unique, stable identifier used as the public handle
        parent: Name of the immediate parent, or None for the root
        left: Opening bound of the node's interval
        right: Closing bound of the node's interval
        depth: Number of strict ancestors
    """

    name: str
    parent: Optional[str]
    left: int
    right: int
    depth: int = 0

    @property
    def width(self) -> int:
        """Subtree width, twice the number of nodes in the subtree."""
        return self.right - self.left + 1

    @property
    def size(self) -> int:
        """Number of nodes in the subtree, this node included."""
        return self.width // 2

    @property
    def is_root(self) -> bool:
        return self.parent is None

    @property
    def is_leaf(self) -> bool:
        return self.right == self.left + 1

    @property
    def is_hidden(self) -> bool:
        """True while the node is detached by an in-flight move."""
        return self.left < 0

    def contains(self, other: "NestedSetNode") -> bool:
        """Check if this node's bounds strictly contain other's bounds."""
        return self.left < other.left and other.right < self.right

    def covers(self, other: "NestedSetNode") -> bool:
        """Like contains() but also true for the node itself."""
        return self.left <= other.left and other.right <= self.right

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_mapping(cls, row: Any) -> "NestedSetNode":
        """Build a node from any mapping with the five node fields."""
        return cls(
            name=row["name"],
            parent=row["parent"],
            left=row["left"],
            right=row["right"],
            depth=row["depth"],
        )

    def __str__(self) -> str:
        return f"{self.name} [{self.left}, {self.right}] d={self.depth}"
