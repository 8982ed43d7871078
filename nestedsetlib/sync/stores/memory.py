"""In-memory store for nestedsetlib.

Nodes live in a dict keyed by name. Range queries scan every node, which
matches the O(N) cost of the mutations themselves.
"""

import logging
from contextlib import contextmanager
from dataclasses import replace
from typing import Dict, Iterator, List, Optional

from ..._common.node import NestedSetNode
from ..core.store import BoundShift, NestedSetStore

logger = logging.getLogger(__name__)


class MemoryStore(NestedSetStore):
    """Process-local store backed by a dict.

    transaction() snapshots every node on entry and restores the snapshot if
    the block raises, so a failed operation leaves no partial bound state.
    """

    def __init__(self, nodes: Optional[List[NestedSetNode]] = None):
        """Initialize the store.

        Args:
            nodes: Optional initial nodes, copied into the store
        """
        self._nodes: Dict[str, NestedSetNode] = {}
        self._snapshot: Optional[Dict[str, NestedSetNode]] = None
        self._depth = 0
        for node in nodes or []:
            self.insert(node)

    # Reads

    def get(self, name: str) -> Optional[NestedSetNode]:
        node = self._nodes.get(name)
        return replace(node) if node is not None else None

    def all(self) -> List[NestedSetNode]:
        return [replace(n) for n in sorted(self._nodes.values(), key=lambda n: n.left)]

    def descendants(self, node: NestedSetNode, max_depth: Optional[int] = None,
                    include_self: bool = False) -> List[NestedSetNode]:
        max_level = node.depth + max_depth if max_depth is not None else None
        found = [
            n for n in self._nodes.values()
            if (node.covers(n) if include_self else node.contains(n))
            and (max_level is None or n.depth <= max_level)
        ]
        return [replace(n) for n in sorted(found, key=lambda n: n.left)]

    def ancestors(self, node: NestedSetNode) -> List[NestedSetNode]:
        found = [n for n in self._nodes.values() if n.contains(node)]
        return [replace(n) for n in sorted(found, key=lambda n: n.left)]

    def count(self) -> int:
        return len(self._nodes)

    def exists(self, name: str) -> bool:
        return name in self._nodes

    # Writes

    def insert(self, node: NestedSetNode) -> None:
        if node.name in self._nodes:
            raise KeyError(f"node {node.name!r} already stored")
        self._nodes[node.name] = replace(node)

    def delete_range(self, left: int, right: int) -> int:
        doomed = [name for name, n in self._nodes.items() if n.left >= left and n.right <= right]
        for name in doomed:
            del self._nodes[name]
        return len(doomed)

    def shift_bounds(self, shift: BoundShift) -> int:
        updated = 0
        for node in self._nodes.values():
            value = getattr(node, shift.column)
            if shift.matches(value):
                setattr(node, shift.column, value + shift.delta)
                updated += 1
        return updated

    def set_parent_and_depth(self, name: str, parent: Optional[str],
                             depth: Optional[int] = None) -> None:
        node = self._nodes[name]
        node.parent = parent
        if depth is not None:
            node.depth = depth

    def hide_range(self, left: int, right: int) -> int:
        hidden = 0
        for node in self._nodes.values():
            if node.left >= left and node.right <= right:
                node.left, node.right = -node.left, -node.right
                hidden += 1
        return hidden

    def reveal_hidden(self, shift: int, delta_depth: int) -> int:
        revealed = 0
        for node in self._nodes.values():
            if node.left < 0:
                node.left = shift - node.left
                node.right = shift - node.right
                node.depth += delta_depth
                revealed += 1
        return revealed

    def clear(self) -> None:
        self._nodes.clear()

    # Lifecycle

    @contextmanager
    def transaction(self) -> Iterator["MemoryStore"]:
        if self._depth == 0:
            self._snapshot = {name: replace(n) for name, n in self._nodes.items()}
        self._depth += 1
        try:
            yield self
        except BaseException:
            if self._depth == 1:
                logger.warning("Rolling back memory store to %d node(s)", len(self._snapshot))
                self._nodes = self._snapshot
            raise
        finally:
            self._depth -= 1
            if self._depth == 0:
                self._snapshot = None

    def supports_transactions(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"MemoryStore(nodes={len(self._nodes)})"
