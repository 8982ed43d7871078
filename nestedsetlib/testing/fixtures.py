"""Test fixtures for nestedsetlib consumers.

These fixtures provide controlled access to tree state for testing purposes
without exposing store internals as part of the public API.
"""

from typing import Any, Dict, Tuple

from .._common.exceptions import InvariantViolationError
from ..sync.core.tree import NestedSetTree


class TreeTestHelper:
    """Public test fixture for nested-set verification.

    This class provides a stable testing interface for checking tree
    invariants and comparing bound states. It's designed for use in test
    suites of projects that consume nestedsetlib.

    Example:
        helper = TreeTestHelper(tree)
        before = helper.snapshot()
        tree.add_node("x", "a")
        tree.remove_node("x")
        assert helper.snapshot() == before
        helper.assert_valid()
    """

    def __init__(self, tree: NestedSetTree):
        """Initialize with the tree under test.

        Args:
            tree: Tree to inspect
        """
        self._tree = tree

    def snapshot(self) -> Dict[str, Tuple[int, int, int]]:
        """Returns name -> (left, right, depth) for every node."""
        return {n.name: (n.left, n.right, n.depth) for n in self._tree.nodes()}

    def parents(self) -> Dict[str, Any]:
        """Returns name -> parent name for every node."""
        return {n.name: n.parent for n in self._tree.nodes()}

    def get_summary(self) -> Dict[str, Any]:
        """Returns high-level tree state for testing.

        Returns:
            Dictionary containing:
            - total_nodes: Number of nodes
            - max_right: Largest bound value
            - count_law: Whether max_right == 2 * total_nodes
            - depth_law: Whether every depth equals its ancestor count
            - is_valid: Whether validate() found nothing
        """
        nodes = self._tree.nodes()
        max_right = max((n.right for n in nodes), default=0)
        depth_law = all(
            n.depth == len(self._tree.get_parents(n.name)) for n in nodes
        )
        return {
            'total_nodes': len(nodes),
            'max_right': max_right,
            'count_law': max_right == 2 * len(nodes),
            'depth_law': depth_law,
            'is_valid': self._tree.is_valid(),
        }

    def assert_valid(self) -> None:
        """Raise InvariantViolationError with history if the tree is broken."""
        errors = self._tree.validate()
        if errors:
            raise InvariantViolationError(errors, list(self._tree.history))

    def assert_same_shape(self, other: NestedSetTree) -> None:
        """Raise AssertionError unless other has identical nodes and bounds."""
        mine = self.snapshot()
        theirs = TreeTestHelper(other).snapshot()
        if mine != theirs:
            differing = sorted(
                name for name in set(mine) | set(theirs)
                if mine.get(name) != theirs.get(name)
            )
            raise AssertionError(f"Trees differ at: {differing}")
