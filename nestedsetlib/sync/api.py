"""High-level API for nestedsetlib.

This module provides simple, functional interfaces for common tree
operations. These functions wrap the object-oriented API for ease of use
in simple cases.
"""

import copy
import logging
import random
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from .._common.config import StoreBackend, TreeConfig
from .._common.exceptions import InvariantViolationError
from .core.tree import Mutation, NestedSetTree
from .planning import StorePlan

logger = logging.getLogger(__name__)


# Three branches under the root, 15 nodes besides it:
# a/aa/aaa/aaaa, a/ab, a/ac, b/ba/bbb/bbbb, b/bb, b/bc, c/cc, c/cb
REFERENCE_FOREST: List[Tuple[str, Optional[str]]] = [
    ("a", None), ("aa", "a"), ("aaa", "aa"), ("aaaa", "aaa"), ("ab", "a"), ("ac", "a"),
    ("b", None), ("ba", "b"), ("bbb", "ba"), ("bbbb", "bbb"), ("bb", "b"), ("bc", "b"),
    ("c", None), ("cc", "c"), ("cb", "c"),
]


def open_tree(config: Optional[TreeConfig] = None,
              backend: Union[StoreBackend, str, None] = None,
              **kwargs) -> NestedSetTree:
    """Simple interface for opening a tree.

    Args:
        config: Full configuration, defaults to TreeConfig()
        backend: Shortcut to pick the store backend ("memory" or "sql")
        **kwargs: Overrides applied to the config (root_name, seed, url, ...)

    Returns:
        NestedSetTree over a freshly built store

    Example:
        >>> tree = open_tree(backend="sql", url="sqlite:///tree.db")
        >>> tree.add_node("a")
        'Added a'
    """
    config = _build_config_from_kwargs(config, backend, **kwargs)
    return StorePlan(config).open_tree()


def build_tree(tree: NestedSetTree,
               edges: Iterable[Tuple[str, Optional[str]]] = REFERENCE_FOREST) -> NestedSetTree:
    """Add (name, parent) pairs in order; a None parent means the root.

    Returns:
        The same tree, for chaining
    """
    for name, parent in edges:
        tree.add_node(name, parent)
    return tree


def to_nested(tree: NestedSetTree, name: Optional[str] = None) -> Dict[str, Any]:
    """Rebuild the subtree under name as nested dicts.

    Each dict has "name" and "children" keys; children keep preorder.

    Args:
        tree: Tree to export
        name: Subtree root, defaults to the tree root

    Returns:
        Nested dict for the subtree root
    """
    nodes = tree.query(name or tree.root_name, include_self=True)
    top = {"name": nodes[0].name, "children": []}
    stack = [(nodes[0].name, top)]
    for node in nodes[1:]:
        item = {"name": node.name, "children": []}
        while stack and stack[-1][0] != node.parent:
            stack.pop()
        stack[-1][1]["children"].append(item)
        stack.append((node.name, item))
    return top


def fuzz_moves(tree: NestedSetTree, iterations: int,
               rng: Optional[random.Random] = None,
               validate_every: int = 1) -> List[Mutation]:
    """Stress the move operation with random relocations.

    Runs move_random_node repeatedly and validates the tree. The first
    violation stops the run.

    Args:
        tree: Tree with at least 3 nodes
        iterations: Number of random moves
        rng: Random source, defaults to the tree's own generator
        validate_every: Validate after every N moves (and after the last)

    Returns:
        Every move performed, in order

    Raises:
        InvariantViolationError: With the violations and every move so far
        NoLegalMoveError: If the tree is too small to move anything
    """
    if validate_every <= 0:
        raise ValueError("validate_every must be positive")

    moves: List[Mutation] = []
    for i in range(1, iterations + 1):
        name, destination = tree.move_random_node(rng)
        moves.append(Mutation("move", (name, destination), f"Moved {name} to {destination}"))

        if i % validate_every == 0 or i == iterations:
            errors = tree.validate()
            if errors:
                logger.error("Invariant violated after %d random move(s), last %s", i, moves[-1])
                raise InvariantViolationError(errors, moves)
    return moves


def get_tree_stats(tree: NestedSetTree) -> Dict[str, Any]:
    """Get statistics about a tree.

    Returns:
        Dictionary with node count, max bound, depth and leaf statistics
    """
    nodes = tree.nodes()
    stats: Dict[str, Any] = {
        'total_nodes': len(nodes),
        'max_bound': max((n.right for n in nodes), default=0),
        'max_depth': max((n.depth for n in nodes), default=0),
        'leaf_nodes': sum(1 for n in nodes if n.is_leaf),
        'depths': {},
    }
    for node in nodes:
        stats['depths'][node.depth] = stats['depths'].get(node.depth, 0) + 1
    stats['internal_nodes'] = stats['total_nodes'] - stats['leaf_nodes']
    return stats


# Helper functions

def _parse_backend(backend: Union[StoreBackend, str]) -> StoreBackend:
    """Parse backend from string or enum."""
    if isinstance(backend, StoreBackend):
        return backend

    backend_map = {
        'memory': StoreBackend.MEMORY,
        'mem': StoreBackend.MEMORY,
        'sql': StoreBackend.SQL,
        'sqlite': StoreBackend.SQL,
    }
    backend_lower = backend.lower() if isinstance(backend, str) else str(backend)
    if backend_lower in backend_map:
        return backend_map[backend_lower]

    raise ValueError(f"Unknown store backend: {backend}")


def _build_config_from_kwargs(config: Optional[TreeConfig],
                              backend: Union[StoreBackend, str, None],
                              **kwargs) -> TreeConfig:
    """Build TreeConfig from keyword arguments.

    Keys naming a StoreConfig field go to config.store, everything else
    to the TreeConfig itself.
    """
    config = copy.deepcopy(config) if config is not None else TreeConfig()
    if backend is not None:
        config.store.backend = _parse_backend(backend)

    for key, value in kwargs.items():
        if hasattr(config.store, key):
            setattr(config.store, key, value)
        elif hasattr(config, key):
            setattr(config, key, value)
        else:
            raise TypeError(f"Unknown tree option: {key}")
    return config
