"""nestedsetlib - Nested-set tree maintenance.

nestedsetlib stores a tree with the nested-set (modified preorder tree
traversal) encoding: every node carries integer bounds, and ancestry
questions become range comparisons. The engine keeps those bounds
consistent through insertions, removals and subtree moves, over either an
in-memory store or a database table.

Choose your implementation:
━━━━━━━━━━━━━━━━━━━━━━━━━━
Synchronous:
    from nestedsetlib.sync import open_tree

Asynchronous:
    from nestedsetlib.aio import open_tree_async
━━━━━━━━━━━━━━━━━━━━━━━━━━
"""

__version__ = "0.1.0"

# Re-export submodules for convenient access
from . import sync
from . import aio

# Errors are shared by both implementations
from ._common.exceptions import (
    NestedSetError,
    InvalidNameError,
    NodeNotFoundError,
    ParentNotFoundError,
    DuplicateNameError,
    SelfMoveError,
    CycleViolationError,
    RootOperationError,
    NoLegalMoveError,
    InvariantViolationError,
    ConfigurationError,
)
from ._common.node import NestedSetNode

__all__ = [
    "__version__",
    "sync",
    "aio",
    "NestedSetNode",
    "NestedSetError",
    "InvalidNameError",
    "NodeNotFoundError",
    "ParentNotFoundError",
    "DuplicateNameError",
    "SelfMoveError",
    "CycleViolationError",
    "RootOperationError",
    "NoLegalMoveError",
    "InvariantViolationError",
    "ConfigurationError",
]
