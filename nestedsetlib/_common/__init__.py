"""Common components shared between sync and aio implementations.

This internal package contains non-I/O code that is identical between
both implementations. It should NOT be imported directly by users.

Components here include:
- Configuration classes (TreeConfig)
- The node model and error hierarchy
- Invariant validation (pure computation, no I/O)

Important: This package must NEVER import from sync or aio to avoid
circular dependencies.
"""

from .config import StoreBackend, StoreConfig, TreeConfig
from .node import NestedSetNode
from .validation import find_violations
from .exceptions import (
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

__all__ = [
    'StoreBackend',
    'StoreConfig',
    'TreeConfig',
    'NestedSetNode',
    'find_violations',
    'NestedSetError',
    'InvalidNameError',
    'NodeNotFoundError',
    'ParentNotFoundError',
    'DuplicateNameError',
    'SelfMoveError',
    'CycleViolationError',
    'RootOperationError',
    'NoLegalMoveError',
    'InvariantViolationError',
    'ConfigurationError',
]
