"""Asynchronous access to nestedsetlib.

The engine itself is synchronous. This package lets asyncio applications
share one tree between many tasks while keeping the single-writer model:
calls are serialized and run off the event loop.
"""

from .tree import AsyncNestedSetTree, open_tree_async

# Configuration (re-exported from _common)
from .._common.config import StoreBackend, StoreConfig, TreeConfig

__all__ = [
    'AsyncNestedSetTree',
    'open_tree_async',
    'StoreBackend',
    'StoreConfig',
    'TreeConfig',
]
