"""Synchronous implementation of nestedsetlib.

This package contains the blocking store interface, the two store
realizations and the tree operations engine written against them.
"""

# Core components
from .core.store import NestedSetStore, BoundShift
from .core.tree import NestedSetTree, Mutation

# Stores
from .stores.memory import MemoryStore
from .stores.sql import SQLStore, create_tree_engine

# Configuration and planning
from .config import (
    StoreBackend,
    StoreConfig,
    TreeConfig,
)
from .planning import StorePlan, create_store

# High-level API
from .api import (
    REFERENCE_FOREST,
    open_tree,
    build_tree,
    to_nested,
    fuzz_moves,
    get_tree_stats,
)

__all__ = [
    # Core
    'NestedSetStore',
    'BoundShift',
    'NestedSetTree',
    'Mutation',
    # Stores
    'MemoryStore',
    'SQLStore',
    'create_tree_engine',
    # Config
    'StoreBackend',
    'StoreConfig',
    'TreeConfig',
    'StorePlan',
    'create_store',
    # API
    'REFERENCE_FOREST',
    'open_tree',
    'build_tree',
    'to_nested',
    'fuzz_moves',
    'get_tree_stats',
]
