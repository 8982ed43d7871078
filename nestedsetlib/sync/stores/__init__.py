"""Store realizations for nestedsetlib.

Stores implement the NestedSetStore interface for different substrates,
so the same engine can run over any of them.
"""

from .memory import MemoryStore
from .sql import SQLStore, create_tree_engine

__all__ = [
    "MemoryStore",
    "SQLStore",
    "create_tree_engine",
]
