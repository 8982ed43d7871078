"""Core abstractions for nestedsetlib.

This module contains the store interface and the engine written against it.
"""

from .store import NestedSetStore, BoundShift
from .tree import NestedSetTree, Mutation

__all__ = [
    "NestedSetStore",
    "BoundShift",
    "NestedSetTree",
    "Mutation",
]
